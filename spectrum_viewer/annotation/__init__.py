"""Number formatting and peak label visibility."""
