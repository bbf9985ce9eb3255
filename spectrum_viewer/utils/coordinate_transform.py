"""Coordinate transformation utilities for pixel <-> data conversion."""

from spectrum_viewer.core.models import Pane


class CoordinateTransform:
    """Coordinate transformation utilities for pixel <-> data conversion.

    Handles transformation between:
    - Image pixel coordinates (from mouse events, including margins)
    - Surface pixel coordinates (plot area, used by the gesture controller)
    - Data coordinates (m/z, intensity)

    Takes into account:
    - Plot margins
    - Mirrored panes (the "second" pane hangs down from the top)
    - Current viewport of the pane
    """

    def __init__(self, margin_left: int, margin_top: int):
        """Initialize transformer.

        Args:
            margin_left: Left margin in pixels
            margin_top: Top margin in pixels
        """
        self.margin_left = margin_left
        self.margin_top = margin_top

    def image_to_surface(self, pixel_x: float, pixel_y: float) -> tuple[float, float]:
        """Convert image pixel coordinates to plot surface coordinates."""
        return (pixel_x - self.margin_left, pixel_y - self.margin_top)

    def cursor_fraction(self, pane: Pane, pixel_x: float) -> float:
        """Horizontal pointer position as a fraction of the surface width."""
        plot_x = pixel_x - self.margin_left
        return max(0.0, min(1.0, plot_x / pane.width))

    def data_to_pixel(self, pane: Pane, mz: float, intensity: float) -> tuple[float, float]:
        """Convert m/z/intensity to image pixel coordinates.

        Intensities above the viewport maximum are clipped to the surface.

        Args:
            pane: Pane with the current viewport
            mz: m/z value
            intensity: Intensity value

        Returns:
            Tuple of (x, y) pixel coordinates including margins
        """
        mz_range = pane.mz_span
        if mz_range <= 0 or pane.max_intensity <= 0:
            return (float(self.margin_left), float(self.margin_top))

        x = (mz - pane.min_mz) / mz_range * pane.width
        fraction = max(0.0, min(1.0, intensity / pane.max_intensity))
        if pane.role == "second":
            y = fraction * pane.height
        else:
            y = (1 - fraction) * pane.height
        return (self.margin_left + x, self.margin_top + y)

    def baseline_y(self, pane: Pane) -> float:
        """Image y coordinate of the zero-intensity line."""
        if pane.role == "second":
            return float(self.margin_top)
        return float(self.margin_top + pane.height)

    def pixel_to_data(self, pane: Pane, pixel_x: float, pixel_y: float) -> tuple[float, float]:
        """Convert image pixel coordinates to m/z/intensity.

        Args:
            pane: Pane with the current viewport
            pixel_x: X pixel coordinate (including margin)
            pixel_y: Y pixel coordinate (including margin)

        Returns:
            Tuple of (mz, intensity) data coordinates
        """
        plot_x, plot_y = self.image_to_surface(pixel_x, pixel_y)

        # Clamp to plot area
        plot_x = max(0.0, min(float(pane.width), plot_x))
        plot_y = max(0.0, min(float(pane.height), plot_y))

        mz = pane.min_mz + (plot_x / pane.width) * pane.mz_span
        if pane.role == "second":
            intensity = (plot_y / pane.height) * pane.max_intensity
        else:
            intensity = (1 - plot_y / pane.height) * pane.max_intensity
        return (mz, intensity)
