"""Adaptive-precision number formatting for axis ticks and labels."""

import math

# Digits used when the span or value gives no usable magnitude
MAX_DIGITS = 100


def _clamp_digits(digits: int) -> int:
    return max(0, min(MAX_DIGITS, digits))


def span_digits(vmax: float, vmin: float, extra_digits: int = 0) -> int:
    """Number of decimals needed to resolve values within a span.

    Args:
        vmax: Upper bound of the visible range
        vmin: Lower bound of the visible range
        extra_digits: Additional decimals on top of the span-derived count

    Returns:
        Decimal digits, clamped to [0, 100]
    """
    span = vmax - vmin
    if not span > 0 or not math.isfinite(span):
        return MAX_DIGITS
    return _clamp_digits(math.ceil(-math.log10(span) + 2 + extra_digits))


def fancy_round(vmax: float, vmin: float, value: float, extra_digits: int = 0) -> str:
    """Format a value with precision that follows the zoom level.

    A 0.01 m/z wide view needs more decimals than a 1000 m/z wide view, so
    the digit count is derived from the span, not from the value.

    Args:
        vmax: Upper bound of the visible range
        vmin: Lower bound of the visible range
        value: Value to format
        extra_digits: Additional decimals (e.g. 1 for ruler readouts)

    Returns:
        Formatted string
    """
    return f"{value:.{span_digits(vmax, vmin, extra_digits)}f}"


def distance_label(vmax: float, vmin: float, value: float) -> str:
    """Format a measured m/z distance.

    Uses the larger of the span precision and the precision needed to show
    the distance itself with three significant digits, so small distances
    never collapse to zero in a zoomed-out view.

    Args:
        vmax: Upper bound of the visible range
        vmin: Lower bound of the visible range
        value: Distance to format

    Returns:
        Formatted string
    """
    if not value > 0 or not math.isfinite(value):
        return f"{value:.{MAX_DIGITS}f}"
    digits = max(span_digits(vmax, vmin), _clamp_digits(math.ceil(-math.log10(value) + 3)))
    return f"{value:.{digits}f}"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from -inf."""
    return math.floor(value + 0.5)


def format_intensity_tick(value: float, percent: bool = False) -> str:
    """Format an intensity axis tick.

    Args:
        value: Tick value (already transformed)
        percent: If True, the value is a percentage of the initial maximum

    Returns:
        Rounded integer for percentages, otherwise scientific notation
        with an unpadded exponent ("2.50e+2")
    """
    if percent:
        return str(round_half_up(value))
    mantissa, exponent = f"{round_half_up(value):.2e}".split("e")
    return f"{mantissa}e{exponent[0]}{int(exponent[1:])}"


def format_mz_label(mz: float, precision: int = 4) -> str:
    """Format m/z value for display.

    Args:
        mz: m/z value
        precision: Decimal places to show

    Returns:
        Formatted m/z string
    """
    return f"{mz:.{precision}f}"
