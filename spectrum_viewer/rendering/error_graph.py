"""Error graph projection and density overlay requests."""

import logging
import math
from typing import Any, Awaitable, Callable, Optional

from spectrum_viewer.annotation.tick_formatter import fancy_round
from spectrum_viewer.core.config import ERROR_GRAPH_SERIES
from spectrum_viewer.core.models import ErrorPoint, UnassignedError
from spectrum_viewer.core.state import ViewerSession

logger = logging.getLogger(__name__)

# Turns a list of error values into something the error graph can render
DensityEstimator = Callable[[list[float]], Awaitable[Any]]


def _resolvable(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


class ErrorGraphProjector:
    """Maps error points onto the error graph and requests a density overlay.

    In assigned mode every point shows the error to its own annotation. In
    unassigned mode every point shows the error to the closest theoretical
    ion among the enabled series; earlier series in ``a, b, c, x, y, z``
    win ties.
    """

    def __init__(self, session: ViewerSession, estimator: Optional[DensityEstimator] = None):
        self.session = session
        self.estimator = estimator
        self._requests = 0

    # ========== SETTINGS ==========

    def set_relative(self, relative: bool) -> None:
        self.session.error_relative = relative
        self.session.emit_display_options_changed("error_relative", relative)

    def set_assigned_mode(self, assigned: bool) -> None:
        self.session.error_assigned_mode = assigned
        self.session.emit_display_options_changed("error_assigned_mode", assigned)

    def set_series_filter(self, series: str, enabled: bool) -> None:
        if series not in self.session.error_series_filters:
            raise ValueError(f"Unknown error graph series: {series}")
        self.session.error_series_filters[series] = enabled
        self.session.emit_display_options_changed("error_series_filters", dict(self.session.error_series_filters))

    def set_show_assigned(self, show: bool) -> None:
        self.session.error_show_assigned = show
        self.session.emit_display_options_changed("error_show_assigned", show)

    # ========== PROJECTION ==========

    def _closest_unassigned(self, point: ErrorPoint) -> Optional[UnassignedError]:
        table = point.unassigned_rel if self.session.error_relative else point.unassigned_abs
        best = None
        for series in ERROR_GRAPH_SERIES:
            if not self.session.error_series_filters.get(series, False):
                continue
            candidate = table.get(series)
            if candidate is None or not _resolvable(candidate.value):
                continue
            if best is None or abs(candidate.value) < abs(best.value):
                best = candidate
        return best

    def _resolve(self, point: ErrorPoint) -> tuple[Optional[float], str]:
        if self.session.error_assigned_mode:
            if self.session.error_relative:
                return point.assigned_rel, ""
            return point.assigned_abs, ""
        if not self.session.error_show_assigned and point.assigned:
            return None, ""
        best = self._closest_unassigned(point)
        if best is None:
            return None, ""
        return best.value, best.fragment

    def project(self) -> list[float]:
        """Derive ``y``, ``label`` and ``hidden`` of every error point.

        Points without a resolvable value are hidden, not zeroed.

        Returns:
            The values of all visible points, in point order
        """
        values = []
        for point in self.session.error_points:
            value, label = self._resolve(point)
            if _resolvable(value):
                point.y = value
                point.label = label
                point.hidden = False
                values.append(value)
            else:
                point.y = None
                point.label = ""
                point.hidden = True
        return values

    async def update(self) -> Any:
        """Project the points and request a new density overlay.

        Requests are not sequenced: whichever call completes last sets the
        overlay. A failed request is logged and keeps the previous overlay.

        Returns:
            The overlay that was applied, or None
        """
        values = self.project()
        self._requests += 1
        request_id = self._requests
        self.session.emit_error_graph_changed()

        if self.estimator is None:
            return None
        try:
            overlay = await self.estimator(values)
        except Exception:
            logger.exception("Density estimation failed (request %d)", request_id)
            return None

        self.session.density_overlay = overlay
        self.session.density_request_id = request_id
        self.session.emit_error_graph_changed()
        return overlay

    # ========== TEXTS ==========

    def title(self) -> str:
        """Describe what the error graph currently shows."""
        if self.session.error_assigned_mode:
            which = "assigned "
        elif self.session.error_show_assigned:
            which = ""
        else:
            which = "unassigned "
        target = "the annotation" if self.session.error_assigned_mode else "the closest theoretical ion"
        unit = "ppm" if self.session.error_relative else "Da"
        return f"The error for all {which}peaks as compared to {target} ({unit})"

    def zoom_y(self, min_error: float, max_error: float) -> bool:
        """Set the error axis range.

        Returns:
            True if applied, False for an empty or inverted range
        """
        if not (math.isfinite(min_error) and math.isfinite(max_error)) or max_error <= min_error:
            logger.debug("Discarding error axis range %s-%s", min_error, max_error)
            return False
        self.session.error_y_min = min_error
        self.session.error_y_max = max_error
        self.session.error_hug_bottom = min_error > 0 and max_error > 0
        self.session.emit_error_graph_changed()
        return True

    def axis_text(self) -> tuple[str, str]:
        """Formatted (min, max) of the error axis."""
        vmin, vmax = self.session.error_y_min, self.session.error_y_max
        return fancy_round(vmax, vmin, vmin), fancy_round(vmax, vmin, vmax)

    def ruler_value(self, fraction: float) -> str:
        """Error value at a height fraction (0 = bottom, 1 = top) of the graph."""
        vmin, vmax = self.session.error_y_min, self.session.error_y_max
        fraction = max(0.0, min(1.0, fraction))
        return fancy_round(vmax, vmin, vmin + fraction * (vmax - vmin), 1)
