"""Central session container for spectrum-viewer.

This module defines ViewerSession, the single source of truth for one
viewer instance. All engines (viewport, highlights, gestures, axes, error
graph) receive a reference to the same ViewerSession, so interaction state
that used to live in module globals (current selection, highlight target,
suspended drag) is owned by the caller and reset explicitly.
"""

import logging
import math
from typing import Any, Callable, Iterable, Iterator, Optional

from spectrum_viewer.core.config import DEFAULTS, ERROR_GRAPH_SERIES, PANE_ROLES
from spectrum_viewer.core.events import EventBus
from spectrum_viewer.core.models import (
    DragGesture,
    ErrorPoint,
    Pane,
    Peak,
    SequencePosition,
    SuspendedGesture,
)

logger = logging.getLogger(__name__)


def _positive_bound(value: float, pane_id: str, what: str) -> float:
    """Clamp an initial pane bound so the viewport invariants hold."""
    if math.isfinite(value) and value > 0:
        return value
    logger.warning("Pane %s has no positive %s bound (%s), using 1", pane_id, what, value)
    return 1.0


class ViewerSession:
    """Session state shared by all viewer components.

    Attributes are organized into groups:
    - Panes (peaks and viewports)
    - Error graph data
    - Display options
    - Interaction state
    - Event bus

    Example usage:
        session = ViewerSession()
        session.load_pane("first", peaks, 2000.0, 1e6, 4e5, role="first")
        session.on_view_changed(lambda pane_id: print(f"View changed: {pane_id}"))
    """

    def __init__(self):
        # ========== PANES ==========
        self.panes: dict[str, Pane] = {}

        # ========== ERROR GRAPH DATA ==========
        self.error_points: list[ErrorPoint] = []
        self.density_overlay: Any = None
        self.density_request_id: int = 0  # id of the request that produced the overlay

        # ========== DISPLAY OPTIONS ==========
        self.show_unassigned: bool = DEFAULTS.SHOW_UNASSIGNED
        self.x_tick_count: int = DEFAULTS.X_TICKS
        self.y_tick_count: int = DEFAULTS.Y_TICKS
        self.y_sqrt: bool = DEFAULTS.Y_SQRT
        self.y_percentage: bool = DEFAULTS.Y_PERCENTAGE
        self.label_percent: float = DEFAULTS.LABEL_PERCENT
        self.mz_percent: float = DEFAULTS.MZ_PERCENT
        self.force_show_mode: str = DEFAULTS.FORCE_SHOW_MODE
        self.highlight_colour: str = DEFAULTS.HIGHLIGHT_COLOUR
        self.peak_colour_mode: str = DEFAULTS.PEAK_COLOUR_MODE

        # ========== ERROR GRAPH OPTIONS ==========
        self.error_relative: bool = DEFAULTS.ERROR_RELATIVE
        self.error_assigned_mode: bool = DEFAULTS.ERROR_ASSIGNED_MODE
        self.error_show_assigned: bool = DEFAULTS.ERROR_SHOW_ASSIGNED
        self.error_series_filters: dict[str, bool] = {s: True for s in ERROR_GRAPH_SERIES}
        self.error_y_min: float = DEFAULTS.ERROR_Y_MIN
        self.error_y_max: float = DEFAULTS.ERROR_Y_MAX
        # Draw the error axis from the bottom when the range excludes zero
        self.error_hug_bottom: bool = False

        # ========== INTERACTION STATE ==========
        self.drag: Optional[DragGesture] = None
        self.suspended_gesture: Optional[SuspendedGesture] = None
        self.distance_anchor: Optional[Peak] = None
        self.sequence_range_start: Optional[SequencePosition] = None
        # Permanent state of every highlight source toggled so far
        self.permanent_highlights: dict[Any, bool] = {}

        # ========== EVENT BUS ==========
        self._event_bus = EventBus()

    # ========== PANE MANAGEMENT ==========

    def load_pane(
        self,
        pane_id: str,
        peaks: Iterable[Peak],
        initial_max_mz: float,
        initial_max_intensity: float,
        initial_max_intensity_assigned: Optional[float] = None,
        role: str = "single",
        sequence: str = "",
        width: float = DEFAULTS.PLOT_WIDTH,
        height: float = DEFAULTS.PLOT_HEIGHT,
    ) -> Pane:
        """Create (or replace) a pane from an already annotated peak list.

        Args:
            pane_id: Unique identifier of the pane
            peaks: Peaks of the spectrum, in display order
            initial_max_mz: m/z upper bound of the unzoomed view
            initial_max_intensity: Intensity bound with all peaks shown
            initial_max_intensity_assigned: Intensity bound with only assigned
                peaks shown (defaults to initial_max_intensity)
            role: "single", "first" or "second"
            sequence: Peptide sequence for the residue bar, if any
            width: Surface width in pixels
            height: Surface height in pixels

        Returns:
            The new Pane

        Raises:
            ValueError: If the role is not one of PANE_ROLES
        """
        if role not in PANE_ROLES:
            raise ValueError(f"Unknown pane role: {role}")
        if initial_max_intensity_assigned is None:
            initial_max_intensity_assigned = initial_max_intensity
        initial_max_mz = _positive_bound(initial_max_mz, pane_id, "m/z")
        initial_max_intensity = _positive_bound(initial_max_intensity, pane_id, "intensity")
        initial_max_intensity_assigned = _positive_bound(
            initial_max_intensity_assigned, pane_id, "assigned intensity"
        )
        pane = Pane(
            pane_id=pane_id,
            initial_max_mz=initial_max_mz,
            initial_max_intensity=initial_max_intensity,
            initial_max_intensity_assigned=initial_max_intensity_assigned,
            role=role,
            peaks=list(peaks),
            sequence=sequence,
            width=width,
            height=height,
        )
        if not self.show_unassigned:
            pane.max_intensity = initial_max_intensity_assigned

        if pane_id in self.panes:
            self.clear_pane(pane_id, emit_event=False)
        self.panes[pane_id] = pane
        logger.debug("Loaded pane %s with %d peaks", pane_id, len(pane.peaks))
        self.emit_data_loaded("pane", pane_id=pane_id)
        return pane

    def clear_pane(self, pane_id: str, emit_event: bool = True) -> None:
        """Remove a pane and every interaction state that points into it."""
        pane = self.panes.pop(pane_id, None)
        if pane is None:
            return
        if self.drag is not None and pane_id in (self.drag.pane_id, self.drag.linked_pane_id):
            self.drag = None
        if self.suspended_gesture is not None and pane_id in (
            self.suspended_gesture.pane_id,
            self.suspended_gesture.linked_pane_id,
        ):
            self.suspended_gesture = None
        if self.distance_anchor is not None and self.distance_anchor.pane_id == pane_id:
            self.distance_anchor = None
        if self.sequence_range_start is not None and self.sequence_range_start[0] == pane_id:
            self.sequence_range_start = None
        self._drop_highlight_sources(pane)
        if not self.panes:
            self.reset_interaction()
        if emit_event:
            self.emit_data_loaded("pane_cleared", pane_id=pane_id)

    def _drop_highlight_sources(self, pane: Pane) -> None:
        """Switch off every permanent highlight source that covered a removed pane.

        Peaks of the remaining panes lose the count the dropped sources gave
        them.
        """
        stale = [
            selector for selector in self.permanent_highlights
            if any(selector.matches(peak) for peak in pane.peaks)
        ]
        for selector in stale:
            del self.permanent_highlights[selector]
            for peak in self.all_peaks():
                if selector.matches(peak):
                    peak.n = max(0, peak.n - 1)
                    if peak.n == 0:
                        peak.colour = None
        for other in self.panes.values():
            other.highlighted = any(peak.n > 0 for peak in other.peaks)

    def load_error_points(self, points: Iterable[ErrorPoint]) -> None:
        """Replace the error graph points."""
        self.error_points = list(points)
        self.emit_data_loaded("error_points")

    def clear_all(self) -> None:
        """Clear all data and interaction state."""
        self.panes = {}
        self.error_points = []
        self.density_overlay = None
        self.reset_interaction()
        self.emit_data_loaded("cleared")

    def reset_interaction(self) -> None:
        """Forget drags, anchors, and highlight sources."""
        self.drag = None
        self.suspended_gesture = None
        self.distance_anchor = None
        self.sequence_range_start = None
        self.permanent_highlights = {}

    # ========== PANE ACCESSORS ==========

    def get_pane(self, pane_id: str) -> Pane:
        return self.panes[pane_id]

    @property
    def first_pane(self) -> Optional[Pane]:
        """The pane keyboard shortcuts and manual entry apply to first."""
        return next(iter(self.panes.values()), None)

    def partner(self, pane: Pane) -> Optional[Pane]:
        """Return the other pane of a mirrored first/second pair."""
        wanted = {"first": "second", "second": "first"}.get(pane.role)
        if wanted is None:
            return None
        for other in self.panes.values():
            if other.role == wanted:
                return other
        return None

    def all_peaks(self) -> Iterator[Peak]:
        """Iterate over the peaks of every pane."""
        for pane in self.panes.values():
            yield from pane.peaks

    # ========== EVENT BUS DELEGATION ==========

    def on_data_loaded(self, callback: Callable) -> Callable:
        """Register a callback for when pane or error data is loaded.

        Callback signature: callback(data_type: str, pane_id: str | None)
        """
        return self._event_bus.subscribe("data_loaded", callback)

    def on_view_changed(self, callback: Callable) -> Callable:
        """Register a callback for when a pane's viewport changes.

        Callback signature: callback(pane_id: str)
        """
        return self._event_bus.subscribe("view_changed", callback)

    def on_selection_changed(self, callback: Callable) -> Callable:
        """Register a callback for when the rubber-band selection changes.

        Callback signature: callback()
        """
        return self._event_bus.subscribe("selection_changed", callback)

    def on_highlight_changed(self, callback: Callable) -> Callable:
        """Register a callback for when peak highlights change.

        Callback signature: callback()
        """
        return self._event_bus.subscribe("highlight_changed", callback)

    def on_distances_changed(self, callback: Callable) -> Callable:
        """Register a callback for when distance annotations change.

        Callback signature: callback()
        """
        return self._event_bus.subscribe("distances_changed", callback)

    def on_display_options_changed(self, callback: Callable) -> Callable:
        """Register a callback for when display options change.

        Callback signature: callback(option_name: str, value: Any)
        """
        return self._event_bus.subscribe("display_options_changed", callback)

    def on_error_graph_changed(self, callback: Callable) -> Callable:
        """Register a callback for when error graph points or overlay change.

        Callback signature: callback()
        """
        return self._event_bus.subscribe("error_graph_changed", callback)

    def emit_data_loaded(self, data_type: str, pane_id: Optional[str] = None) -> None:
        self._event_bus.emit("data_loaded", data_type=data_type, pane_id=pane_id)

    def emit_view_changed(self, pane_id: str) -> None:
        self._event_bus.emit("view_changed", pane_id=pane_id)

    def emit_selection_changed(self) -> None:
        self._event_bus.emit("selection_changed")

    def emit_highlight_changed(self) -> None:
        self._event_bus.emit("highlight_changed")

    def emit_distances_changed(self) -> None:
        self._event_bus.emit("distances_changed")

    def emit_display_options_changed(self, option_name: str, value: Any) -> None:
        self._event_bus.emit("display_options_changed", option_name=option_name, value=value)

    def emit_error_graph_changed(self) -> None:
        self._event_bus.emit("error_graph_changed")
