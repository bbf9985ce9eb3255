"""Mouse, wheel and keyboard gestures on spectrum panes.

Rubber-band zoom runs ``idle -> selecting -> committed | aborted``; the
in-progress drag, a drag suspended by leaving the pane, and the armed
distance anchor all live on the ViewerSession.

Pixel coordinates are relative to the pane surface (the plot area without
margins), y measured from the top.
"""

import logging
from typing import Optional

import numpy as np

from spectrum_viewer.annotation.peak_labels import clear_forced_labels, toggle_forced_label
from spectrum_viewer.annotation.tick_formatter import distance_label
from spectrum_viewer.core.config import DEFAULTS, FORCE_SHOW_MODES
from spectrum_viewer.core.models import (
    DistanceAnnotation,
    DragGesture,
    Pane,
    Peak,
    SuspendedGesture,
)
from spectrum_viewer.core.state import ViewerSession
from spectrum_viewer.core.viewport import ViewportModel

logger = logging.getLogger(__name__)


class GestureController:
    """Turns pointer, wheel and key input into viewport changes."""

    def __init__(self, session: ViewerSession, viewport: ViewportModel):
        self.session = session
        self.viewport = viewport

    # ========== RUBBER-BAND ZOOM ==========

    def press(self, pane_id: str, x: float, y: float) -> bool:
        """Start a rubber-band selection.

        Ignored while a distance anchor is armed, since pressing a peak also
        presses the pane underneath it.

        Returns:
            True if a drag was started
        """
        if self.session.distance_anchor is not None:
            return False
        pane = self.session.panes.get(pane_id)
        if pane is None:
            return False

        partner = self.session.partner(pane)
        start_x = self._clamp_x(pane, x)
        self.session.drag = DragGesture(
            pane_id=pane_id,
            start_x=start_x,
            linked_pane_id=partner.pane_id if partner is not None else None,
        )
        self.session.suspended_gesture = None
        self._update_selection(pane, start_x, y)
        return True

    def move(self, pane_id: str, x: float, y: float) -> bool:
        """Pointer moved over a pane; updates or resumes the selection.

        Returns:
            True if a selection was updated
        """
        drag = self.session.drag
        if drag is None:
            drag = self._resume(pane_id)
            if drag is None:
                return False
        if drag.pane_id != pane_id:
            return False
        self._update_selection(self.session.panes[pane_id], x, y)
        return True

    def _resume(self, pane_id: str) -> Optional[DragGesture]:
        suspended = self.session.suspended_gesture
        if suspended is None:
            return None
        if pane_id == suspended.pane_id:
            drag = DragGesture(pane_id, suspended.start_x, suspended.linked_pane_id)
        elif pane_id == suspended.linked_pane_id:
            # Entering the partner pane swaps the roles of both selections
            drag = DragGesture(pane_id, suspended.start_x, suspended.pane_id)
        else:
            return None
        self.session.suspended_gesture = None
        self.session.drag = drag
        logger.debug("Resumed drag in %s", pane_id)
        return drag

    def _update_selection(self, pane: Pane, x: float, y: float) -> None:
        drag = self.session.drag
        end_x = self._clamp_x(pane, x)
        left = min(drag.start_x, end_x)
        width = min(abs(end_x - drag.start_x), pane.width)
        offset_y = self._offset_y(pane, y)

        selection = pane.selection
        selection.place(left, width, offset_y, pane.height)
        selection.hidden = False
        selection.linked = False

        partner = self._linked_pane(drag)
        if partner is not None:
            # The partner previews the same m/z range at full height
            scale = partner.width / pane.width
            partner.selection.place(left * scale, width * scale, 0.0, partner.height)
            partner.selection.hidden = False
            partner.selection.linked = True

        self.session.emit_selection_changed()

    def release(self, pane_id: str, x: float, y: float) -> bool:
        """Finish a selection and zoom to it.

        Selections narrower than ``DEFAULTS.MIN_DRAG_FRACTION`` of the pane
        width are clicks and leave the view unchanged.

        Returns:
            True if a zoom was committed
        """
        drag = self.session.drag
        if drag is None:
            # A release with no drag ends any distance gesture that was not
            # finished on a peak
            self.session.distance_anchor = None
            return False

        pane = self.session.panes[drag.pane_id]
        if drag.pane_id == pane_id:
            self._update_selection(pane, x, y)
        selection = pane.selection
        self._end_drag()

        if selection.width / pane.width < DEFAULTS.MIN_DRAG_FRACTION:
            logger.debug("Selection of %.1f px on %s treated as a click", selection.width, pane.pane_id)
            return False

        mz_range = pane.mz_span
        min_mz = pane.min_mz + selection.left / pane.width * mz_range
        max_mz = pane.min_mz + (selection.left + selection.width) / pane.width * mz_range
        # Keep at least one pixel of intensity so the bound stays positive
        intensity_fraction = max(selection.height, 1.0) / pane.height
        return self.viewport.zoom_linked(
            pane, min_mz, max_mz, intensity_fraction * pane.max_intensity
        )

    def leave(self, pane_id: str) -> None:
        """Pointer left a pane; an active drag is suspended, not dropped."""
        drag = self.session.drag
        if drag is not None and drag.pane_id == pane_id:
            self.session.suspended_gesture = SuspendedGesture(
                drag.pane_id, drag.start_x, drag.linked_pane_id
            )
            self._end_drag()
            logger.debug("Suspended drag in %s", pane_id)
        self.session.distance_anchor = None

    def cancel(self) -> None:
        """Abort any drag, suspended drag, and distance gesture."""
        self._end_drag()
        self.session.suspended_gesture = None
        self.session.distance_anchor = None

    def _end_drag(self) -> None:
        drag = self.session.drag
        self.session.drag = None
        if drag is None:
            return
        for pane_id in (drag.pane_id, drag.linked_pane_id):
            pane = self.session.panes.get(pane_id) if pane_id else None
            if pane is not None:
                pane.selection.hidden = True
                pane.selection.linked = False
        self.session.emit_selection_changed()

    def _linked_pane(self, drag: DragGesture) -> Optional[Pane]:
        if drag.linked_pane_id is None:
            return None
        return self.session.panes.get(drag.linked_pane_id)

    @staticmethod
    def _clamp_x(pane: Pane, x: float) -> float:
        return max(0.0, min(float(pane.width), x))

    @staticmethod
    def _offset_y(pane: Pane, y: float) -> float:
        """Vertical offset from the edge opposite the baseline."""
        y = max(1.0, min(float(pane.height), y))
        if pane.selection.anchor == "bottom":
            return pane.height - y
        return y

    # ========== DISTANCE MEASUREMENT ==========

    def peak_press(self, peak: Peak) -> None:
        """Arm a distance anchor on a peak."""
        self._end_drag()
        self.session.suspended_gesture = None
        self.session.distance_anchor = peak

    def peak_release(self, peak: Peak) -> Optional[DistanceAnnotation]:
        """Finish a distance measurement on a peak.

        Returns:
            The new annotation, or None if the gesture was cancelled
        """
        anchor = self.session.distance_anchor
        self.session.distance_anchor = None
        if anchor is None or anchor is peak:
            return None
        pane = self.session.panes.get(anchor.pane_id)
        if pane is None or peak.pane_id != anchor.pane_id:
            logger.debug("Distance between different panes ignored")
            return None

        start_mz, end_mz = sorted((anchor.mz, peak.mz))
        distance = end_mz - start_mz
        annotation = DistanceAnnotation(
            start_mz=start_mz,
            end_mz=end_mz,
            intensity=float(np.median([anchor.intensity, peak.intensity])),
            label=distance_label(pane.max_mz, pane.min_mz, distance),
            pane_id=pane.pane_id,
        )
        pane.distances.append(annotation)
        self.session.emit_distances_changed()
        return annotation

    def remove_distance(self, annotation: DistanceAnnotation) -> None:
        pane = self.session.panes.get(annotation.pane_id)
        if pane is not None and annotation in pane.distances:
            pane.distances.remove(annotation)
            self.session.emit_distances_changed()

    def clear_distances(self) -> None:
        """Remove every distance annotation."""
        for pane in self.session.panes.values():
            pane.distances.clear()
        self.session.emit_distances_changed()

    # ========== WHEEL & KEYS ==========

    def wheel(
        self,
        pane_id: str,
        dx: float,
        dy: float,
        ctrl: bool = False,
        shift: bool = False,
        cursor_fraction: float = 0.5,
    ) -> bool:
        """Apply one wheel event.

        Args:
            pane_id: Pane under the pointer
            dx: Horizontal wheel delta
            dy: Vertical wheel delta
            ctrl: Control key held (scale intensity)
            shift: Shift key held (pan)
            cursor_fraction: Pointer x position as a fraction of the width

        Returns:
            True if the viewport changed
        """
        pane = self.session.panes.get(pane_id)
        if pane is None:
            return False
        mz_range = pane.mz_span

        if ctrl and dy:
            factor = max(1 + DEFAULTS.WHEEL_INTENSITY_FACTOR * dy, DEFAULTS.MIN_INTENSITY_FACTOR)
            return self.viewport.zoom(pane, pane.min_mz, pane.max_mz, pane.max_intensity * factor)

        if dx or (shift and dy):
            delta = max(-pane.min_mz, (dx or dy) * DEFAULTS.WHEEL_PAN_SCALE * mz_range)
            return self.viewport.zoom_linked(
                pane, pane.min_mz + delta, pane.max_mz + delta, pane.max_intensity
            )

        if dy:
            c = max(0.0, min(1.0, cursor_fraction))
            delta = -dy * DEFAULTS.WHEEL_ZOOM_SCALE * mz_range
            return self.viewport.zoom_linked(
                pane,
                max(0.0, pane.min_mz + delta * c),
                pane.max_mz - delta * (1 - c),
                pane.max_intensity,
            )
        return False

    def key(self, key: str, ctrl: bool = False) -> bool:
        """Keyboard shortcuts: ctrl+0 resets, ctrl+= / ctrl+- step zoom.

        Returns:
            True if the key was handled
        """
        if not ctrl:
            return False
        if key == "0":
            self.viewport.reset_all()
            return True
        pane = self.session.first_pane
        if pane is None:
            return False
        if key in ("=", "+"):
            return self.viewport.step_zoom(pane, 1)
        if key == "-":
            return self.viewport.step_zoom(pane, -1)
        return False

    # ========== FORCED LABELS ==========

    def set_force_show_mode(self, mode: str) -> None:
        if mode not in FORCE_SHOW_MODES:
            raise ValueError(f"Unknown force-show mode: {mode}")
        self.session.force_show_mode = mode
        self.session.emit_display_options_changed("force_show_mode", mode)

    def peak_click(self, peak: Peak) -> bool:
        """Click on a peak in the current force-show mode."""
        if not toggle_forced_label(peak, self.session.force_show_mode):
            return False
        self.session.emit_view_changed(peak.pane_id)
        return True

    def clear_forced_labels(self) -> None:
        clear_forced_labels(self.session.all_peaks())
        for pane_id in self.session.panes:
            self.session.emit_view_changed(pane_id)
