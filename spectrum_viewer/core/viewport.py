"""Per-pane zoom/pan state with reset-to-initial semantics."""

import logging
import math
from typing import Optional

from spectrum_viewer.annotation.peak_labels import update_peak_labels
from spectrum_viewer.annotation.tick_formatter import fancy_round
from spectrum_viewer.core.config import DEFAULTS
from spectrum_viewer.core.models import Pane
from spectrum_viewer.core.state import ViewerSession

logger = logging.getLogger(__name__)


class ViewportModel:
    """The only writer of pane viewports.

    Every successful change emits ``view_changed`` with the pane id so
    axes, labels and figures can re-derive their content.
    """

    def __init__(self, session: ViewerSession):
        self.session = session

    def zoom(self, pane: Pane, min_mz: float, max_mz: float, max_intensity: float) -> bool:
        """Set the displayed range of a pane.

        ``min_mz`` is clamped to >= 0. Label visibility is only recomputed
        when ``max_intensity`` differs from the last applied value.

        Args:
            pane: Pane to zoom
            min_mz: New lower m/z bound
            max_mz: New upper m/z bound
            max_intensity: New upper intensity bound

        Returns:
            True if the zoom was applied, False if the range was degenerate
        """
        min_mz = max(0.0, min_mz)
        if not (
            math.isfinite(min_mz)
            and math.isfinite(max_mz)
            and math.isfinite(max_intensity)
            and max_mz > min_mz
            and max_intensity > 0
        ):
            logger.debug(
                "Discarding degenerate zoom on %s: %s-%s, %s",
                pane.pane_id, min_mz, max_mz, max_intensity,
            )
            return False

        pane.min_mz = min_mz
        pane.max_mz = max_mz
        pane.max_intensity = max_intensity
        pane.zoomed = True
        self._apply_intensity(pane)
        self.session.emit_view_changed(pane.pane_id)
        return True

    def reset_zoom(self, pane: Pane) -> None:
        """Restore the initial (0, initial_max_mz, initial_max_intensity) view."""
        pane.min_mz = 0.0
        pane.max_mz = pane.initial_max_mz
        pane.max_intensity = pane.initial_max_intensity
        pane.zoomed = False
        self._apply_intensity(pane)
        self.session.emit_view_changed(pane.pane_id)

    def reset_all(self) -> None:
        """Reset every pane."""
        for pane in list(self.session.panes.values()):
            self.reset_zoom(pane)

    def relabel(self, pane: Pane) -> None:
        """Recompute label visibility for the current intensity bound."""
        update_peak_labels(pane, self.session.label_percent, self.session.mz_percent)
        pane.last_max_intensity = pane.max_intensity

    def _apply_intensity(self, pane: Pane) -> None:
        if pane.last_max_intensity != pane.max_intensity:
            self.relabel(pane)

    def set_show_unassigned(self, show: bool) -> None:
        """Show or hide unassigned peaks.

        A pane's intensity bound is swapped between the two canonical
        values only if it currently sits exactly on the other one, so a
        manual intensity zoom is kept.
        """
        self.session.show_unassigned = show
        for pane in self.session.panes.values():
            if show and pane.max_intensity == pane.initial_max_intensity_assigned:
                pane.max_intensity = pane.initial_max_intensity
            elif not show and pane.max_intensity == pane.initial_max_intensity:
                pane.max_intensity = pane.initial_max_intensity_assigned
            else:
                continue
            self._apply_intensity(pane)
            self.session.emit_view_changed(pane.pane_id)
        self.session.emit_display_options_changed("show_unassigned", show)

    def set_label_percentages(
        self, label_percent: Optional[float] = None, mz_percent: Optional[float] = None
    ) -> None:
        """Change the label thresholds and relabel every pane."""
        if label_percent is not None:
            self.session.label_percent = max(0.0, min(100.0, label_percent))
        if mz_percent is not None:
            self.session.mz_percent = max(0.0, min(100.0, mz_percent))
        for pane in self.session.panes.values():
            self.relabel(pane)
            self.session.emit_view_changed(pane.pane_id)

    # ========== MANUAL ENTRY ==========

    def manual_zoom(self, min_mz: float, max_mz: float, max_intensity: float) -> bool:
        """Apply a numerically entered range to every pane."""
        applied = False
        for pane in list(self.session.panes.values()):
            applied = self.zoom(pane, min_mz, max_mz, max_intensity) or applied
        return applied

    def set_min_mz(self, value: float) -> bool:
        applied = False
        for pane in list(self.session.panes.values()):
            applied = self.zoom(pane, value, pane.max_mz, pane.max_intensity) or applied
        return applied

    def set_max_mz(self, value: float) -> bool:
        applied = False
        for pane in list(self.session.panes.values()):
            applied = self.zoom(pane, pane.min_mz, value, pane.max_intensity) or applied
        return applied

    def set_max_intensity(self, value: float) -> bool:
        applied = False
        for pane in list(self.session.panes.values()):
            applied = self.zoom(pane, pane.min_mz, pane.max_mz, value) or applied
        return applied

    def step_zoom(self, pane: Pane, direction: int) -> bool:
        """Zoom the m/z range in (direction > 0) or out by a fixed step.

        The step is split evenly between both ends; the linked pane follows
        with its own intensity bound.
        """
        half_step = pane.mz_span * DEFAULTS.KEY_ZOOM_STEP / 2
        if direction > 0:
            new_min, new_max = pane.min_mz + half_step, pane.max_mz - half_step
        else:
            new_min, new_max = max(0.0, pane.min_mz - half_step), pane.max_mz + half_step
        return self.zoom_linked(pane, new_min, new_max, pane.max_intensity)

    def zoom_linked(self, pane: Pane, min_mz: float, max_mz: float, max_intensity: float) -> bool:
        """Zoom a pane and give its mirrored partner the same m/z range."""
        if not self.zoom(pane, min_mz, max_mz, max_intensity):
            return False
        partner = self.session.partner(pane)
        if partner is not None:
            self.zoom(partner, pane.min_mz, pane.max_mz, partner.max_intensity)
        return True

    def range_text(self, pane: Pane) -> tuple[str, str, str]:
        """Texts for the manual range inputs: (min m/z, max m/z, max intensity)."""
        return (
            fancy_round(pane.max_mz, pane.min_mz, pane.min_mz),
            fancy_round(pane.max_mz, pane.min_mz, pane.max_mz),
            fancy_round(pane.max_intensity, 0, pane.max_intensity),
        )
