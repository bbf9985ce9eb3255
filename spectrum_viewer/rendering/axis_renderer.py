"""Axis tick texts for spectrum panes."""

import logging
import math
from typing import Optional

import numpy as np

from spectrum_viewer.annotation.tick_formatter import (
    distance_label,
    fancy_round,
    format_intensity_tick,
)
from spectrum_viewer.core.config import DEFAULTS
from spectrum_viewer.core.models import Pane
from spectrum_viewer.core.state import ViewerSession

logger = logging.getLogger(__name__)


def _resize_ticks(ticks: list[str], count: int) -> None:
    """Add or remove tick entries at the front until ``count`` remain."""
    while len(ticks) < count:
        ticks.insert(0, "")
    while len(ticks) > count:
        ticks.pop(0)


class AxisRenderer:
    """Keeps tick texts, error-graph axis text and distance labels in sync.

    Tick precision follows the visible span, so zoomed-in views get more
    decimal digits automatically.
    """

    def __init__(self, session: ViewerSession):
        self.session = session

    def set_tick_counts(self, x: Optional[int] = None, y: Optional[int] = None) -> None:
        """Change the tick count of one or both axes (at least 2 each)."""
        if x is not None:
            self.session.x_tick_count = max(DEFAULTS.MIN_TICKS, int(x))
            self.session.emit_display_options_changed("x_tick_count", self.session.x_tick_count)
        if y is not None:
            self.session.y_tick_count = max(DEFAULTS.MIN_TICKS, int(y))
            self.session.emit_display_options_changed("y_tick_count", self.session.y_tick_count)
        self.render_all()

    def set_y_transforms(self, sqrt: Optional[bool] = None, percent: Optional[bool] = None) -> None:
        """Toggle the square-root and percent-of-initial y-axis transforms."""
        if sqrt is not None:
            self.session.y_sqrt = sqrt
            self.session.emit_display_options_changed("y_sqrt", sqrt)
        if percent is not None:
            self.session.y_percentage = percent
            self.session.emit_display_options_changed("y_percentage", percent)
        self.render_all()

    def render_all(self) -> None:
        for pane in self.session.panes.values():
            self.render(pane)

    def render(self, pane: Pane) -> None:
        """Recompute every tick text of a pane from its viewport."""
        _resize_ticks(pane.x_ticks, self.session.x_tick_count)
        _resize_ticks(pane.y_ticks, self.session.y_tick_count)

        min_mz, max_mz = pane.min_mz, pane.max_mz
        for i, value in enumerate(np.linspace(min_mz, max_mz, len(pane.x_ticks))):
            pane.x_ticks[i] = fancy_round(max_mz, min_mz, float(value))

        for i, value in enumerate(np.linspace(0.0, pane.max_intensity, len(pane.y_ticks))):
            pane.y_ticks[i] = self.intensity_tick(pane, float(value)) if i else "0"

        pane.error_axis_text = (
            fancy_round(max_mz, min_mz, min_mz),
            fancy_round(max_mz, min_mz, max_mz),
        )
        for annotation in pane.distances:
            annotation.label = distance_label(max_mz, min_mz, annotation.distance)

    def intensity_tick(self, pane: Pane, value: float) -> str:
        """Text for one intensity tick, with the active y transforms."""
        initial = pane.initial_max_intensity
        if self.session.y_sqrt and self.session.y_percentage:
            value = math.sqrt(value) / math.sqrt(initial) * 100
        elif self.session.y_sqrt:
            value = math.sqrt(value)
        elif self.session.y_percentage:
            value = value / initial * 100
        return format_intensity_tick(value, self.session.y_percentage)
