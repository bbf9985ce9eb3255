"""Highlighting and pointer/wheel/key gestures."""

from spectrum_viewer.interaction.gestures import GestureController
from spectrum_viewer.interaction.highlight import HighlightEngine, Selector

__all__ = ["GestureController", "HighlightEngine", "Selector"]
