"""Core modules for spectrum-viewer: session state, viewport, events, and configuration."""

from spectrum_viewer.core.config import DEFAULTS, ION_COLORS
from spectrum_viewer.core.events import EventBus
from spectrum_viewer.core.models import DistanceAnnotation, ErrorPoint, Pane, Peak, SelectionRect
from spectrum_viewer.core.state import ViewerSession
from spectrum_viewer.core.viewport import ViewportModel

__all__ = [
    "ViewerSession",
    "ViewportModel",
    "Pane",
    "Peak",
    "SelectionRect",
    "DistanceAnnotation",
    "ErrorPoint",
    "EventBus",
    "ION_COLORS",
    "DEFAULTS",
]
