"""
spectrum-viewer: Interactive annotated fragment spectrum viewer using NiceGUI and Plotly.

Zoom, pan, measure and highlight one spectrum or a mirrored pair, with a
companion error graph and density overlay.
"""

__version__ = "0.1.0"

from spectrum_viewer.core.events import EventBus
from spectrum_viewer.core.models import ErrorPoint, Peak, UnassignedError
from spectrum_viewer.core.state import ViewerSession
from spectrum_viewer.viewer import SpectrumViewer

__all__ = [
    "SpectrumViewer",
    "ViewerSession",
    "EventBus",
    "Peak",
    "ErrorPoint",
    "UnassignedError",
    "__version__",
]
