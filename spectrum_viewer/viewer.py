"""SpectrumViewer: one session plus the engines that operate on it."""

import logging
from typing import Optional

from spectrum_viewer.core.state import ViewerSession
from spectrum_viewer.core.viewport import ViewportModel
from spectrum_viewer.interaction.gestures import GestureController
from spectrum_viewer.interaction.highlight import HighlightEngine
from spectrum_viewer.rendering.axis_renderer import AxisRenderer
from spectrum_viewer.rendering.error_graph import DensityEstimator, ErrorGraphProjector

logger = logging.getLogger(__name__)


class SpectrumViewer:
    """Wires the viewer components to a shared ViewerSession.

    Loading a pane computes its initial labels and ticks; every viewport
    change re-renders that pane's axes.

    Example usage:
        viewer = SpectrumViewer(estimator=my_density_service)
        viewer.session.load_pane("first", peaks, 2000.0, 1e6, role="first")
        viewer.gestures.wheel("first", 0, -120, cursor_fraction=0.5)
    """

    def __init__(
        self,
        session: Optional[ViewerSession] = None,
        estimator: Optional[DensityEstimator] = None,
    ):
        self.session = session if session is not None else ViewerSession()
        self.viewport = ViewportModel(self.session)
        self.axes = AxisRenderer(self.session)
        self.highlights = HighlightEngine(self.session)
        self.gestures = GestureController(self.session, self.viewport)
        self.error_graph = ErrorGraphProjector(self.session, estimator)

        self.session.on_data_loaded(self._on_data_loaded)
        self.session.on_view_changed(self._on_view_changed)

    def _on_data_loaded(self, data_type: str, pane_id: Optional[str] = None):
        if data_type == "pane" and pane_id in self.session.panes:
            pane = self.session.panes[pane_id]
            self.viewport.relabel(pane)
            self.axes.render(pane)
        elif data_type == "error_points":
            self.error_graph.project()

    def _on_view_changed(self, pane_id: str):
        pane = self.session.panes.get(pane_id)
        if pane is not None:
            self.axes.render(pane)

    def reset(self) -> None:
        """Reset zoom of every pane and drop gestures in progress."""
        self.gestures.cancel()
        self.viewport.reset_all()
