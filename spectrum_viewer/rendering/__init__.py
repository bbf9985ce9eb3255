"""Rendering modules for axes, spectrum panes, and the error graph."""

from spectrum_viewer.rendering.axis_renderer import AxisRenderer
from spectrum_viewer.rendering.error_graph import DensityEstimator, ErrorGraphProjector
from spectrum_viewer.rendering.spectrum_figure import SpectrumFigureBuilder, create_error_figure

__all__ = [
    "AxisRenderer",
    "ErrorGraphProjector",
    "DensityEstimator",
    "SpectrumFigureBuilder",
    "create_error_figure",
]
