"""UI panel components for NiceGUI interface.

Each panel is a self-contained UI component that:
1. Receives a reference to the viewer's ViewerSession (shared, never copied)
2. Subscribes to relevant events
3. Updates its display when data changes

Available panels:
- SpectrumPanel: Annotated spectrum panes with legend and residue bars
- RangePanel: Manual range input
- ErrorGraphPanel: Mass error graph and density overlay
"""

from spectrum_viewer.panels.base_panel import BasePanel, PanelManager
from spectrum_viewer.panels.error_graph_panel import ErrorGraphPanel
from spectrum_viewer.panels.range_panel import RangePanel
from spectrum_viewer.panels.spectrum_panel import SpectrumPanel

__all__ = [
    "BasePanel",
    "PanelManager",
    "SpectrumPanel",
    "RangePanel",
    "ErrorGraphPanel",
]
