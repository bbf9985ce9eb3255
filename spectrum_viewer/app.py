"""Main application module for spectrum-viewer.

This module creates the NiceGUI interface and wires a SpectrumViewer to
the panels.
"""

import logging
import os
from typing import Callable, Optional

from nicegui import ui

from spectrum_viewer.panels import ErrorGraphPanel, PanelManager, RangePanel, SpectrumPanel
from spectrum_viewer.viewer import SpectrumViewer

logger = logging.getLogger(__name__)

# Called with a fresh viewer for every page; loads its panes and error points
ViewerSetup = Callable[[SpectrumViewer], None]

_viewer_setup: Optional[ViewerSetup] = None
_estimator = None


def configure(setup: Optional[ViewerSetup] = None, estimator=None) -> None:
    """Set how each page's viewer is populated and which density estimator it uses."""
    global _viewer_setup, _estimator
    _viewer_setup = setup
    _estimator = estimator


def create_ui(viewer: SpectrumViewer) -> PanelManager:
    """Create the viewer interface for one page.

    Args:
        viewer: SpectrumViewer shown on this page

    Returns:
        The PanelManager holding the built panels
    """
    dark_mode = os.environ.get("SPECTRUM_VIEWER_DARK_MODE", "1") == "1"
    dark = ui.dark_mode()
    if dark_mode:
        dark.enable()
    else:
        dark.disable()

    with ui.element("div").classes("fixed top-2 right-2 z-50 flex gap-1"):
        ui.button(icon="contrast", on_click=dark.toggle).props(
            "flat round dense color=grey"
        ).tooltip("Toggle dark/light mode")

    with ui.column().classes("w-full items-center p-2") as panels_container:
        panel_manager = PanelManager(viewer.session, panels_container)
        panels = [
            SpectrumPanel(viewer),
            RangePanel(viewer),
            ErrorGraphPanel(viewer),
        ]
        for panel in panels:
            panel.build(panels_container)
            panel_manager.register(panel)

        with ui.expansion("Help", icon="help", value=False).classes("w-full max-w-[1700px]"):
            ui.markdown("""
| Input | Effect |
|-------|--------|
| **Drag** | Select m/z range (and intensity) to zoom |
| **Drag peak to peak** | Measure Δm/z; click a label to remove it |
| **Scroll** | Zoom m/z at cursor |
| **Shift+scroll** | Pan m/z |
| **Ctrl+scroll** | Scale intensity |
| `Ctrl+0` | Reset all panes |
| `Ctrl+=` `Ctrl+-` | Zoom in/out |
| **Hover legend/residue** | Temporary highlight |
| **Click legend/residue** | Toggle permanent highlight |
| **Drag across residues** | Highlight residue range |
""").classes("text-sm")

    panel_manager.update_visibility()
    return panel_manager


# Register the page
@ui.page("/")
def index():
    viewer = SpectrumViewer(estimator=_estimator)
    create_ui(viewer)
    if _viewer_setup is not None:
        _viewer_setup(viewer)
