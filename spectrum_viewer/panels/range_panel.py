"""Manual range panel component.

This panel allows numeric entry of the m/z range and intensity bound for
precise view control.
"""

from typing import Optional

from nicegui import ui

from spectrum_viewer.panels.base_panel import BasePanel
from spectrum_viewer.viewer import SpectrumViewer


class RangePanel(BasePanel):
    """Manual range input panel.

    Features:
    - m/z min/max and max intensity input
    - Apply button to zoom every pane
    - Reset button
    """

    def __init__(self, viewer: SpectrumViewer):
        """Initialize range panel.

        Args:
            viewer: SpectrumViewer whose panes the range applies to
        """
        super().__init__(viewer.session, "range", "Manual Range", "tune")
        self.viewer = viewer

        # UI elements
        self.mz_min_input: Optional[ui.input] = None
        self.mz_max_input: Optional[ui.input] = None
        self.intensity_input: Optional[ui.input] = None

    def build(self, container: ui.element) -> ui.expansion:
        """Build the range panel UI.

        Args:
            container: Parent element to build panel in

        Returns:
            The expansion element created
        """
        with container:
            self.expansion = ui.expansion(
                self.name, icon=self.icon, value=False
            ).classes("w-full max-w-[1700px]")

            with self.expansion:
                with ui.row().classes("w-full gap-4 items-end"):
                    # Text inputs keep the adaptive precision of the texts
                    self.mz_min_input = ui.input(label="m/z Min").props("dense outlined").classes("w-36")
                    self.mz_max_input = ui.input(label="m/z Max").props("dense outlined").classes("w-36")
                    self.intensity_input = ui.input(label="Max Intensity").props(
                        "dense outlined"
                    ).classes("w-36")

                    ui.button("Apply Range", on_click=self._apply_range).props("color=primary")
                    ui.button("Reset", on_click=self._reset_to_full).props("color=grey outline")

        # Subscribe to events
        self.session.on_data_loaded(self._on_data_loaded)
        self.session.on_view_changed(self._on_view_changed)

        self._is_built = True
        self.update()
        return self.expansion

    def update(self) -> None:
        """Update the input fields with the first pane's viewport."""
        pane = self.session.first_pane
        if pane is None or self.mz_min_input is None:
            return
        min_text, max_text, intensity_text = self.viewer.viewport.range_text(pane)
        self.mz_min_input.value = min_text
        self.mz_max_input.value = max_text
        self.intensity_input.value = intensity_text

    def _has_data(self) -> bool:
        return self.session.first_pane is not None

    # === Event handlers ===

    def _on_data_loaded(self, data_type: str, pane_id: Optional[str] = None):
        if data_type in ("pane", "pane_cleared", "cleared"):
            self.update()
            self.update_visibility()

    def _on_view_changed(self, pane_id: str):
        pane = self.session.first_pane
        if pane is not None and pane.pane_id == pane_id:
            self.update()

    def _apply_range(self):
        """Apply the entered range to every pane."""
        if not self._has_data():
            ui.notify("No spectrum loaded", type="warning")
            return

        try:
            mz_min = float(self.mz_min_input.value)
            mz_max = float(self.mz_max_input.value)
            max_intensity = float(self.intensity_input.value)
        except (TypeError, ValueError):
            ui.notify("Range values must be numbers", type="warning")
            return

        if mz_min >= mz_max:
            ui.notify("m/z Min must be less than m/z Max", type="warning")
            return
        if max_intensity <= 0:
            ui.notify("Max Intensity must be positive", type="warning")
            return

        if self.viewer.viewport.manual_zoom(mz_min, mz_max, max_intensity):
            ui.notify("Range applied", type="positive")

    def _reset_to_full(self):
        """Reset every pane to its initial range."""
        if not self._has_data():
            return
        self.viewer.reset()
        ui.notify("Reset to full range", type="info")
