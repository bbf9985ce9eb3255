"""Error graph panel component.

Shows the mass error of every peak against its annotation or against the
closest theoretical ion, plus the density overlay returned by the
estimator.
"""

from typing import Optional

from nicegui import background_tasks, ui

from spectrum_viewer.core.config import ERROR_GRAPH_SERIES
from spectrum_viewer.panels.base_panel import BasePanel
from spectrum_viewer.rendering.spectrum_figure import create_error_figure
from spectrum_viewer.viewer import SpectrumViewer


class ErrorGraphPanel(BasePanel):
    """Error graph panel.

    Features:
    - ppm / Da toggle
    - Assigned vs. closest unassigned ion mode with per-series filters
    - Manual error axis range and ruler readout
    - Density overlay (plotly trace or HTML markup)
    """

    def __init__(self, viewer: SpectrumViewer):
        """Initialize error graph panel.

        Args:
            viewer: SpectrumViewer with the error points to show
        """
        super().__init__(viewer.session, "error_graph", "Error Graph", "scatter_plot")
        self.viewer = viewer

        # UI elements
        self.plot: Optional[ui.plotly] = None
        self.overlay_html: Optional[ui.html] = None
        self.axis_label: Optional[ui.label] = None
        self.ruler_label: Optional[ui.label] = None
        self.filter_row: Optional[ui.row] = None

    def build(self, container: ui.element) -> ui.expansion:
        """Build the error graph panel UI.

        Args:
            container: Parent element to build panel in

        Returns:
            The expansion element created
        """
        with container:
            self.expansion = ui.expansion(
                self.name, icon=self.icon, value=True
            ).classes("w-full max-w-[1700px]")

            with self.expansion:
                self._build_options_row()
                self._build_range_row()
                self.plot = ui.plotly(create_error_figure(self.session, self.viewer.error_graph.title())).classes(
                    "w-full"
                )
                self.overlay_html = ui.html("", sanitize=False)

        # Subscribe to events
        self.session.on_data_loaded(self._on_data_loaded)
        self.session.on_view_changed(self._on_view_changed)
        self.session.on_error_graph_changed(self.update)

        self._is_built = True
        self.request_update()
        return self.expansion

    def _build_options_row(self):
        projector = self.viewer.error_graph
        with ui.row().classes("w-full items-center gap-2 mb-1"):
            ui.toggle(
                ["ppm", "Da"],
                value="ppm" if self.session.error_relative else "Da",
                on_change=lambda e: self._changed(projector.set_relative, e.value == "ppm"),
            ).props("dense size=sm color=grey")
            ui.toggle(
                {True: "assigned", False: "closest ion"},
                value=self.session.error_assigned_mode,
                on_change=lambda e: self._on_mode_change(e.value),
            ).props("dense size=sm color=grey")

            self.filter_row = ui.row().classes("items-center gap-1")
            with self.filter_row:
                for series in ERROR_GRAPH_SERIES:
                    ui.checkbox(
                        series,
                        value=self.session.error_series_filters[series],
                        on_change=lambda e, s=series: self._changed(projector.set_series_filter, s, e.value),
                    ).props("dense size=sm color=grey").classes("text-xs")
                ui.checkbox(
                    "show assigned",
                    value=self.session.error_show_assigned,
                    on_change=lambda e: self._changed(projector.set_show_assigned, e.value),
                ).props("dense size=sm color=grey").classes("text-xs")
            self.filter_row.set_visibility(not self.session.error_assigned_mode)

    def _build_range_row(self):
        with ui.row().classes("w-full items-end gap-2 mb-1"):
            min_input = ui.number(label="Error Min", value=self.session.error_y_min).props(
                "dense outlined"
            ).classes("w-28")
            max_input = ui.number(label="Error Max", value=self.session.error_y_max).props(
                "dense outlined"
            ).classes("w-28")
            ui.button(
                "Apply",
                on_click=lambda: self._apply_y_range(min_input.value, max_input.value),
            ).props("dense size=sm color=grey")
            self.axis_label = ui.label("").classes("text-xs text-gray-400")

            ui.label("Ruler").classes("text-xs text-gray-400 ml-4")
            ui.slider(
                min=0, max=1, step=0.01, value=0.5,
                on_change=lambda e: self.ruler_label.set_text(self.viewer.error_graph.ruler_value(e.value)),
            ).classes("w-40")
            self.ruler_label = ui.label(self.viewer.error_graph.ruler_value(0.5)).classes(
                "text-xs font-mono"
            )

    def update(self) -> None:
        """Redraw the error figure from the projected points."""
        if self.plot is None:
            return
        projector = self.viewer.error_graph
        self.plot.update_figure(create_error_figure(self.session, projector.title()))
        min_text, max_text = projector.axis_text()
        self.axis_label.set_text(f"{min_text} … {max_text}")

        overlay = self.session.density_overlay
        self.overlay_html.set_content(overlay if isinstance(overlay, str) else "")

    def request_update(self) -> None:
        """Project the points and request a density overlay in the background."""
        background_tasks.create(self.viewer.error_graph.update(), name="density_estimate")

    def _has_data(self) -> bool:
        return bool(self.session.error_points)

    # === Event handlers ===

    def _changed(self, setter, *args):
        setter(*args)
        self.request_update()

    def _on_mode_change(self, assigned: bool):
        self.filter_row.set_visibility(not assigned)
        self._changed(self.viewer.error_graph.set_assigned_mode, assigned)

    def _apply_y_range(self, vmin, vmax):
        if vmin is None or vmax is None or not self.viewer.error_graph.zoom_y(float(vmin), float(vmax)):
            ui.notify("Error Min must be less than Error Max", type="warning")

    def _on_data_loaded(self, data_type: str, pane_id: Optional[str] = None):
        if data_type in ("error_points", "cleared"):
            self.request_update()
            self.update_visibility()
        elif data_type in ("pane", "pane_cleared"):
            self.update()

    def _on_view_changed(self, pane_id: str):
        pane = self.session.first_pane
        if pane is not None and pane.pane_id == pane_id:
            self.update()
