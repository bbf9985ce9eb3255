"""Annotated spectrum panel component.

This panel draws one pane or a mirrored pair of panes as SVG over NiceGUI
interactive images and routes mouse, wheel and key input to the gesture
controller.
"""

import logging
from typing import Optional

from nicegui import ui
from nicegui.events import MouseEventArguments

from spectrum_viewer.core.config import (
    C_TERMINAL_SERIES,
    DEFAULTS,
    FORCE_SHOW_MODES,
    HIGHLIGHT_COLOURS,
    ION_COLORS,
    N_TERMINAL_SERIES,
    PEAK_COLOUR_MODES,
    REMOVE_COLOUR,
)
from spectrum_viewer.core.models import Pane
from spectrum_viewer.interaction.highlight import Selector
from spectrum_viewer.panels.base_panel import BasePanel
from spectrum_viewer.rendering.spectrum_figure import SpectrumFigureBuilder, parse_element_id
from spectrum_viewer.utils.coordinate_transform import CoordinateTransform
from spectrum_viewer.viewer import SpectrumViewer

logger = logging.getLogger(__name__)


class SpectrumPanel(BasePanel):
    """Annotated spectrum panel.

    Features:
    - Single or mirrored (first/second) panes
    - Drag to zoom, drag from peak to peak to measure, click a distance to remove it
    - Wheel zoom at cursor, shift+wheel to pan, ctrl+wheel to scale intensity
    - Ion series legend and residue bar with hover and click highlights
    """

    def __init__(self, viewer: SpectrumViewer):
        """Initialize spectrum panel.

        Args:
            viewer: SpectrumViewer whose session this panel shows
        """
        super().__init__(viewer.session, "spectrum", "Annotated Spectrum", "show_chart")
        self.viewer = viewer
        self.transform = CoordinateTransform(DEFAULTS.MARGIN_LEFT, DEFAULTS.MARGIN_TOP)
        self.figures = SpectrumFigureBuilder(self.session, self.transform)

        # UI elements
        self.panes_container: Optional[ui.column] = None
        self.legend_row: Optional[ui.row] = None
        self.sequence_container: Optional[ui.column] = None
        self.images: dict[str, ui.interactive_image] = {}
        self.x_ticks_input: Optional[ui.number] = None
        self.y_ticks_input: Optional[ui.number] = None

    def build(self, container: ui.element) -> ui.expansion:
        """Build the spectrum panel UI.

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
                self._build_label_row()
                self.legend_row = ui.row().classes("w-full items-center gap-1")
                self.sequence_container = ui.column().classes("w-full gap-1")
                self._build_help_text()
                self.panes_container = ui.column().classes("w-full gap-0")

        ui.keyboard(on_key=self._on_key)

        # Subscribe to events
        self.session.on_data_loaded(self._on_data_loaded)
        self.session.on_view_changed(self._on_view_changed)
        self.session.on_selection_changed(self._redraw_all)
        self.session.on_highlight_changed(self._redraw_all)
        self.session.on_distances_changed(self._redraw_all)
        self.session.on_display_options_changed(self._on_display_options_changed)

        self._is_built = True
        self._rebuild()
        return self.expansion

    def _build_options_row(self):
        """Build the reset, tick and display option controls."""
        with ui.row().classes("w-full items-center gap-2 mb-1"):
            ui.button("Reset zoom", on_click=self.viewer.reset).props(
                "dense size=sm color=grey"
            ).tooltip("Reset every pane to its initial range (Ctrl+0)")

            ui.label("|").classes("mx-1 text-gray-600")

            self.x_ticks_input = ui.number(
                label="x ticks",
                value=self.session.x_tick_count,
                min=DEFAULTS.MIN_TICKS,
                step=1,
                on_change=lambda e: self._set_ticks(x=e.value),
            ).props("dense outlined").classes("w-20")
            self.y_ticks_input = ui.number(
                label="y ticks",
                value=self.session.y_tick_count,
                min=DEFAULTS.MIN_TICKS,
                step=1,
                on_change=lambda e: self._set_ticks(y=e.value),
            ).props("dense outlined").classes("w-20")

            ui.checkbox(
                "√ intensity",
                value=self.session.y_sqrt,
                on_change=lambda e: self.viewer.axes.set_y_transforms(sqrt=e.value),
            ).props("dense size=sm color=grey").classes("text-xs")
            ui.checkbox(
                "% intensity",
                value=self.session.y_percentage,
                on_change=lambda e: self.viewer.axes.set_y_transforms(percent=e.value),
            ).props("dense size=sm color=grey").classes("text-xs")
            ui.checkbox(
                "Unassigned",
                value=self.session.show_unassigned,
                on_change=lambda e: self.viewer.viewport.set_show_unassigned(e.value),
            ).props("dense size=sm color=grey").classes("text-xs").tooltip(
                "Show peaks without an annotation"
            )

            ui.label("|").classes("mx-1 text-gray-600")

            ui.button("Clear highlights", on_click=self.viewer.highlights.clear_all).props(
                "dense size=sm color=grey"
            )
            ui.button("Clear Δ", on_click=self.viewer.gestures.clear_distances).props(
                "dense size=sm color=grey"
            ).tooltip("Clear all distance labels")

    def _build_label_row(self):
        """Build the label threshold, force-show and colour controls."""
        with ui.row().classes("w-full items-center gap-2 mb-1"):
            ui.number(
                label="Label %",
                value=self.session.label_percent,
                min=0,
                max=100,
                on_change=lambda e: self.viewer.viewport.set_label_percentages(label_percent=e.value or 0),
            ).props("dense outlined").classes("w-24").tooltip(
                "Show fragment labels for the top N% of the intensity range"
            )
            ui.number(
                label="m/z %",
                value=self.session.mz_percent,
                min=0,
                max=100,
                on_change=lambda e: self.viewer.viewport.set_label_percentages(mz_percent=e.value or 0),
            ).props("dense outlined").classes("w-24")

            ui.label("Click peak:").classes("text-xs text-gray-400")
            ui.toggle(
                list(FORCE_SHOW_MODES),
                value=self.session.force_show_mode,
                on_change=lambda e: self.viewer.gestures.set_force_show_mode(e.value),
            ).props("dense size=sm color=grey")
            ui.button("Clear forced", on_click=self.viewer.gestures.clear_forced_labels).props(
                "dense size=sm color=grey"
            )

            ui.label("|").classes("mx-1 text-gray-600")

            ui.label("Colour peaks by:").classes("text-xs text-gray-400")
            ui.toggle(
                list(PEAK_COLOUR_MODES),
                value=self.session.peak_colour_mode,
                on_change=lambda e: self.viewer.highlights.set_peak_colour_mode(e.value),
            ).props("dense size=sm color=grey").tooltip(
                "Colour by ion series, or tell mirrored peptides apart"
            )

            ui.label("Residue colour:").classes("text-xs text-gray-400")
            ui.select(
                [*HIGHLIGHT_COLOURS, REMOVE_COLOUR],
                value=self.session.highlight_colour,
                on_change=lambda e: self.viewer.highlights.set_colour(e.value),
            ).props("dense outlined").classes("w-28")

    def _build_help_text(self):
        ui.label(
            "Drag to zoom, drag from peak to peak to measure, scroll to zoom at cursor, "
            "Shift+scroll to pan, Ctrl+scroll to scale intensity, Ctrl+0 to reset"
        ).classes("text-xs text-gray-500 mb-1")

    # === Dynamic content ===

    def _rebuild(self):
        """Recreate legend, residue bars and pane images after a data change."""
        if not self._is_built:
            return
        self._build_legend()
        self._build_sequences()
        self.panes_container.clear()
        self.images = {}
        with self.panes_container:
            for pane in self.session.panes.values():
                self._build_pane_image(pane)
        self.update()

    def _build_legend(self):
        self.legend_row.clear()
        present = {p.ion_series for p in self.session.all_peaks() if p.ion_series}
        with self.legend_row:
            if not present:
                return
            for name, selector in (
                ("N-term", Selector.n_terminal()),
                ("C-term", Selector.c_terminal()),
            ):
                if present & set(N_TERMINAL_SERIES if name == "N-term" else C_TERMINAL_SERIES):
                    self._legend_button(name, selector, DEFAULTS.AXIS_COLOR)
            for series, color in ION_COLORS.items():
                if series in present:
                    self._legend_button(series, Selector.ion_series(series), color)

    def _legend_button(self, text: str, selector: Selector, color: str):
        highlights = self.viewer.highlights
        button = ui.button(
            text,
            on_click=lambda: highlights.toggle(selector, True, not highlights.is_on(selector)),
        ).props("dense size=sm flat").style(f"color: {color}")
        button.on("mouseenter", lambda: highlights.toggle(selector, False, True))
        button.on("mouseleave", lambda: highlights.toggle(selector, False, False))

    def _build_sequences(self):
        self.sequence_container.clear()
        highlights = self.viewer.highlights
        with self.sequence_container:
            for pane in self.session.panes.values():
                if not pane.sequence:
                    continue
                with ui.row().classes("gap-0 font-mono text-lg select-none"):
                    for index, residue in enumerate(pane.sequence):
                        position = (pane.pane_id, index)
                        selector = Selector.position(index, pane.pane_id)
                        label = ui.label(residue).classes("px-1 cursor-pointer")
                        label.on("mousedown", lambda _, p=position: highlights.sequence_press(p))
                        label.on("mouseup", lambda _, p=position: highlights.sequence_release(p))
                        label.on("mouseenter", lambda _, s=selector: highlights.toggle(s, False, True))
                        label.on("mouseleave", lambda _, s=selector: highlights.toggle(s, False, False))

    def _build_pane_image(self, pane: Pane):
        """Build the interactive image of one pane."""
        width = DEFAULTS.MARGIN_LEFT + pane.width + DEFAULTS.MARGIN_RIGHT
        height = DEFAULTS.MARGIN_TOP + pane.height + DEFAULTS.MARGIN_BOTTOM
        image = (
            ui.interactive_image(
                size=(width, height),
                on_mouse=lambda e, pid=pane.pane_id: self._on_pane_mouse(pid, e),
                events=["mousedown", "mousemove", "mouseup"],
                cross=False,
            )
            .style(f"width: {width}px; height: {height}px; cursor: crosshair;")
        )
        image.on("wheel.prevent", lambda e, pid=pane.pane_id: self._on_wheel(pid, e))
        image.on("mouseleave", lambda e, pid=pane.pane_id: self.viewer.gestures.leave(pid))
        image.on("svg:pointerdown", self._on_element_down)
        image.on("svg:pointerup", self._on_element_up)
        image.on("svg:click", self._on_element_click)
        self.images[pane.pane_id] = image

    def update(self) -> None:
        """Redraw every pane."""
        for pane_id in list(self.images):
            self._redraw(pane_id)

    def _redraw(self, pane_id: str):
        image = self.images.get(pane_id)
        pane = self.session.panes.get(pane_id)
        if image is not None and pane is not None:
            image.content = self.figures.pane_svg(pane)

    def _redraw_all(self, **_):
        self.update()

    def _has_data(self) -> bool:
        return bool(self.session.panes)

    # === Event handlers ===

    def _on_data_loaded(self, data_type: str, pane_id: Optional[str] = None):
        if data_type in ("pane", "pane_cleared", "cleared"):
            self._rebuild()
            self.update_visibility()

    def _on_view_changed(self, pane_id: str):
        self._redraw(pane_id)

    def _on_display_options_changed(self, option_name: str, value):
        if option_name in ("highlight_colour", "force_show_mode"):
            return
        if option_name == "x_tick_count" and self.x_ticks_input is not None:
            self.x_ticks_input.value = value
        elif option_name == "y_tick_count" and self.y_ticks_input is not None:
            self.y_ticks_input.value = value
        self.update()

    def _set_ticks(self, x=None, y=None):
        if x is None and y is None:
            return
        self.viewer.axes.set_tick_counts(
            x=int(x) if x is not None else None,
            y=int(y) if y is not None else None,
        )

    def _on_pane_mouse(self, pane_id: str, e: MouseEventArguments):
        """Route pane mouse events to the gesture controller."""
        x, y = self.transform.image_to_surface(e.image_x, e.image_y)
        gestures = self.viewer.gestures
        if e.type == "mousedown":
            gestures.press(pane_id, x, y)
        elif e.type == "mousemove":
            gestures.move(pane_id, x, y)
        elif e.type == "mouseup":
            gestures.release(pane_id, x, y)

    def _on_wheel(self, pane_id: str, e):
        pane = self.session.panes.get(pane_id)
        if pane is None:
            return
        self.viewer.gestures.wheel(
            pane_id,
            dx=e.args.get("deltaX", 0) or 0,
            dy=e.args.get("deltaY", 0) or 0,
            ctrl=bool(e.args.get("ctrlKey")),
            shift=bool(e.args.get("shiftKey")),
            cursor_fraction=self.transform.cursor_fraction(pane, e.args.get("offsetX", 0)),
        )

    def _element_at(self, e):
        """Resolve the SVG element of an event to a peak or distance."""
        element_id = (e.args or {}).get("element_id") or ""
        try:
            kind, pane_id, index = parse_element_id(element_id)
        except ValueError:
            return None, None
        pane = self.session.panes.get(pane_id)
        if pane is None:
            return None, None
        items = pane.peaks if kind == "peak" else pane.distances
        if not 0 <= index < len(items):
            return None, None
        return kind, items[index]

    def _on_element_down(self, e):
        kind, item = self._element_at(e)
        if kind == "peak":
            self.viewer.gestures.peak_press(item)

    def _on_element_up(self, e):
        kind, item = self._element_at(e)
        if kind == "peak":
            annotation = self.viewer.gestures.peak_release(item)
            if annotation is not None:
                ui.notify(f"Δm/z = {annotation.label}", type="positive")

    def _on_element_click(self, e):
        kind, item = self._element_at(e)
        if kind == "distance":
            self.viewer.gestures.remove_distance(item)
        elif kind == "peak":
            self.viewer.gestures.peak_click(item)

    def _on_key(self, e):
        if not e.action.keydown:
            return
        self.viewer.gestures.key(e.key.name, ctrl=e.modifiers.ctrl)
