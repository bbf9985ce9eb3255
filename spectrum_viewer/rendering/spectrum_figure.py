"""Figures for spectrum panes (SVG overlay) and the error graph (plotly)."""

from html import escape
from typing import Any, Sequence

import plotly.graph_objects as go

from spectrum_viewer.annotation.tick_formatter import format_mz_label
from spectrum_viewer.core.config import (
    DEFAULTS,
    HIGHLIGHT_COLOURS,
    ION_COLORS,
    PEPTIDE_COLOURS,
    UNASSIGNED_COLOR,
)
from spectrum_viewer.core.models import Pane, Peak
from spectrum_viewer.core.state import ViewerSession
from spectrum_viewer.utils.coordinate_transform import CoordinateTransform


def peak_element_id(pane_id: str, index: int) -> str:
    return f"peak-{pane_id}-{index}"


def distance_element_id(pane_id: str, index: int) -> str:
    return f"distance-{pane_id}-{index}"


def parse_element_id(element_id: str) -> tuple[str, str, int]:
    """Split an element id into (kind, pane id, index).

    Raises:
        ValueError: If the id was not produced by this module
    """
    kind, _, rest = element_id.partition("-")
    pane_id, _, index = rest.rpartition("-")
    if kind not in ("peak", "distance") or not pane_id:
        raise ValueError(f"Not a spectrum element id: {element_id}")
    return kind, pane_id, int(index)


def peak_color(peak: Peak, mode: str = "ion", peptide_keys: Sequence[str] = ()) -> str:
    """Stroke colour of a peak, highlight first.

    Args:
        peak: Peak to colour
        mode: "ion" colours by ion series, "peptide" by the peptide the
            fragment belongs to, "none" draws every assigned peak alike
        peptide_keys: Peptide keys in order of first appearance, for "peptide"
    """
    if peak.n > 0:
        return HIGHLIGHT_COLOURS.get(peak.colour or "default", HIGHLIGHT_COLOURS["default"])
    if peak.temporary:
        return HIGHLIGHT_COLOURS["default"]
    if peak.ion_series is None:
        return UNASSIGNED_COLOR
    if mode == "none":
        return DEFAULTS.AXIS_COLOR
    if mode == "peptide" and peak.position is not None and peak.position[0] in peptide_keys:
        index = list(peptide_keys).index(peak.position[0])
        return PEPTIDE_COLOURS[index % len(PEPTIDE_COLOURS)]
    return ION_COLORS.get(peak.ion_series, ION_COLORS["other"])


class SpectrumFigureBuilder:
    """Builds the SVG content drawn over a pane's interactive image.

    Peaks and distance annotations carry element ids (see
    ``peak_element_id``) so pointer events can be routed back to them.
    """

    def __init__(self, session: ViewerSession, transform: CoordinateTransform):
        self.session = session
        self.transform = transform

    def pane_svg(self, pane: Pane) -> str:
        """Full SVG content for one pane."""
        parts = [self._axes_svg(pane)]
        parts.extend(self._peaks_svg(pane))
        parts.extend(self._distances_svg(pane))
        parts.append(self._selection_svg(pane))
        return "\n".join(p for p in parts if p)

    def _axes_svg(self, pane: Pane) -> str:
        left = self.transform.margin_left
        top = self.transform.margin_top
        baseline = self.transform.baseline_y(pane)
        color = DEFAULTS.AXIS_COLOR
        lines = [
            f'<line x1="{left}" y1="{baseline}" x2="{left + pane.width}" y2="{baseline}" '
            f'stroke="{color}" stroke-width="1"/>',
            f'<line x1="{left}" y1="{top}" x2="{left}" y2="{top + pane.height}" '
            f'stroke="{color}" stroke-width="1"/>',
        ]

        # x ticks below the first/single pane, above the second
        text_y = baseline + 16 if pane.role != "second" else baseline - 6
        count = len(pane.x_ticks)
        for i, text in enumerate(pane.x_ticks):
            x = left + (i / (count - 1)) * pane.width if count > 1 else left
            lines.append(
                f'<text x="{x}" y="{text_y}" fill="{color}" font-size="11" '
                f'text-anchor="middle">{escape(text)}</text>'
            )

        count = len(pane.y_ticks)
        for i, text in enumerate(pane.y_ticks):
            fraction = i / (count - 1) if count > 1 else 0.0
            if pane.role == "second":
                y = top + fraction * pane.height
            else:
                y = top + (1 - fraction) * pane.height
            lines.append(
                f'<text x="{left - 6}" y="{y + 4}" fill="{color}" font-size="11" '
                f'text-anchor="end">{escape(text)}</text>'
            )
        return "\n".join(lines)

    def _peaks_svg(self, pane: Pane) -> list[str]:
        parts = []
        mode = self.session.peak_colour_mode
        peptide_keys = list(
            dict.fromkeys(p.position[0] for p in self.session.all_peaks() if p.position is not None)
        )
        baseline = self.transform.baseline_y(pane)
        label_dir = -1 if pane.role != "second" else 1

        for i, peak in enumerate(pane.peaks):
            if not pane.min_mz <= peak.mz <= pane.max_mz:
                continue
            if peak.ion_series is None and not self.session.show_unassigned:
                continue
            x, y = self.transform.data_to_pixel(pane, peak.mz, peak.intensity)
            opacity = 1.0
            if pane.highlighted and not peak.highlighted:
                opacity = DEFAULTS.DIMMED_OPACITY
            width = 2 if peak.highlighted else 1
            color = peak_color(peak, mode, peptide_keys)
            parts.append(
                f'<line id="{peak_element_id(pane.pane_id, i)}" x1="{x}" y1="{baseline}" '
                f'x2="{x}" y2="{y}" stroke="{color}" stroke-width="{width}" '
                f'opacity="{opacity}" pointer-events="all" style="cursor: pointer"/>'
            )
            if peak.cut:
                parts.append(f'<circle cx="{x}" cy="{y}" r="2" fill="{color}"/>')

            # Stack texts away from the peak top
            text_y = y + label_dir * 8
            if peak.label_visible and peak.label:
                parts.append(
                    f'<text x="{x}" y="{text_y}" fill="{color}" '
                    f'font-size="11" text-anchor="middle" opacity="{opacity}">{escape(peak.label)}</text>'
                )
                text_y += label_dir * 12
            if peak.mz_visible:
                parts.append(
                    f'<text x="{x}" y="{text_y}" fill="{DEFAULTS.AXIS_COLOR}" '
                    f'font-size="10" text-anchor="middle" opacity="{opacity}">'
                    f"{format_mz_label(peak.mz)}</text>"
                )
        return parts

    def _distances_svg(self, pane: Pane) -> list[str]:
        parts = []
        color = DEFAULTS.DISTANCE_COLOR
        for i, annotation in enumerate(pane.distances):
            x1, y = self.transform.data_to_pixel(pane, annotation.start_mz, annotation.intensity)
            x2, _ = self.transform.data_to_pixel(pane, annotation.end_mz, annotation.intensity)
            parts.append(
                f'<g id="{distance_element_id(pane.pane_id, i)}" pointer-events="all" '
                f'style="cursor: pointer">'
                f'<line x1="{x1}" y1="{y}" x2="{x2}" y2="{y}" stroke="{color}" '
                f'stroke-width="2" stroke-dasharray="4,3"/>'
                f'<text x="{(x1 + x2) / 2}" y="{y - 4}" fill="{color}" font-size="11" '
                f'text-anchor="middle">{escape(annotation.label)}</text></g>'
            )
        return parts

    def _selection_svg(self, pane: Pane) -> str:
        selection = pane.selection
        if selection.hidden:
            return ""
        dash = ' stroke-dasharray="5,5"' if selection.linked else ""
        return (
            f'<rect x="{self.transform.margin_left + selection.left}" '
            f'y="{self.transform.margin_top + selection.top}" '
            f'width="{selection.width}" height="{selection.height}" '
            f'fill="{DEFAULTS.SELECTION_COLOR}" stroke="{DEFAULTS.SELECTION_STROKE}" '
            f'stroke-width="1"{dash} pointer-events="none"/>'
        )


def create_error_figure(session: ViewerSession, title: str) -> go.Figure:
    """Scatter of the projected error points over the first pane's m/z range.

    The m/z axis shows the first pane's error axis texts at its ends.

    A density overlay that is a plotly trace is added to the figure; other
    overlay types are rendered by the panel.
    """
    fig = go.Figure()

    visible = [p for p in session.error_points if not p.hidden]
    assigned = [p for p in visible if p.assigned]
    unassigned = [p for p in visible if not p.assigned]
    unit = "ppm" if session.error_relative else "Da"

    for points, name, color in (
        (assigned, "assigned", ION_COLORS["b"]),
        (unassigned, "unassigned", UNASSIGNED_COLOR),
    ):
        if not points:
            continue
        fig.add_trace(
            go.Scatter(
                x=[p.mz for p in points],
                y=[p.y for p in points],
                mode="markers",
                marker={"color": color, "size": 5},
                text=[p.label for p in points],
                hovertemplate=f"m/z: %{{x:.4f}}<br>Error: %{{y:.3f}} {unit}<br>%{{text}}<extra></extra>",
                name=name,
            )
        )

    overlay: Any = session.density_overlay
    if isinstance(overlay, go.Figure):
        for trace in overlay.data:
            fig.add_trace(trace)
    elif overlay is not None and hasattr(overlay, "to_plotly_json"):
        fig.add_trace(overlay)

    # The m/z axis runs along zero, or along the bottom when the range excludes zero
    axis_y = session.error_y_min if session.error_hug_bottom else 0
    fig.add_hline(y=axis_y, line_color=DEFAULTS.AXIS_COLOR, line_width=1)

    pane = session.first_pane
    if pane is not None:
        min_text, max_text = pane.error_axis_text
        fig.update_xaxes(
            range=[pane.min_mz, pane.max_mz],
            tickmode="array",
            tickvals=[pane.min_mz, pane.max_mz],
            ticktext=[min_text, max_text],
        )
    fig.update_xaxes(showgrid=False, linecolor=DEFAULTS.AXIS_COLOR, tickcolor=DEFAULTS.AXIS_COLOR, title="m/z")
    fig.update_yaxes(
        range=[session.error_y_min, session.error_y_max],
        showgrid=False,
        fixedrange=True,
        linecolor=DEFAULTS.AXIS_COLOR,
        tickcolor=DEFAULTS.AXIS_COLOR,
        title=unit,
    )
    fig.update_layout(
        title={"text": title, "font": {"size": 13, "color": "#888"}},
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        height=DEFAULTS.ERROR_GRAPH_HEIGHT,
        margin={"l": DEFAULTS.MARGIN_LEFT, "r": DEFAULTS.MARGIN_RIGHT, "t": 40, "b": 40},
        showlegend=False,
        modebar={"remove": ["lasso2d", "select2d"]},
        font={"color": "#888"},
        uirevision="error_graph_stable",
    )
    return fig
