"""Tests for the rendering module (axis ticks, coordinates, figures)."""

import plotly.graph_objects as go
import pytest

from spectrum_viewer.core.config import (
    DEFAULTS,
    HIGHLIGHT_COLOURS,
    ION_COLORS,
    PEPTIDE_COLOURS,
    UNASSIGNED_COLOR,
)
from spectrum_viewer.core.models import ErrorPoint, Pane, UnassignedError
from spectrum_viewer.interaction.highlight import Selector
from spectrum_viewer.rendering.axis_renderer import _resize_ticks
from spectrum_viewer.rendering.spectrum_figure import (
    SpectrumFigureBuilder,
    create_error_figure,
    parse_element_id,
    peak_color,
    peak_element_id,
)
from spectrum_viewer.utils.coordinate_transform import CoordinateTransform
from spectrum_viewer.viewer import SpectrumViewer


class TestAxisRenderer:
    """Tests for tick texts of a single pane (0-1000 m/z, intensity 1000)."""

    def test_initial_ticks(self, viewer):
        pane = viewer.session.get_pane("single")
        assert pane.x_ticks == ["0", "250", "500", "750", "1000"]
        assert pane.y_ticks == ["0", "2.50e+2", "5.00e+2", "7.50e+2", "1.00e+3"]

    def test_percent_ticks(self, viewer):
        viewer.axes.set_y_transforms(percent=True)
        assert viewer.session.get_pane("single").y_ticks == ["0", "25", "50", "75", "100"]

    def test_sqrt_ticks(self, viewer):
        viewer.axes.set_y_transforms(sqrt=True)
        assert viewer.session.get_pane("single").y_ticks == [
            "0", "1.60e+1", "2.20e+1", "2.70e+1", "3.20e+1",
        ]

    def test_sqrt_percent_ticks(self, viewer):
        viewer.axes.set_y_transforms(sqrt=True, percent=True)
        assert viewer.session.get_pane("single").y_ticks == ["0", "50", "71", "87", "100"]

    def test_percent_is_relative_to_initial_maximum(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.axes.set_y_transforms(percent=True)
        viewer.viewport.zoom(pane, 0.0, 1000.0, 500.0)
        assert pane.y_ticks[-1] == "50"

    def test_percent_ticks_of_empty_pane(self):
        viewer = SpectrumViewer()
        pane = viewer.session.load_pane("single", [], 0.0, 0.0, 0.0)
        viewer.axes.set_y_transforms(sqrt=True, percent=True)
        assert pane.y_ticks == ["0", "50", "71", "87", "100"]

    def test_tick_counts(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.axes.set_tick_counts(x=3, y=1)

        assert viewer.session.y_tick_count == DEFAULTS.MIN_TICKS
        assert pane.x_ticks == ["0", "500", "1000"]
        assert pane.y_ticks == ["0", "1.00e+3"]

    def test_tick_counts_emit_display_option(self, viewer):
        received = []
        viewer.session.on_display_options_changed(
            lambda option_name, value: received.append((option_name, value))
        )
        viewer.axes.set_tick_counts(x=7)
        assert received == [("x_tick_count", 7)]
        assert len(viewer.session.get_pane("single").x_ticks) == 7

    def test_zoomed_ticks_get_more_digits(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.viewport.zoom(pane, 500.0, 500.25, 1000.0)
        assert pane.x_ticks == ["500.000", "500.062", "500.125", "500.188", "500.250"]

    def test_error_axis_text(self, viewer):
        pane = viewer.session.get_pane("single")
        assert pane.error_axis_text == ("0", "1000")
        viewer.viewport.zoom(pane, 100.0, 200.0, 10.0)
        assert pane.error_axis_text == ("100", "200")

    def test_distance_labels_follow_zoom(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.gestures.peak_press(pane.peaks[3])
        annotation = viewer.gestures.peak_release(pane.peaks[4])
        assert annotation.label == "2.200"

        viewer.viewport.zoom(pane, 500.0, 500.0625, 1000.0)
        assert annotation.label == "2.2000"

    def test_resize_ticks_at_front(self):
        ticks = ["a", "b", "c"]
        _resize_ticks(ticks, 5)
        assert ticks == ["", "", "a", "b", "c"]
        _resize_ticks(ticks, 2)
        assert ticks == ["b", "c"]


class TestCoordinateTransform:
    """Tests for CoordinateTransform class."""

    @pytest.fixture
    def transform(self):
        return CoordinateTransform(margin_left=80, margin_top=20)

    @pytest.fixture
    def pane(self):
        return Pane("p", 1000.0, 1000.0, 1000.0, width=800, height=400)

    @pytest.fixture
    def second(self):
        return Pane("q", 1000.0, 1000.0, 1000.0, role="second", width=800, height=400)

    def test_data_to_pixel_center(self, transform, pane):
        x, y = transform.data_to_pixel(pane, 500.0, 500.0)
        assert x == pytest.approx(480.0)
        assert y == pytest.approx(220.0)

    def test_data_to_pixel_mirrored(self, transform, pane, second):
        """Intensity grows upward in the first pane and downward in the second."""
        assert transform.data_to_pixel(pane, 0.0, 250.0)[1] == pytest.approx(320.0)
        assert transform.data_to_pixel(second, 0.0, 250.0)[1] == pytest.approx(120.0)

    def test_intensity_above_maximum_is_clipped(self, transform, pane):
        assert transform.data_to_pixel(pane, 500.0, 2000.0)[1] == pytest.approx(20.0)

    def test_roundtrip(self, transform, pane):
        x, y = transform.data_to_pixel(pane, 321.0, 123.0)
        mz, intensity = transform.pixel_to_data(pane, x, y)
        assert mz == pytest.approx(321.0)
        assert intensity == pytest.approx(123.0)

    def test_pixel_to_data_second(self, transform, second):
        mz, intensity = transform.pixel_to_data(second, 80.0, 120.0)
        assert mz == pytest.approx(0.0)
        assert intensity == pytest.approx(250.0)

    def test_pixel_to_data_clamps(self, transform, pane):
        mz, intensity = transform.pixel_to_data(pane, 0.0, 0.0)
        assert mz == pytest.approx(0.0)
        assert intensity == pytest.approx(1000.0)

    def test_baseline(self, transform, pane, second):
        assert transform.baseline_y(pane) == 420.0
        assert transform.baseline_y(second) == 20.0

    def test_cursor_fraction(self, transform, pane):
        assert transform.cursor_fraction(pane, 480.0) == pytest.approx(0.5)
        assert transform.cursor_fraction(pane, 0.0) == 0.0
        assert transform.cursor_fraction(pane, 2000.0) == 1.0

    def test_image_to_surface(self, transform):
        assert transform.image_to_surface(100.0, 50.0) == (20.0, 30.0)


class TestElementIds:
    def test_peak_id_roundtrip(self):
        assert parse_element_id(peak_element_id("first", 3)) == ("peak", "first", 3)

    def test_pane_id_with_dash(self):
        assert parse_element_id("peak-my-pane-12") == ("peak", "my-pane", 12)
        assert parse_element_id("distance-single-0") == ("distance", "single", 0)

    @pytest.mark.parametrize("element_id", ["axis-single-0", "peak-3", "peak-single-x", ""])
    def test_invalid(self, element_id):
        with pytest.raises(ValueError):
            parse_element_id(element_id)


class TestSpectrumFigure:
    """Tests for the SVG drawn over a pane."""

    @pytest.fixture
    def builder(self, viewer):
        transform = CoordinateTransform(DEFAULTS.MARGIN_LEFT, DEFAULTS.MARGIN_TOP)
        return SpectrumFigureBuilder(viewer.session, transform)

    def test_peaks_have_ids(self, viewer, builder):
        svg = builder.pane_svg(viewer.session.get_pane("single"))
        for i in range(6):
            assert f'id="peak-single-{i}"' in svg
        assert ">b1<" in svg

    def test_ticks_drawn(self, viewer, builder):
        svg = builder.pane_svg(viewer.session.get_pane("single"))
        assert ">750<" in svg
        assert ">7.50e+2<" in svg

    def test_unassigned_hidden(self, viewer, builder):
        viewer.viewport.set_show_unassigned(False)
        svg = builder.pane_svg(viewer.session.get_pane("single"))
        assert 'id="peak-single-2"' not in svg
        assert 'id="peak-single-0"' in svg

    def test_peaks_outside_viewport_skipped(self, viewer, builder):
        pane = viewer.session.get_pane("single")
        viewer.viewport.zoom(pane, 0.0, 300.0, 1000.0)
        svg = builder.pane_svg(pane)
        assert 'id="peak-single-1"' in svg
        assert 'id="peak-single-3"' not in svg

    def test_cut_peaks_marked(self, viewer, builder):
        pane = viewer.session.get_pane("single")
        assert "<circle" not in builder.pane_svg(pane)
        viewer.viewport.zoom(pane, 0.0, 1000.0, 500.0)
        assert "<circle" in builder.pane_svg(pane)

    def test_selection_rect(self, viewer, builder):
        pane = viewer.session.get_pane("single")
        assert "<rect" not in builder.pane_svg(pane)
        viewer.gestures.press("single", 100.0, 50.0)
        viewer.gestures.move("single", 300.0, 50.0)
        assert "<rect" in builder.pane_svg(pane)

    def test_distance_drawn(self, viewer, builder):
        pane = viewer.session.get_pane("single")
        viewer.gestures.peak_press(pane.peaks[3])
        viewer.gestures.peak_release(pane.peaks[4])
        svg = builder.pane_svg(pane)
        assert 'id="distance-single-0"' in svg
        assert ">2.200<" in svg

    def test_dimmed_when_something_highlighted(self, viewer, builder):
        pane = viewer.session.get_pane("single")
        viewer.highlights.toggle(Selector.ion_series("b"), True, True)
        svg = builder.pane_svg(pane)
        assert f'opacity="{DEFAULTS.DIMMED_OPACITY}"' in svg

    def test_peak_color(self, viewer):
        peaks = viewer.session.get_pane("single").peaks
        assert peak_color(peaks[0]) == ION_COLORS["b"]
        assert peak_color(peaks[2]) == UNASSIGNED_COLOR
        viewer.highlights.toggle(Selector.ion_series("b"), True, True, "red")
        assert peak_color(peaks[0]) == HIGHLIGHT_COLOURS["red"]

    def test_peak_color_modes(self, viewer):
        peaks = viewer.session.get_pane("single").peaks
        assert peak_color(peaks[0], "none") == DEFAULTS.AXIS_COLOR
        assert peak_color(peaks[2], "none") == UNASSIGNED_COLOR
        assert peak_color(peaks[0], "peptide", ["other", "single"]) == PEPTIDE_COLOURS[1]
        assert peak_color(peaks[0], "peptide") == ION_COLORS["b"]

    def test_peptide_colouring_tells_mirrored_panes_apart(self, mirrored):
        session = mirrored.session
        builder = SpectrumFigureBuilder(
            session, CoordinateTransform(DEFAULTS.MARGIN_LEFT, DEFAULTS.MARGIN_TOP)
        )
        first_colour = f'stroke="{PEPTIDE_COLOURS[0]}"'
        second_colour = f'stroke="{PEPTIDE_COLOURS[1]}"'
        assert second_colour in builder.pane_svg(session.get_pane("first"))

        mirrored.highlights.set_peak_colour_mode("peptide")
        first = builder.pane_svg(session.get_pane("first"))
        second = builder.pane_svg(session.get_pane("second"))

        assert first_colour in first and second_colour not in first
        assert second_colour in second and first_colour not in second


class TestErrorFigure:
    """Tests for the plotly error graph."""

    @pytest.fixture
    def points(self, viewer):
        points = [
            ErrorPoint(300.0, 10.0, assigned_abs=0.002, assigned_rel=4.0),
            ErrorPoint(
                400.0, 5.0,
                unassigned_abs={"b": UnassignedError(-0.3, "b3")},
                unassigned_rel={"b": UnassignedError(-30.0, "b3")},
            ),
        ]
        viewer.session.load_error_points(points)
        return points

    def test_assigned_points(self, viewer, points):
        fig = create_error_figure(viewer.session, "title")
        assert len(fig.data) == 1
        assert list(fig.data[0].y) == [4.0]
        assert fig.layout.title.text == "title"
        assert list(fig.layout.yaxis.range) == [DEFAULTS.ERROR_Y_MIN, DEFAULTS.ERROR_Y_MAX]
        assert list(fig.layout.xaxis.range) == [0.0, 1000.0]

    def test_unassigned_points(self, viewer, points):
        viewer.error_graph.set_assigned_mode(False)
        viewer.error_graph.project()
        fig = create_error_figure(viewer.session, "title")
        assert len(fig.data) == 1
        assert list(fig.data[0].y) == [-30.0]
        assert list(fig.data[0].text) == ["b3"]

    def test_mz_axis_texts_follow_first_pane(self, viewer, points):
        fig = create_error_figure(viewer.session, "title")
        assert list(fig.layout.xaxis.ticktext) == ["0", "1000"]

        pane = viewer.session.get_pane("single")
        viewer.viewport.zoom(pane, 100.0, 200.0, 10.0)
        fig = create_error_figure(viewer.session, "title")
        assert list(fig.layout.xaxis.tickvals) == [100.0, 200.0]
        assert list(fig.layout.xaxis.ticktext) == ["100", "200"]

    def test_axis_line_hugs_bottom_for_positive_range(self, viewer, points):
        assert create_error_figure(viewer.session, "title").layout.shapes[0].y0 == 0

        viewer.error_graph.zoom_y(2.0, 10.0)
        assert create_error_figure(viewer.session, "title").layout.shapes[0].y0 == 2.0

        viewer.error_graph.zoom_y(-5.0, 5.0)
        assert create_error_figure(viewer.session, "title").layout.shapes[0].y0 == 0

    def test_trace_overlay_added(self, viewer, points):
        viewer.session.density_overlay = go.Scatter(x=[0, 1], y=[0, 1], name="density")
        fig = create_error_figure(viewer.session, "title")
        assert len(fig.data) == 2
        assert fig.data[-1].name == "density"

    def test_figure_overlay_added(self, viewer, points):
        viewer.session.density_overlay = go.Figure(go.Scatter(x=[0], y=[0], name="density"))
        fig = create_error_figure(viewer.session, "title")
        assert fig.data[-1].name == "density"

    def test_markup_overlay_not_added(self, viewer, points):
        viewer.session.density_overlay = "<svg></svg>"
        fig = create_error_figure(viewer.session, "title")
        assert len(fig.data) == 1
