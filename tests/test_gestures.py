"""Tests for rubber-band zoom, distance measurement, wheel and key gestures."""

import pytest


class TestRubberBand:
    """Tests for drag-to-zoom on a single pane (800x400 over 0-1000)."""

    def test_short_drag_is_a_click(self, viewer):
        """A 2 px drag on an 800 px pane is below the minimum and discarded."""
        pane = viewer.session.get_pane("single")
        viewer.gestures.press("single", 10.0, 100.0)

        assert not viewer.gestures.release("single", 12.0, 100.0)
        assert pane.viewport == (0.0, 1000.0, 1000.0)
        assert viewer.session.drag is None
        assert pane.selection.hidden

    def test_drag_zooms_to_selection(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.gestures.press("single", 200.0, 100.0)
        viewer.gestures.move("single", 400.0, 100.0)

        assert viewer.gestures.release("single", 600.0, 100.0)
        assert pane.min_mz == pytest.approx(250.0)
        assert pane.max_mz == pytest.approx(750.0)
        # The selection reaches from y=100 to the baseline: 3/4 of the height
        assert pane.max_intensity == pytest.approx(750.0)

    def test_drag_right_to_left(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.gestures.press("single", 600.0, 100.0)
        viewer.gestures.release("single", 200.0, 100.0)
        assert (pane.min_mz, pane.max_mz) == pytest.approx((250.0, 750.0))

    def test_drag_uses_current_viewport(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.viewport.zoom(pane, 250.0, 750.0, 1000.0)
        viewer.gestures.press("single", 0.0, 0.0)
        viewer.gestures.release("single", 400.0, 0.0)
        assert (pane.min_mz, pane.max_mz) == pytest.approx((250.0, 500.0))

    def test_selection_is_clamped(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.gestures.press("single", 100.0, 50.0)
        viewer.gestures.move("single", 900.0, -20.0)

        assert not pane.selection.hidden
        assert pane.selection.left == 100.0
        assert pane.selection.width == 700.0
        assert pane.selection.offset_y == 1.0
        assert pane.selection.height == 399.0

    def test_intensity_stays_positive(self, viewer):
        """A selection dragged along the baseline keeps one pixel of height."""
        pane = viewer.session.get_pane("single")
        viewer.gestures.press("single", 200.0, 400.0)
        viewer.gestures.release("single", 600.0, 400.0)
        assert pane.max_intensity == pytest.approx(1000.0 / 400.0)

    def test_selection_changed_emitted(self, viewer):
        received = []
        viewer.session.on_selection_changed(lambda: received.append(True))
        viewer.gestures.press("single", 100.0, 50.0)
        viewer.gestures.move("single", 200.0, 50.0)
        assert len(received) == 2

    def test_move_without_drag(self, viewer):
        assert not viewer.gestures.move("single", 200.0, 50.0)

    def test_press_on_unknown_pane(self, viewer):
        assert not viewer.gestures.press("missing", 10.0, 10.0)


class TestMirroredDrag:
    """Tests for drags on a first/second pane pair."""

    def test_partner_gets_same_mz_range(self, mirrored):
        first = mirrored.session.get_pane("first")
        second = mirrored.session.get_pane("second")
        mirrored.gestures.press("first", 200.0, 100.0)
        mirrored.gestures.release("first", 600.0, 100.0)

        assert (second.min_mz, second.max_mz) == (first.min_mz, first.max_mz)
        assert first.max_intensity == pytest.approx(750.0)
        assert second.max_intensity == 2000.0

    def test_second_pane_measures_from_bottom(self, mirrored):
        """The second pane hangs from the top, so its offset counts upward."""
        second = mirrored.session.get_pane("second")
        mirrored.gestures.press("second", 200.0, 100.0)
        mirrored.gestures.move("second", 600.0, 100.0)

        assert second.selection.offset_y == 300.0
        assert second.selection.height == 100.0
        assert second.selection.top == 0.0

        mirrored.gestures.release("second", 600.0, 100.0)
        assert second.max_intensity == pytest.approx(500.0)
        assert mirrored.session.get_pane("first").max_intensity == 1000.0

    def test_linked_selection_preview(self, mirrored):
        second = mirrored.session.get_pane("second")
        mirrored.gestures.press("first", 200.0, 100.0)
        mirrored.gestures.move("first", 600.0, 100.0)

        assert not second.selection.hidden
        assert second.selection.linked
        assert (second.selection.left, second.selection.width) == (200.0, 400.0)
        assert second.selection.height == 400.0

    def test_release_hides_both_selections(self, mirrored):
        mirrored.gestures.press("first", 200.0, 100.0)
        mirrored.gestures.release("first", 600.0, 100.0)
        assert all(p.selection.hidden for p in mirrored.session.panes.values())


class TestSuspendResume:
    """Tests for drags that leave and re-enter a pane."""

    def test_leave_suspends(self, viewer):
        viewer.gestures.press("single", 200.0, 100.0)
        viewer.gestures.leave("single")

        assert viewer.session.drag is None
        assert viewer.session.suspended_gesture.start_x == 200.0
        assert viewer.session.get_pane("single").selection.hidden

    def test_resume_in_same_pane(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.gestures.press("single", 200.0, 100.0)
        viewer.gestures.leave("single")

        assert viewer.gestures.move("single", 600.0, 100.0)
        assert viewer.session.suspended_gesture is None
        assert viewer.gestures.release("single", 600.0, 100.0)
        assert (pane.min_mz, pane.max_mz) == pytest.approx((250.0, 750.0))

    def test_resume_in_partner_swaps_roles(self, mirrored):
        first = mirrored.session.get_pane("first")
        second = mirrored.session.get_pane("second")
        mirrored.gestures.press("first", 200.0, 100.0)
        mirrored.gestures.leave("first")

        assert mirrored.gestures.move("second", 600.0, 100.0)
        drag = mirrored.session.drag
        assert (drag.pane_id, drag.start_x, drag.linked_pane_id) == ("second", 200.0, "first")
        assert first.selection.linked

        mirrored.gestures.release("second", 600.0, 100.0)
        assert (second.min_mz, second.max_mz) == pytest.approx((250.0, 750.0))
        assert (first.min_mz, first.max_mz) == pytest.approx((250.0, 750.0))
        assert second.max_intensity == pytest.approx(500.0)

    def test_new_press_drops_suspended_drag(self, viewer):
        viewer.gestures.press("single", 200.0, 100.0)
        viewer.gestures.leave("single")
        viewer.gestures.press("single", 300.0, 100.0)
        assert viewer.session.suspended_gesture is None
        assert viewer.session.drag.start_x == 300.0

    def test_cancel(self, viewer):
        viewer.gestures.press("single", 200.0, 100.0)
        viewer.gestures.leave("single")
        viewer.gestures.cancel()
        assert viewer.session.suspended_gesture is None
        assert not viewer.gestures.move("single", 600.0, 100.0)


class TestDistance:
    """Tests for peak-to-peak distance measurement."""

    def test_measure_distance(self, viewer):
        pane = viewer.session.get_pane("single")
        a, b = pane.peaks[3], pane.peaks[4]
        viewer.gestures.peak_press(a)
        annotation = viewer.gestures.peak_release(b)

        assert annotation.start_mz == 500.1
        assert annotation.end_mz == 502.3
        assert annotation.label == "2.200"
        assert annotation.intensity == pytest.approx(600.0)
        assert pane.distances == [annotation]
        assert viewer.session.distance_anchor is None

    def test_measure_right_to_left(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.gestures.peak_press(pane.peaks[4])
        annotation = viewer.gestures.peak_release(pane.peaks[3])
        assert annotation.start_mz < annotation.end_mz

    def test_same_peak_cancels(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.gestures.peak_press(pane.peaks[3])
        assert viewer.gestures.peak_release(pane.peaks[3]) is None
        assert pane.distances == []

    def test_release_without_anchor(self, viewer):
        pane = viewer.session.get_pane("single")
        assert viewer.gestures.peak_release(pane.peaks[3]) is None

    def test_different_panes_ignored(self, mirrored):
        first = mirrored.session.get_pane("first")
        second = mirrored.session.get_pane("second")
        mirrored.gestures.peak_press(first.peaks[3])
        assert mirrored.gestures.peak_release(second.peaks[4]) is None
        assert first.distances == [] and second.distances == []

    def test_anchor_blocks_rubber_band(self, viewer):
        """Pressing a peak also presses the pane underneath; no drag starts."""
        pane = viewer.session.get_pane("single")
        viewer.gestures.peak_press(pane.peaks[3])
        assert not viewer.gestures.press("single", 400.0, 100.0)
        assert viewer.session.drag is None

    def test_peak_press_cancels_drag(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.gestures.press("single", 100.0, 100.0)
        viewer.gestures.peak_press(pane.peaks[3])
        assert viewer.session.drag is None
        assert pane.selection.hidden

    def test_background_release_clears_anchor(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.gestures.peak_press(pane.peaks[3])
        assert not viewer.gestures.release("single", 400.0, 100.0)
        assert viewer.session.distance_anchor is None

    def test_leave_clears_anchor(self, viewer):
        viewer.gestures.peak_press(viewer.session.get_pane("single").peaks[3])
        viewer.gestures.leave("single")
        assert viewer.session.distance_anchor is None

    def test_remove_and_clear(self, viewer):
        pane = viewer.session.get_pane("single")
        received = []
        viewer.session.on_distances_changed(lambda: received.append(True))

        viewer.gestures.peak_press(pane.peaks[0])
        first = viewer.gestures.peak_release(pane.peaks[1])
        viewer.gestures.peak_press(pane.peaks[3])
        viewer.gestures.peak_release(pane.peaks[4])

        viewer.gestures.remove_distance(first)
        assert len(pane.distances) == 1
        viewer.gestures.clear_distances()
        assert pane.distances == []
        assert len(received) == 4


class TestWheel:
    """Tests for wheel zoom, pan and intensity scaling."""

    @pytest.fixture
    def pane(self, viewer):
        pane = viewer.session.get_pane("single")
        viewer.viewport.zoom(pane, 200.0, 800.0, 1000.0)
        return pane

    def test_zoom_out_at_center_is_symmetric(self, viewer, pane):
        viewer.gestures.wheel("single", 0, 100, cursor_fraction=0.5)
        assert (pane.min_mz, pane.max_mz) == pytest.approx((185.0, 815.0))

    def test_zoom_in_at_center(self, viewer, pane):
        viewer.gestures.wheel("single", 0, -100, cursor_fraction=0.5)
        assert (pane.min_mz, pane.max_mz) == pytest.approx((215.0, 785.0))

    def test_zoom_keeps_cursor_side_fixed(self, viewer, pane):
        viewer.gestures.wheel("single", 0, 100, cursor_fraction=0.0)
        assert (pane.min_mz, pane.max_mz) == pytest.approx((200.0, 830.0))

    def test_shift_pans(self, viewer, pane):
        viewer.gestures.wheel("single", 0, 100, shift=True)
        assert (pane.min_mz, pane.max_mz) == pytest.approx((206.0, 806.0))

    def test_pan_stops_at_zero(self, viewer, pane):
        viewer.gestures.wheel("single", -5000, 0)
        assert (pane.min_mz, pane.max_mz) == pytest.approx((0.0, 600.0))

    def test_ctrl_scales_intensity(self, viewer, pane):
        viewer.gestures.wheel("single", 0, 100, ctrl=True)
        assert pane.max_intensity == pytest.approx(1050.0)
        assert (pane.min_mz, pane.max_mz) == (200.0, 800.0)

    def test_ctrl_factor_has_floor(self, viewer, pane):
        viewer.gestures.wheel("single", 0, -10000, ctrl=True)
        assert pane.max_intensity == pytest.approx(100.0)

    def test_ctrl_only_affects_own_pane(self, mirrored):
        mirrored.gestures.wheel("first", 0, 100, ctrl=True)
        assert mirrored.session.get_pane("second").max_intensity == 2000.0

    def test_zoom_follows_in_partner(self, mirrored):
        mirrored.gestures.wheel("first", 0, -100, cursor_fraction=0.5)
        first = mirrored.session.get_pane("first")
        second = mirrored.session.get_pane("second")
        assert (second.min_mz, second.max_mz) == (first.min_mz, first.max_mz)

    def test_no_delta(self, viewer):
        assert not viewer.gestures.wheel("single", 0, 0)


class TestKeys:
    """Tests for keyboard shortcuts."""

    def test_ctrl_zero_resets(self, mirrored):
        mirrored.viewport.manual_zoom(10.0, 20.0, 5.0)
        assert mirrored.gestures.key("0", ctrl=True)
        assert not any(p.zoomed for p in mirrored.session.panes.values())

    def test_ctrl_plus_and_minus(self, viewer):
        pane = viewer.session.get_pane("single")
        assert viewer.gestures.key("=", ctrl=True)
        assert (pane.min_mz, pane.max_mz) == pytest.approx((25.0, 975.0))
        assert viewer.gestures.key("-", ctrl=True)
        assert pane.max_mz > 975.0

    def test_without_ctrl_ignored(self, viewer):
        assert not viewer.gestures.key("0")
        assert not viewer.gestures.key("=", ctrl=False)

    def test_unknown_key(self, viewer):
        assert not viewer.gestures.key("x", ctrl=True)


class TestForcedLabels:
    """Tests for clicking peaks to force labels."""

    def test_label_mode(self, viewer):
        peak = viewer.session.get_pane("single").peaks[5]
        viewer.gestures.set_force_show_mode("label")
        assert not peak.label_visible
        assert viewer.gestures.peak_click(peak)
        assert peak.label_visible

    def test_none_mode(self, viewer):
        peak = viewer.session.get_pane("single").peaks[5]
        assert not viewer.gestures.peak_click(peak)

    def test_unknown_mode(self, viewer):
        with pytest.raises(ValueError):
            viewer.gestures.set_force_show_mode("bold")

    def test_clear(self, viewer):
        peak = viewer.session.get_pane("single").peaks[5]
        viewer.gestures.set_force_show_mode("mz")
        viewer.gestures.peak_click(peak)
        viewer.gestures.clear_forced_labels()
        assert peak.mz_forced is None
