"""
Tests for viewport coordinate math, bounds and the wheel/drag transforms.
"""

import math

import pytest

from memoir_timeline.data.event_ingestor import TimeRange, TimelineEvent
from memoir_timeline.data.history_range import FullHistoryRange
from memoir_timeline.rendering.viewport import (
    DAY_MS, HOUR_MS, EffectiveBounds, ViewportState, clamp_view_center, compute_effective_bounds,
    initial_viewport, pan_viewport, position_to_time, time_to_position, visible_events,
    window_duration_ms, zoom_at_cursor, zoom_for_starting_window,
)

# 2025-10-01T00:00:00Z
START_MS = 1759276800000
TEN_DAYS = TimeRange(START_MS, START_MS + 10 * DAY_MS, 10 * DAY_MS)
WIDE_BOUNDS = EffectiveBounds(-1000.0, 1000.0)


def make_event(index, position, relevance=0.5):
    return TimelineEvent(index=index, timestamp_ms=0, data_position=position, relevance=relevance,
                         title=f'event {index}', description='')


class TestCoordinates:

    def test_time_and_position_are_inverse(self):
        for timestamp in (START_MS, START_MS + 3 * HOUR_MS, START_MS + 10 * DAY_MS, START_MS - 40 * DAY_MS):
            position = time_to_position(timestamp, TEN_DAYS)
            assert position_to_time(position, TEN_DAYS) == pytest.approx(timestamp)

    def test_range_endpoints(self):
        assert time_to_position(START_MS, TEN_DAYS) == 0.0
        assert time_to_position(START_MS + 10 * DAY_MS, TEN_DAYS) == 100.0

    def test_window_geometry(self):
        state = ViewportState(zoom=2.0, view_center=50.0)

        assert state.window_width == 50.0
        assert state.window_start == 25.0
        assert state.window_end == 75.0
        assert window_duration_ms(state, TEN_DAYS) == 5 * DAY_MS

    def test_display_position_is_monotonic_and_invertible(self):
        state = ViewportState(zoom=3.7, view_center=41.0)
        positions = [-20.0, 0.0, 12.5, 41.0, 99.0, 130.0]
        display = [state.display_position(p) for p in positions]

        assert display == sorted(display)
        for position, percent in zip(positions, display):
            assert state.position_under(percent) == pytest.approx(position)


class TestStartingWindow:

    def test_auto(self):
        assert zoom_for_starting_window('auto', TEN_DAYS.duration) == 0.95

    def test_day_window_on_ten_days(self):
        assert zoom_for_starting_window('day', TEN_DAYS.duration) == pytest.approx(1000.0)

    def test_year_window_on_ten_days(self):
        zoom = zoom_for_starting_window('year', TEN_DAYS.duration)

        assert zoom == pytest.approx(2.7397, abs=1e-4)
        assert ViewportState(zoom).window_width == pytest.approx(36.5)

    def test_data_shorter_than_unit_gives_zoom_below_one(self):
        assert zoom_for_starting_window('week', DAY_MS) < 1

    def test_initial_viewport_is_centered(self):
        state = initial_viewport('month', TEN_DAYS)

        assert state.view_center == 50.0
        assert state.zoom == pytest.approx(10 / 30 * 100)


class TestEffectiveBounds:

    def test_data_range_only(self):
        bounds = compute_effective_bounds(TEN_DAYS, START_MS + 10 * DAY_MS, START_MS)

        assert bounds == EffectiveBounds(0.0, 100.0)
        assert bounds.min_zoom == 1.0

    def test_floor_and_now_extend_bounds(self):
        bounds = compute_effective_bounds(TEN_DAYS, START_MS + 20 * DAY_MS, START_MS - 10 * DAY_MS)

        assert bounds.min_position == pytest.approx(-100.0)
        assert bounds.max_position == pytest.approx(200.0)
        assert bounds.min_zoom == pytest.approx(100 / 300)

    def test_full_history_extends_bounds(self):
        full_history = FullHistoryRange(START_MS - 20 * DAY_MS, START_MS + 15 * DAY_MS)
        bounds = compute_effective_bounds(TEN_DAYS, START_MS + 10 * DAY_MS, START_MS, full_history)

        assert bounds.min_position == pytest.approx(-200.0)
        assert bounds.max_position == pytest.approx(150.0)

    def test_bounds_always_contain_data(self):
        inverted = FullHistoryRange(START_MS + 5 * DAY_MS, START_MS + 2 * DAY_MS)
        bounds = compute_effective_bounds(TEN_DAYS, START_MS, START_MS + DAY_MS, inverted)

        assert bounds.min_position <= 0.0
        assert bounds.max_position >= 100.0


class TestClampViewCenter:

    @pytest.mark.parametrize('center, width, expected', [
        (50.0, 20.0, 50.0),
        (-30.0, 20.0, 10.0),
        (95.0, 20.0, 90.0),
        (10.0, 200.0, 50.0),
    ])
    def test_clamp(self, center, width, expected):
        assert clamp_view_center(center, width, EffectiveBounds(0.0, 100.0)) == expected


class TestZoomAtCursor:

    def test_position_under_cursor_is_preserved(self):
        state = ViewportState(1.0, 50.0)
        anchor = state.position_under(25.0)

        new_state = zoom_at_cursor(state, WIDE_BOUNDS, 25.0, -100)

        assert new_state.zoom == pytest.approx(math.e)
        assert new_state.position_under(25.0) == pytest.approx(anchor)

    def test_zoom_out_is_limited_to_bounds(self):
        bounds = EffectiveBounds(0.0, 100.0)
        new_state = zoom_at_cursor(ViewportState(1.0, 50.0), bounds, 80.0, 1000)

        assert new_state.zoom == bounds.min_zoom
        assert new_state.view_center == 50.0

    def test_zoom_in_is_limited_to_max_zoom(self):
        new_state = zoom_at_cursor(ViewportState(9000.0, 50.0), WIDE_BOUNDS, 50.0, -1000)

        assert new_state.zoom == 10000.0

    def test_full_center_weight_zooms_to_center(self):
        state = ViewportState(2.0, 40.0)
        new_state = zoom_at_cursor(state, WIDE_BOUNDS, 90.0, -50, center_weight=1.0)

        assert new_state.view_center == pytest.approx(40.0)

    def test_result_is_clamped(self):
        bounds = EffectiveBounds(0.0, 100.0)
        new_state = zoom_at_cursor(ViewportState(2.0, 25.0), bounds, 0.0, 50)

        assert new_state.window_start >= bounds.min_position - 1e-9
        assert new_state.window_end <= bounds.max_position + 1e-9


class TestPanViewport:

    def test_drag_right_moves_view_left(self):
        state = ViewportState(2.0, 50.0)
        new_state = pan_viewport(state, EffectiveBounds(0.0, 100.0), 100, 1000)

        assert new_state.view_center == pytest.approx(45.0)
        assert new_state.zoom == 2.0

    def test_drag_is_clamped(self):
        new_state = pan_viewport(ViewportState(2.0, 50.0), EffectiveBounds(0.0, 100.0), -10000, 1000)

        assert new_state.view_center == 75.0

    def test_zero_width_is_ignored(self):
        state = ViewportState(2.0, 50.0)

        assert pan_viewport(state, EffectiveBounds(0.0, 100.0), 50, 0) is state


def test_visible_events_inside_window():
    events = [make_event(0, 0.0), make_event(1, 50.0), make_event(2, 100.0), make_event(3, 25.0)]
    visible = visible_events(events, ViewportState(2.0, 50.0))

    assert [item.event.index for item in visible] == [1, 3]
    assert [item.display_position for item in visible] == [50.0, 0.0]
