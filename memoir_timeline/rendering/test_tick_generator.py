"""
Tests for tick mark and label generation.
"""

import pytest

from memoir_timeline.data.event_ingestor import TimeRange
from memoir_timeline.rendering.tick_generator import (
    MAJOR, MAX_TICKS, MINOR, MINUTE_MS, format_tick_label, format_timeframe, generate_labels,
    generate_ticks, select_intervals,
)
from memoir_timeline.rendering.viewport import DAY_MS, HOUR_MS, ViewportState

# 2025-10-10T00:00:00Z
DAY_START_MS = 1760054400000


def time_range(duration_ms, start_ms=DAY_START_MS):
    return TimeRange(start_ms, start_ms + duration_ms, duration_ms)


class TestSelectIntervals:

    @pytest.mark.parametrize('window_ms, expected', [
        (HOUR_MS, (15 * MINUTE_MS, 5 * MINUTE_MS)),
        (2 * HOUR_MS, (HOUR_MS, 15 * MINUTE_MS)),
        (DAY_MS, (6 * HOUR_MS, HOUR_MS)),
        (10 * DAY_MS, (DAY_MS, 6 * HOUR_MS)),
        (30 * DAY_MS, (7 * DAY_MS, DAY_MS)),
        (200 * DAY_MS, (30 * DAY_MS, 7 * DAY_MS)),
        (800 * DAY_MS, (365 * DAY_MS, 30 * DAY_MS)),
    ])
    def test_interval_table(self, window_ms, expected):
        assert select_intervals(window_ms) == expected


class TestGenerateTicks:

    def test_no_range_gives_no_ticks(self):
        assert generate_ticks(None, ViewportState()) == []

    def test_one_day_window(self):
        ticks = generate_ticks(time_range(DAY_MS), ViewportState(1.0, 50.0))
        majors = [tick for tick in ticks if tick.kind == MAJOR]
        minors = [tick for tick in ticks if tick.kind == MINOR]

        assert [tick.position for tick in majors] == [0.0, 25.0, 50.0, 75.0, 100.0]
        assert len(minors) == 20
        # Majors come first
        assert ticks[:5] == majors

    def test_minor_ticks_skip_major_boundaries(self):
        ticks = generate_ticks(time_range(10 * DAY_MS), ViewportState(1.3, 47.0))
        major_times = {tick.timestamp_ms for tick in ticks if tick.kind == MAJOR}

        for tick in ticks:
            if tick.kind == MINOR:
                assert tick.timestamp_ms not in major_times
                assert tick.timestamp_ms % DAY_MS != 0

    def test_ticks_are_epoch_aligned_and_inside_window(self):
        ticks = generate_ticks(time_range(5 * HOUR_MS, DAY_START_MS + 7 * MINUTE_MS), ViewportState(3.0, 40.0))

        assert ticks
        for tick in ticks:
            assert 0.0 <= tick.position <= 100.0
            interval = 15 * MINUTE_MS if tick.kind == MAJOR else 5 * MINUTE_MS
            assert tick.timestamp_ms % interval == 0

    def test_safety_limit(self):
        ticks = generate_ticks(time_range(DAY_MS), ViewportState(1e-6, 50.0))

        assert len([tick for tick in ticks if tick.kind == MAJOR]) == MAX_TICKS
        assert len([tick for tick in ticks if tick.kind == MINOR]) == MAX_TICKS


class TestGenerateLabels:

    def test_labels_sit_on_major_ticks(self):
        ticks = generate_ticks(time_range(DAY_MS), ViewportState(1.0, 50.0))
        labels = generate_labels(ticks, DAY_MS)

        assert [label.position for label in labels] == [0.0, 25.0, 50.0, 75.0, 100.0]
        assert [label.text for label in labels] == [
            'Oct 10 00:00', 'Oct 10 06:00', 'Oct 10 12:00', 'Oct 10 18:00', 'Oct 11 00:00',
        ]

    def test_crowded_axis_labels_every_other_tick(self):
        ticks = generate_ticks(time_range(10 * DAY_MS), ViewportState(1.0, 50.0))
        labels = generate_labels(ticks, 10 * DAY_MS)

        assert len([tick for tick in ticks if tick.kind == MAJOR]) == 11
        assert [label.text for label in labels] == [
            'Oct 10', 'Oct 12', 'Oct 14', 'Oct 16', 'Oct 18', 'Oct 20',
        ]

    @pytest.mark.parametrize('window_ms, expected', [
        (HOUR_MS, '12:00'),
        (DAY_MS, 'Oct 10 12:00'),
        (10 * DAY_MS, 'Oct 10'),
        (100 * DAY_MS, 'Oct 2025'),
        (1000 * DAY_MS, '2025'),
    ])
    def test_label_format_follows_window(self, window_ms, expected):
        assert format_tick_label(DAY_START_MS + 12 * HOUR_MS, window_ms) == expected

    def test_label_timezone(self):
        assert format_tick_label(DAY_START_MS + 12 * HOUR_MS, HOUR_MS, 'Europe/Berlin') == '14:00'


class TestFormatTimeframe:

    @pytest.mark.parametrize('duration_ms, expected', [
        (730 * DAY_MS, '2.0 years'),
        (60 * DAY_MS, '2.0 months'),
        (10 * DAY_MS, '10.0 days'),
        (2 * HOUR_MS, '2.0 hours'),
        (30 * MINUTE_MS, '30 minutes'),
    ])
    def test_timeframe_text(self, duration_ms, expected):
        assert format_timeframe(time_range(duration_ms), ViewportState(1.0, 50.0)) == expected

    def test_no_data(self):
        assert format_timeframe(None, ViewportState()) == 'No data'
