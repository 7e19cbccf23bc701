"""
Tests for snapshot ingestion and data range derivation.
"""

import pytest

from memoir_timeline.data.event_ingestor import (
    DEFAULT_RELEVANCE, TimeRange, derive_time_range, ingest_snapshots, parse_relevance, split_summary,
)

# 2025-10-10T00:00:00Z
DAY_START_MS = 1760054400000
HOUR_MS = 60 * 60 * 1000


def snapshot(hours, similarity=0.5, summary='Snapshot summary', **extra):
    record = {
        'timestamp': DAY_START_MS + hours * HOUR_MS,
        'similarity': similarity,
        'summary': summary,
    }
    record.update(extra)
    return record


class TestDeriveTimeRange:

    def test_empty_input_has_no_range(self):
        assert derive_time_range([]) is None
        assert derive_time_range(None) is None

    def test_untimestamped_snapshots_have_no_range(self):
        assert derive_time_range([{'summary': 'a'}, {'timestamp': None}, {'timestamp': 'garbage'}]) is None

    def test_range_spans_min_to_max(self):
        time_range = derive_time_range([snapshot(5), snapshot(1), snapshot(3)])

        assert time_range == TimeRange(DAY_START_MS + HOUR_MS, DAY_START_MS + 5 * HOUR_MS, 4 * HOUR_MS)

    def test_single_timestamp_gets_minimum_duration(self):
        time_range = derive_time_range([snapshot(2), snapshot(2)])

        assert time_range.min_time == time_range.max_time
        assert time_range.duration == 1

    def test_mixed_timestamp_formats(self):
        time_range = derive_time_range([
            {'timestamp': '2025-10-10T00:00:00Z'},
            {'timestamp': '1760097600'},        # seconds as text, 12:00
            {'timestamp': 1760140800000},       # milliseconds, next day 00:00
        ])

        assert time_range.min_time == DAY_START_MS
        assert time_range.max_time == DAY_START_MS + 24 * HOUR_MS


class TestIngestSnapshots:

    def test_positions_follow_time(self):
        snapshots = [snapshot(0), snapshot(6), snapshot(12)]
        events = ingest_snapshots(snapshots, derive_time_range(snapshots))

        assert [event.data_position for event in events] == [0.0, 50.0, 100.0]

    def test_untimestamped_snapshots_are_dropped(self):
        snapshots = [snapshot(0), {'summary': 'no time', 'similarity': 0.9}, snapshot(4)]
        events = ingest_snapshots(snapshots, derive_time_range(snapshots))

        assert len(events) == 2
        # Index refers back to the input list
        assert [event.index for event in events] == [0, 2]

    def test_no_range_gives_no_events(self):
        assert ingest_snapshots([snapshot(0)], None) == []

    def test_event_fields(self):
        snapshots = [snapshot(12, similarity=0.8, summary='Standup notes\nDiscussed the release', memory_id='m-1')]
        (event,) = ingest_snapshots(snapshots, derive_time_range(snapshots))

        assert event.relevance == 0.8
        assert event.title == 'Standup notes'
        assert event.description == 'Discussed the release'
        assert event.memory_id == 'm-1'
        assert event.date_label == '2025-10-10 12:00:00'
        assert event.snapshot is snapshots[0]

    def test_date_label_uses_timezone(self):
        snapshots = [snapshot(12)]
        (event,) = ingest_snapshots(snapshots, derive_time_range(snapshots), 'America/New_York')

        assert event.date_label == '2025-10-10 08:00:00'


class TestParseRelevance:

    @pytest.mark.parametrize('value, expected', [
        (0.75, 0.75),
        (1, 1.0),
        (1.7, 1.0),
        (-0.2, 0.0),
        (None, DEFAULT_RELEVANCE),
        ('high', DEFAULT_RELEVANCE),
        (True, DEFAULT_RELEVANCE),
        (float('nan'), DEFAULT_RELEVANCE),
    ])
    def test_parse_relevance(self, value, expected):
        assert parse_relevance(value) == expected


class TestSplitSummary:

    def test_first_line_is_title(self):
        assert split_summary('Title\nBody text\nMore') == ('Title', 'Body text\nMore')

    def test_long_title_is_truncated(self):
        title, description = split_summary('x' * 70)

        assert title == 'x' * 60 + '...'
        assert description == 'x' * 70

    def test_missing_summary(self):
        assert split_summary(None) == ('Snapshot', 'Snapshot')
        assert split_summary('') == ('Snapshot', 'Snapshot')

    def test_description_is_capped(self):
        _, description = split_summary('y' * 400)

        assert len(description) == 150
