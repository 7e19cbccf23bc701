"""
Tests for timestamp parsing and timezone formatting.
"""

import datetime

import pytest

from memoir_timeline.utils.timestamp_parser import TimestampParser

# 2025-10-10T12:00:00Z
NOON_MS = 1760097600000


class TestParseTimestamp:

    @pytest.mark.parametrize('value', [
        '2025-10-10T12:00:00Z',
        '2025-10-10T12:00:00+00:00',
        '2025-10-10T14:00:00+02:00',
        '2025-10-10T12:00:00.000Z',
        '2025-10-10 12:00:00',
        NOON_MS,
        float(NOON_MS),
        '1760097600',
        '1760097600000',
        datetime.datetime(2025, 10, 10, 12, 0),
        datetime.datetime(2025, 10, 10, 12, 0, tzinfo=datetime.timezone.utc),
    ])
    def test_formats(self, value):
        assert TimestampParser.to_epoch_ms(value) == NOON_MS

    @pytest.mark.parametrize('value', [
        None, '', '   ', 'not a date', True, float('nan'), float('inf'), '-5', '0',
        '1850-01-01T00:00:00Z', -3e12, [2025],
    ])
    def test_unusable_values(self, value):
        assert TimestampParser.parse_timestamp(value) is None

    @pytest.mark.parametrize('value, expected', [
        (0, 0),
        (-5, -5),
        # Late April 1970, not 2286 read as seconds
        (10 ** 10 - 1, 10 ** 10 - 1),
        (1000000000, 1000000000),
        ('1975-06-15T00:00:00Z', 172022400000),
        ('1969-07-20T20:17:00Z', -14182980000),
    ])
    def test_early_dates_are_kept(self, value, expected):
        assert TimestampParser.to_epoch_ms(value) == expected

    def test_result_is_aware_utc(self):
        dt = TimestampParser.parse_timestamp('2025-10-10T14:00:00+02:00')

        assert dt.tzinfo == datetime.timezone.utc
        assert dt.hour == 12

    def test_millisecond_precision(self):
        assert TimestampParser.to_epoch_ms('2025-10-10T12:00:00.250Z') == NOON_MS + 250


class TestConversions:

    def test_ms_round_trip(self):
        dt = TimestampParser.ms_to_datetime(NOON_MS)

        assert dt == datetime.datetime(2025, 10, 10, 12, 0, tzinfo=datetime.timezone.utc)
        assert TimestampParser.datetime_to_ms(dt) == NOON_MS

    def test_format_epoch_ms(self):
        assert TimestampParser.format_epoch_ms(NOON_MS) == '2025-10-10 12:00:00'
        assert TimestampParser.format_epoch_ms(NOON_MS, '%H:%M', 'Asia/Tokyo') == '21:00'
        assert TimestampParser.format_epoch_ms(None) == ''

    def test_resolve_timezone(self):
        assert TimestampParser.resolve_timezone('Europe/Paris') == 'Europe/Paris'
        assert TimestampParser.resolve_timezone('Mars/Olympus_Mons') == 'UTC'
        assert TimestampParser.resolve_timezone(None) == 'UTC'
