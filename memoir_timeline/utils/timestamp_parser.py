"""
Timestamp Parser Utility for the Memoir Timeline
================================================

This module converts the timestamps carried by memory snapshots into the
single representation the timeline engine works with: integer milliseconds
since the Unix epoch, in UTC.

Supported Formats:
- ISO 8601 strings (with or without offset, trailing 'Z')
- Numbers, taken as Unix milliseconds (the snapshot wire format)
- Numeric strings, taken as seconds below 1e10 and milliseconds above
- Python datetime objects (naive values are taken as UTC)

Display formatting goes through pytz so labels and tooltips can be shown in
any configured timezone.
"""

import datetime
import logging
from typing import Optional, Union

import pytz

# Configure logger
logger = logging.getLogger(__name__)


class TimestampParser:
    """
    Unified timestamp parser for memory snapshots.

    All methods are static; the parser keeps no state. Parsing never raises:
    anything that cannot be understood yields None, which callers treat as
    "no timestamp".
    """

    # Unix epoch (January 1, 1970)
    UNIX_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)

    # Maximum reasonable timestamp (year 2100)
    MAX_TIMESTAMP = datetime.datetime(2100, 1, 1, tzinfo=datetime.timezone.utc)

    # Minimum reasonable timestamp (year 1900)
    MIN_TIMESTAMP = datetime.datetime(1900, 1, 1, tzinfo=datetime.timezone.utc)

    @staticmethod
    def parse_timestamp(timestamp: Union[str, int, float, datetime.datetime, None]) -> Optional[datetime.datetime]:
        """
        Parse a timestamp from various formats and return an aware UTC datetime.

        Args:
            timestamp: Timestamp as ISO string, epoch number, datetime or None

        Returns:
            datetime.datetime: Parsed timestamp in UTC, or None if parsing fails

        Examples:
            >>> TimestampParser.parse_timestamp("2025-10-10T12:00:00Z")
            datetime.datetime(2025, 10, 10, 12, 0, tzinfo=datetime.timezone.utc)

            >>> TimestampParser.parse_timestamp(1760097600000)  # milliseconds
            datetime.datetime(2025, 10, 10, 12, 0, tzinfo=datetime.timezone.utc)
        """
        if timestamp is None:
            return None

        # bool is an int subclass but never a timestamp
        if isinstance(timestamp, bool):
            return None

        if isinstance(timestamp, datetime.datetime):
            dt = TimestampParser._ensure_utc(timestamp)
            return dt if TimestampParser._is_reasonable_timestamp(dt) else None

        if isinstance(timestamp, (int, float)):
            return TimestampParser._parse_epoch_ms(timestamp)

        if isinstance(timestamp, str):
            if not timestamp.strip():
                return None
            return TimestampParser._parse_string_timestamp(timestamp)

        logger.warning(f"Unknown timestamp type: {type(timestamp)}")
        return None

    @staticmethod
    def to_epoch_ms(timestamp: Union[str, int, float, datetime.datetime, None]) -> Optional[int]:
        """
        Parse a timestamp and return it as integer epoch milliseconds.

        Args:
            timestamp: Any value accepted by parse_timestamp()

        Returns:
            int: Milliseconds since 1970-01-01 UTC, or None if parsing fails
        """
        dt = TimestampParser.parse_timestamp(timestamp)
        if dt is None:
            return None
        return TimestampParser.datetime_to_ms(dt)

    @staticmethod
    def datetime_to_ms(dt: datetime.datetime) -> int:
        """Convert a datetime (naive means UTC) to epoch milliseconds."""
        dt = TimestampParser._ensure_utc(dt)
        delta = dt - TimestampParser.UNIX_EPOCH
        return (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000

    @staticmethod
    def ms_to_datetime(epoch_ms: Union[int, float]) -> datetime.datetime:
        """Convert epoch milliseconds to an aware UTC datetime."""
        return TimestampParser.UNIX_EPOCH + datetime.timedelta(milliseconds=epoch_ms)

    @staticmethod
    def _parse_epoch_ms(epoch_ms: Union[int, float]) -> Optional[datetime.datetime]:
        """
        Parse a number as Unix milliseconds; negative values are before 1970.

        Args:
            epoch_ms: Milliseconds since epoch

        Returns:
            datetime.datetime: Parsed timestamp in UTC, or None if invalid
        """
        try:
            dt = TimestampParser.ms_to_datetime(epoch_ms)
        except (ValueError, OverflowError) as e:
            # NaN, infinity or beyond datetime's range
            logger.debug(f"Failed to parse epoch milliseconds {epoch_ms}: {e}")
            return None

        if TimestampParser._is_reasonable_timestamp(dt):
            return dt
        return None

    @staticmethod
    def _parse_numeric_timestamp(timestamp: float) -> Optional[datetime.datetime]:
        """
        Parse the numeric value of a timestamp string.

        Values below 1e10 are taken as seconds, larger values as milliseconds
        (a seconds value of 1e10 would already be in the year 2286).

        Args:
            timestamp: Value parsed from the string

        Returns:
            datetime.datetime: Parsed timestamp in UTC, or None if invalid
        """
        if timestamp != timestamp or timestamp <= 0:
            # NaN or non-positive
            return None

        try:
            if timestamp < 1e10:
                dt = TimestampParser.UNIX_EPOCH + datetime.timedelta(seconds=timestamp)
            else:
                dt = TimestampParser.UNIX_EPOCH + datetime.timedelta(milliseconds=timestamp)
        except (ValueError, OverflowError) as e:
            logger.debug(f"Failed to parse numeric timestamp {timestamp}: {e}")
            return None

        if TimestampParser._is_reasonable_timestamp(dt):
            return dt
        return None

    @staticmethod
    def _parse_string_timestamp(timestamp_str: str) -> Optional[datetime.datetime]:
        """
        Parse string timestamp in ISO 8601 or numeric form.

        Args:
            timestamp_str: Timestamp string

        Returns:
            datetime.datetime: Parsed timestamp in UTC, or None if invalid
        """
        timestamp_str = timestamp_str.strip()

        try:
            dt = datetime.datetime.fromisoformat(timestamp_str.replace('Z', '+00:00'))
            dt = TimestampParser._ensure_utc(dt)
            if TimestampParser._is_reasonable_timestamp(dt):
                return dt
            return None
        except ValueError:
            pass

        # fromisoformat() before 3.11 rejects fractional seconds that are not
        # 3 or 6 digits long, so fall back to explicit formats
        iso_formats = [
            "%Y-%m-%dT%H:%M:%S.%fZ",      # 2025-10-10T12:00:00.000Z
            "%Y-%m-%dT%H:%M:%S.%f%z",     # 2025-10-10T12:00:00.000+02:00
            "%Y-%m-%dT%H:%M:%S.%f",       # 2025-10-10T12:00:00.000
            "%Y-%m-%d %H:%M:%S.%f",       # 2025-10-10 12:00:00.000
        ]

        for fmt in iso_formats:
            try:
                dt = datetime.datetime.strptime(timestamp_str, fmt)
            except ValueError:
                continue

            dt = TimestampParser._ensure_utc(dt)
            if TimestampParser._is_reasonable_timestamp(dt):
                return dt
            return None

        try:
            numeric_value = float(timestamp_str)
        except ValueError:
            logger.debug(f"Failed to parse string timestamp: {timestamp_str}")
            return None

        return TimestampParser._parse_numeric_timestamp(numeric_value)

    @staticmethod
    def _ensure_utc(dt: datetime.datetime) -> datetime.datetime:
        """
        Return dt as an aware datetime in UTC.

        Naive datetimes are assumed to already be in UTC.
        """
        if dt.tzinfo is None:
            return dt.replace(tzinfo=datetime.timezone.utc)
        return dt.astimezone(datetime.timezone.utc)

    @staticmethod
    def _is_reasonable_timestamp(dt: datetime.datetime) -> bool:
        """
        Check if timestamp is within reasonable bounds (1900 to 2100).

        Catches parsing errors that would otherwise produce absurd ranges and
        stretch the whole timeline.
        """
        return TimestampParser.MIN_TIMESTAMP <= dt <= TimestampParser.MAX_TIMESTAMP

    @staticmethod
    def format_epoch_ms(epoch_ms: Optional[Union[int, float]], format_str: str = "%Y-%m-%d %H:%M:%S",
                        timezone: str = "UTC") -> str:
        """
        Format epoch milliseconds in the given timezone.

        Args:
            epoch_ms: Milliseconds since epoch (None gives an empty string)
            format_str: strftime format
            timezone: Any name from pytz.all_timezones

        Returns:
            str: Formatted timestamp string
        """
        if epoch_ms is None:
            return ""

        target_tz = pytz.timezone(timezone)
        dt = TimestampParser.ms_to_datetime(epoch_ms).astimezone(target_tz)
        return dt.strftime(format_str)

    @staticmethod
    def resolve_timezone(timezone: Optional[str]) -> str:
        """
        Return timezone if pytz knows it, otherwise 'UTC'.

        Args:
            timezone: Timezone name from configuration

        Returns:
            str: A timezone name usable with format_epoch_ms()
        """
        if not timezone:
            return "UTC"
        try:
            pytz.timezone(timezone)
        except pytz.UnknownTimeZoneError:
            logger.warning(f"Unknown timezone '{timezone}', falling back to UTC")
            return "UTC"
        return timezone
