"""
Event Ingestor - Converts memory snapshots into timeline events.

Snapshots come from the memory-search service as plain dictionaries. This
module derives the data range of a snapshot set and projects each
timestamped snapshot onto the 0-100 data coordinate system the rest of the
timeline works in.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from memoir_timeline.utils.timestamp_parser import TimestampParser

# Configure logger
logger = logging.getLogger(__name__)

DEFAULT_RELEVANCE = 0.5
DEFAULT_SUMMARY = 'Snapshot'
NO_DETAILS = 'No additional details'
TITLE_MAX_CHARS = 60
DESCRIPTION_MAX_CHARS = 150
DATE_LABEL_FORMAT = '%Y-%m-%d %H:%M:%S'


@dataclass(frozen=True)
class TimeRange:
    """Span of the timestamped snapshots currently loaded, in epoch ms."""
    min_time: int
    max_time: int
    duration: int


@dataclass
class TimelineEvent:
    """A snapshot that can be plotted on the timeline."""
    index: int
    timestamp_ms: int
    data_position: float
    relevance: float
    title: str
    description: str
    date_label: str = ''
    memory_id: Optional[str] = None
    snapshot: Dict[str, Any] = field(default_factory=dict, repr=False)


def _snapshot_timestamp(snapshot) -> Optional[int]:
    if not isinstance(snapshot, dict):
        return None
    return TimestampParser.to_epoch_ms(snapshot.get('timestamp'))


def derive_time_range(snapshots) -> Optional[TimeRange]:
    """
    Compute the data range of a snapshot list.

    Snapshots without a usable timestamp are ignored. The duration is
    floored at 1 ms so that a set sharing a single timestamp still has a
    valid projection.

    Args:
        snapshots (list): Snapshot dictionaries

    Returns:
        TimeRange: The range, or None when no snapshot has a timestamp
    """
    timestamps = [ts for ts in (_snapshot_timestamp(s) for s in snapshots or []) if ts is not None]

    if not timestamps:
        return None

    min_time = min(timestamps)
    max_time = max(timestamps)
    return TimeRange(min_time, max_time, max(max_time - min_time, 1))


def split_summary(summary) -> Tuple[str, str]:
    """
    Derive a (title, description) pair from a free-text summary.

    The first line becomes the title, truncated to 60 characters; the rest
    of the text becomes the description, falling back to the start of the
    summary itself.

    Args:
        summary: Summary text (may be None or empty)

    Returns:
        tuple: (title, description)
    """
    if not isinstance(summary, str) or not summary:
        summary = DEFAULT_SUMMARY

    lines = summary.split('\n')
    first_line = lines[0]
    title = first_line[:TITLE_MAX_CHARS]
    if len(first_line) > TITLE_MAX_CHARS:
        title += '...'

    rest = '\n'.join(lines[1:]).strip()
    description = rest or summary[:DESCRIPTION_MAX_CHARS]
    return title, description or NO_DETAILS


def parse_relevance(value) -> float:
    """
    Read a similarity score, clamped to [0, 1].

    Args:
        value: Raw similarity from the search service

    Returns:
        float: Relevance, DEFAULT_RELEVANCE when missing or not numeric
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_RELEVANCE
    if value != value:
        return DEFAULT_RELEVANCE
    return max(0.0, min(1.0, float(value)))


def ingest_snapshots(snapshots, time_range: Optional[TimeRange], timezone: str = 'UTC') -> List[TimelineEvent]:
    """
    Convert snapshots into timeline events positioned against time_range.

    Snapshots without a timestamp cannot be plotted and are dropped.

    Args:
        snapshots (list): Snapshot dictionaries
        time_range (TimeRange): Range from derive_time_range(snapshots)
        timezone (str): Timezone for the tooltip date label

    Returns:
        list: TimelineEvent objects in input order
    """
    if not snapshots or time_range is None:
        return []

    events = []
    for index, snapshot in enumerate(snapshots):
        timestamp_ms = _snapshot_timestamp(snapshot)
        if timestamp_ms is None:
            continue

        position = (timestamp_ms - time_range.min_time) / time_range.duration * 100
        title, description = split_summary(snapshot.get('summary'))

        events.append(TimelineEvent(
            index=index,
            timestamp_ms=timestamp_ms,
            data_position=position,
            relevance=parse_relevance(snapshot.get('similarity')),
            title=title,
            description=description,
            date_label=TimestampParser.format_epoch_ms(timestamp_ms, DATE_LABEL_FORMAT, timezone),
            memory_id=snapshot.get('memory_id'),
            snapshot=snapshot,
        ))

    dropped = len(snapshots) - len(events)
    if dropped:
        logger.debug(f"Dropped {dropped} snapshot(s) without a usable timestamp")

    return events
