"""
Tick Generator - Time axis tick marks and labels.

Tick granularity is chosen from a fixed table keyed by the real-time length
of the visible window. Ticks are aligned to whole multiples of their
interval since the epoch and reported as percentages of the rendered width,
so the axis layout is independent of the widget size.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from memoir_timeline.data.event_ingestor import TimeRange
from memoir_timeline.rendering.viewport import (
    DAY_MS, HOUR_MS, ViewportState, position_to_time, time_to_position, window_duration_ms,
)
from memoir_timeline.utils.timestamp_parser import TimestampParser

# Configure logger
logger = logging.getLogger(__name__)

MINUTE_MS = 60 * 1000

# (window duration upper bound, major interval, minor interval); last row has no bound
TICK_INTERVALS = [
    (2 * HOUR_MS, 15 * MINUTE_MS, 5 * MINUTE_MS),
    (12 * HOUR_MS, HOUR_MS, 15 * MINUTE_MS),
    (3 * DAY_MS, 6 * HOUR_MS, HOUR_MS),
    (14 * DAY_MS, DAY_MS, 6 * HOUR_MS),
    (60 * DAY_MS, 7 * DAY_MS, DAY_MS),
    (365 * DAY_MS, 30 * DAY_MS, 7 * DAY_MS),
    (None, 365 * DAY_MS, 30 * DAY_MS),
]

# Safety limit per tick kind
MAX_TICKS = 500

# Beyond this many major ticks only every other one is labelled
MAX_LABELED_TICKS = 8

# (window duration upper bound, strftime format); last row has no bound
LABEL_FORMATS = [
    (12 * HOUR_MS, '%H:%M'),
    (3 * DAY_MS, '%b %d %H:%M'),
    (60 * DAY_MS, '%b %d'),
    (365 * DAY_MS, '%b %Y'),
    (None, '%Y'),
]

MAJOR = 'major'
MINOR = 'minor'


@dataclass(frozen=True)
class TickMark:
    """A tick at `position` percent of the rendered width."""
    position: float
    kind: str
    timestamp_ms: int


@dataclass(frozen=True)
class TickLabel:
    """Axis label text drawn at the exact position of its tick."""
    position: float
    text: str
    timestamp_ms: int


def _lookup(table, window_ms):
    for row in table:
        if row[0] is None or window_ms < row[0]:
            return row[1:]
    return table[-1][1:]


def select_intervals(window_ms: float) -> Tuple[int, int]:
    """
    Pick (major, minor) tick intervals for a window duration.

    Args:
        window_ms (float): Visible window duration in milliseconds

    Returns:
        tuple: (major_interval_ms, minor_interval_ms)
    """
    return _lookup(TICK_INTERVALS, window_ms)


def _ticks_at(interval_ms, start_ms, end_ms, time_range, state, kind, skip_multiples_of=None):
    ticks = []
    window_start = state.window_start
    window_end = state.window_end
    window_width = state.window_width

    time = math.floor(start_ms / interval_ms) * interval_ms
    while time <= end_ms:
        if skip_multiples_of is None or time % skip_multiples_of != 0:
            data_position = time_to_position(time, time_range)
            if window_start <= data_position <= window_end:
                ticks.append(TickMark((data_position - window_start) / window_width * 100.0, kind, time))
                if len(ticks) >= MAX_TICKS:
                    logger.debug(f"Stopped {kind} ticks at safety limit {MAX_TICKS}")
                    break
        time += interval_ms

    return ticks


def generate_ticks(time_range: Optional[TimeRange], state: ViewportState) -> List[TickMark]:
    """
    Major then minor tick marks for the visible window.

    Minor ticks falling on a major boundary are left out so nothing is drawn
    twice at the same spot.

    Args:
        time_range (TimeRange): Current data range (None gives no ticks)
        state (ViewportState): Current viewport

    Returns:
        list: TickMark objects
    """
    if time_range is None:
        return []

    start_ms = position_to_time(state.window_start, time_range)
    end_ms = position_to_time(state.window_end, time_range)
    major_interval, minor_interval = select_intervals(end_ms - start_ms)

    ticks = _ticks_at(major_interval, start_ms, end_ms, time_range, state, MAJOR)
    ticks.extend(_ticks_at(minor_interval, start_ms, end_ms, time_range, state, MINOR,
                           skip_multiples_of=major_interval))
    return ticks


def format_tick_label(timestamp_ms: int, window_ms: float, timezone: str = 'UTC') -> str:
    """
    Label text for a tick; finer windows show time of day, coarser ones
    month or year.

    Args:
        timestamp_ms (int): Tick time
        window_ms (float): Visible window duration
        timezone (str): Display timezone

    Returns:
        str: Label text
    """
    (format_str,) = _lookup(LABEL_FORMATS, window_ms)
    return TimestampParser.format_epoch_ms(timestamp_ms, format_str, timezone)


def generate_labels(ticks: List[TickMark], window_ms: float, timezone: str = 'UTC',
                    max_labeled_ticks: int = MAX_LABELED_TICKS) -> List[TickLabel]:
    """
    Labels for the major ticks.

    Args:
        ticks (list): Output of generate_ticks()
        window_ms (float): Visible window duration
        timezone (str): Display timezone
        max_labeled_ticks (int): Above this many majors, label every other one

    Returns:
        list: TickLabel objects
    """
    majors = [tick for tick in ticks if tick.kind == MAJOR]
    step = 2 if len(majors) > max_labeled_ticks else 1

    return [
        TickLabel(tick.position, format_tick_label(tick.timestamp_ms, window_ms, timezone), tick.timestamp_ms)
        for tick in majors[::step]
    ]


def format_timeframe(time_range: Optional[TimeRange], state: ViewportState) -> str:
    """
    Human-readable length of the visible window, e.g. "3.5 days".

    Args:
        time_range (TimeRange): Current data range
        state (ViewportState): Current viewport

    Returns:
        str: Window span text, "No data" without a range
    """
    if time_range is None:
        return 'No data'

    total_days = window_duration_ms(state, time_range) / DAY_MS

    if total_days >= 365:
        return f"{total_days / 365:.1f} years"
    elif total_days >= 30:
        return f"{total_days / 30:.1f} months"
    elif total_days >= 1:
        return f"{total_days:.1f} days"
    elif total_days >= 1 / 24:
        return f"{total_days * 24:.1f} hours"
    else:
        return f"{total_days * 24 * 60:.0f} minutes"
