"""
History Range - The broadest span the user may zoom out to.

The memory service reports the user's oldest snapshot; the timeline lets
the user zoom out from the current search results as far as that snapshot
(and at least a few days back), and never past the present.
"""

import logging
from dataclasses import dataclass

from memoir_timeline.utils.timestamp_parser import TimestampParser

# Configure logger
logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000

# Minimum history reachable by zooming out
MIN_HISTORY_DAYS = 5

# History assumed when the user info cannot be loaded at all
FALLBACK_HISTORY_DAYS = 7


@dataclass(frozen=True)
class FullHistoryRange:
    """Absolute span, in epoch ms, the viewport may reach."""
    start_ms: int
    end_ms: int


def full_history_from_user_info(user_info, now_ms: int) -> FullHistoryRange:
    """
    Build the full-history range from the service's user info payload.

    Args:
        user_info (dict): {'total_snapshots': int, 'oldest_snapshot': str | None}
        now_ms (int): Current time in epoch ms

    Returns:
        FullHistoryRange: From the oldest snapshot (at least MIN_HISTORY_DAYS
        back) to now
    """
    min_start = now_ms - MIN_HISTORY_DAYS * DAY_MS

    oldest_raw = user_info.get('oldest_snapshot') if isinstance(user_info, dict) else None
    oldest_ms = TimestampParser.to_epoch_ms(oldest_raw)

    if oldest_ms is None:
        if oldest_raw:
            logger.warning(f"Could not parse oldest_snapshot '{oldest_raw}', using {MIN_HISTORY_DAYS} days")
        oldest_ms = min_start

    history = FullHistoryRange(min(oldest_ms, min_start), now_ms)
    logger.debug(
        f"Full history range: {TimestampParser.format_epoch_ms(history.start_ms)} to "
        f"{TimestampParser.format_epoch_ms(history.end_ms)} "
        f"({(history.end_ms - history.start_ms) / DAY_MS:.1f} days)"
    )
    return history


def fallback_full_history(now_ms: int) -> FullHistoryRange:
    """
    Range used when the user info request fails.

    Args:
        now_ms (int): Current time in epoch ms

    Returns:
        FullHistoryRange: The last FALLBACK_HISTORY_DAYS days
    """
    return FullHistoryRange(now_ms - FALLBACK_HISTORY_DAYS * DAY_MS, now_ms)
