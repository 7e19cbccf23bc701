"""
Timeline data: snapshot ingestion and history range derivation.
"""

from .event_ingestor import TimeRange, TimelineEvent, derive_time_range, ingest_snapshots
from .history_range import FullHistoryRange, full_history_from_user_info, fallback_full_history

__all__ = [
    'TimeRange',
    'TimelineEvent',
    'derive_time_range',
    'ingest_snapshots',
    'FullHistoryRange',
    'full_history_from_user_info',
    'fallback_full_history',
]
