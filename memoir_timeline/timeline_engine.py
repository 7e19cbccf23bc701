"""
Timeline Engine
===============

This module ties the timeline pipeline together:

    snapshots -> data range -> visible events -> sized markers
              -> overlap-resolved markers, ticks and labels

The engine owns the loaded events, the data range, the full-history range
and the ZoomManager (the only mutator of the viewport). Everything else is
derived on demand by compute_frame(), so there is no cached layout that can
fall out of step with the viewport.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from memoir_timeline.config import TimelineConfig
from memoir_timeline.data.event_ingestor import TimeRange, TimelineEvent, derive_time_range, ingest_snapshots
from memoir_timeline.data.history_range import FullHistoryRange
from memoir_timeline.rendering.hit_testing import find_hovered_marker, pointer_percent_from_pixels
from memoir_timeline.rendering.marker_sizer import SizedMarker, size_markers
from memoir_timeline.rendering.overlap_resolver import OverlapResolver
from memoir_timeline.rendering.tick_generator import (
    TickLabel, TickMark, format_timeframe, generate_labels, generate_ticks,
)
from memoir_timeline.rendering.viewport import (
    HOUR_MS, STARTING_WINDOWS, EffectiveBounds, ViewportState,
    compute_effective_bounds, initial_viewport, visible_events, window_duration_ms,
)
from memoir_timeline.rendering.zoom_manager import ZoomManager
from memoir_timeline.utils.timestamp_parser import TimestampParser
from memoir_timeline.utils.tooltip_manager import TooltipManager

# Configure logger
logger = logging.getLogger(__name__)


def wall_clock_ms():
    """Current time in epoch ms."""
    return int(time.time() * 1000)


@dataclass
class TimelineFrame:
    """Everything the host needs to draw one state of the timeline."""
    markers: List[SizedMarker] = field(default_factory=list)
    ticks: List[TickMark] = field(default_factory=list)
    labels: List[TickLabel] = field(default_factory=list)
    timeframe_label: str = 'No data'
    visible_count: int = 0
    total_count: int = 0
    window_start: float = 0.0
    window_end: float = 100.0


class TimelineEngine:
    """
    Interactive timeline viewport engine.

    All input handlers take pixel coordinates relative to the track's left
    edge together with the track width, so the engine never needs to know
    about the widget that hosts it.
    """

    def __init__(self, config: Optional[TimelineConfig] = None, clock: Optional[Callable[[], float]] = None):
        """
        Initialize the engine.

        Args:
            config (TimelineConfig): Preferences (defaults when omitted)
            clock (callable): Returns the current time in epoch ms
        """
        self.config = config or TimelineConfig()
        self.clock = clock or wall_clock_ms

        viewport = self.config.section('viewport')
        overlap = self.config.section('overlap')

        self.zoom_manager = ZoomManager(
            initial_zoom=1.0,
            max_zoom=viewport['max_zoom'],
            center_weight=viewport['center_weight'],
            delta_scale=viewport['wheel_delta_scale'],
            zoom_rate=viewport['wheel_zoom_rate'],
        )
        self.overlap_resolver = OverlapResolver(
            always_show_zoom=overlap['always_show_zoom'],
            overlap_ratio=overlap['overlap_ratio'],
            score_proximity_threshold=overlap['score_proximity_threshold'],
            max_markers=int(overlap['max_markers']),
            reference_width_px=overlap['reference_width_px'],
        )
        self.marker_style = self.config.marker_style()
        self.timezone = self.config.timezone

        self._starting_window = self.config.starting_window
        self._snapshots = []
        self._events: List[TimelineEvent] = []
        self._time_range: Optional[TimeRange] = None
        self._full_history: Optional[FullHistoryRange] = None

    @property
    def time_range(self):
        return self._time_range

    @property
    def events(self):
        return list(self._events)

    @property
    def state(self) -> ViewportState:
        return self.zoom_manager.state

    @property
    def starting_window(self):
        return self._starting_window

    @property
    def full_history(self):
        return self._full_history

    @property
    def is_dragging(self):
        return self.zoom_manager.is_dragging

    def set_snapshots(self, snapshots):
        """
        Load a new snapshot set (e.g. the results of a new search).

        Args:
            snapshots (list): Snapshot dictionaries from the memory service
        """
        self._snapshots = list(snapshots or [])
        self._time_range = derive_time_range(self._snapshots)
        self._events = ingest_snapshots(self._snapshots, self._time_range, self.timezone)

        if self._time_range is None:
            logger.info(f"Loaded {len(self._snapshots)} snapshots, none with a timestamp")
        else:
            logger.info(
                f"Loaded {len(self._events)} timestamped snapshots spanning "
                f"{self._time_range.duration / HOUR_MS:.2f} hours"
            )

        self._reset_viewport()

    def set_starting_window(self, window):
        """
        Change the starting window setting and re-apply it.

        Args:
            window (str): One of 'auto', 'hour', 'day', 'week', 'month', 'year'
        """
        if window not in STARTING_WINDOWS:
            logger.warning(f"Unknown starting window '{window}', using 'auto'")
            window = 'auto'
        self._starting_window = window
        self._reset_viewport()

    def set_full_history(self, full_history: Optional[FullHistoryRange]):
        """
        Update the broadest span reachable by zooming out.

        Args:
            full_history (FullHistoryRange): New range, or None
        """
        self._full_history = full_history

    def _reset_viewport(self):
        if self._time_range is None:
            self.zoom_manager.reset(1.0)
            return

        state = initial_viewport(self._starting_window, self._time_range, self.config.get('viewport', 'auto_zoom'))
        self.zoom_manager.reset(state.zoom, state.view_center)
        logger.debug(
            f"Viewport reset: starting_window={self._starting_window} zoom={state.zoom:.4f} "
            f"window_width={state.window_width:.2f}%"
        )

    def effective_bounds(self) -> Optional[EffectiveBounds]:
        """
        Current pan/zoom limits; recomputed every call since 'now' advances.

        Returns:
            EffectiveBounds: Bounds in data percent, None without data
        """
        if self._time_range is None:
            return None
        return compute_effective_bounds(
            self._time_range, self.clock(), self.config.history_floor_ms, self._full_history
        )

    def window_duration_ms(self):
        if self._time_range is None:
            return 0.0
        return window_duration_ms(self.state, self._time_range)

    def window_hours(self):
        return self.window_duration_ms() / HOUR_MS

    def displayed_markers(self, width_px=None) -> List[SizedMarker]:
        """
        Markers to draw for the current viewport.

        Args:
            width_px (float): Rendered track width, used for overlap estimation

        Returns:
            list: Accepted SizedMarker objects, most relevant first
        """
        if self._time_range is None:
            return []

        state = self.state
        visible = visible_events(self._events, state)
        sized = size_markers(visible, self.window_hours(), self.marker_style)
        return self.overlap_resolver.resolve(sized, state.zoom, width_px)

    def compute_frame(self, width_px=None) -> TimelineFrame:
        """
        Derive everything needed to draw the timeline.

        Args:
            width_px (float): Rendered track width in pixels

        Returns:
            TimelineFrame: Markers, ticks, labels and status values
        """
        state = self.state

        if self._time_range is None:
            return TimelineFrame(window_start=state.window_start, window_end=state.window_end)

        markers = self.displayed_markers(width_px)
        ticks = generate_ticks(self._time_range, state)
        labels = generate_labels(
            ticks, self.window_duration_ms(), self.timezone, int(self.config.get('labels', 'max_labeled_ticks'))
        )

        return TimelineFrame(
            markers=markers,
            ticks=ticks,
            labels=labels,
            timeframe_label=format_timeframe(self._time_range, state),
            visible_count=len(visible_events(self._events, state)),
            total_count=len(self._events),
            window_start=state.window_start,
            window_end=state.window_end,
        )

    def handle_wheel(self, cursor_x, width_px, delta_y):
        """
        Zoom around the cursor.

        Returns:
            bool: True if the viewport changed
        """
        bounds = self.effective_bounds()
        if bounds is None:
            return False
        return self.zoom_manager.handle_wheel(cursor_x, width_px, delta_y, bounds)

    def begin_drag(self, x):
        if self._time_range is None:
            return
        self.zoom_manager.begin_drag(x)

    def drag_to(self, x, width_px):
        """
        Continue a pan gesture.

        Returns:
            bool: True if the viewport changed
        """
        bounds = self.effective_bounds()
        if bounds is None:
            return False
        return self.zoom_manager.drag_to(x, width_px, bounds)

    def end_drag(self):
        self.zoom_manager.end_drag()

    def hover(self, x, width_px) -> Optional[SizedMarker]:
        """
        Marker under the pointer, if any.

        Args:
            x (float): Pointer x relative to the track's left edge
            width_px (float): Rendered track width

        Returns:
            SizedMarker: Hovered marker, or None (also while dragging)
        """
        if self.is_dragging:
            return None

        percent = pointer_percent_from_pixels(x, width_px)
        if percent is None:
            return None

        return find_hovered_marker(
            self.displayed_markers(width_px), percent, self.config.get('hover', 'proximity_threshold')
        )

    def status_text(self, search_query='', width_px=None):
        """Status line, e.g. 'Window: 2.0 days • 12 of 30 snapshots'."""
        frame = self.compute_frame(width_px)
        return TooltipManager.get_status_line(frame.timeframe_label, frame.visible_count,
                                              frame.total_count, search_query)

    def empty_state_text(self, search_query=''):
        """(title, subtitle) for an empty timeline."""
        return TooltipManager.get_empty_state(search_query)

    def data_range_text(self):
        """
        Span of the loaded snapshots as text.

        Returns:
            str: 'Data range: <oldest> - <newest>', empty without data
        """
        if self._time_range is None:
            return ''
        oldest = TimestampParser.format_epoch_ms(self._time_range.min_time, timezone=self.timezone)
        newest = TimestampParser.format_epoch_ms(self._time_range.max_time, timezone=self.timezone)
        return f"Data range: {oldest} - {newest}"
