"""
Viewport - Coordinate math for the zoomable timeline.

Every position on the timeline is expressed in the data coordinate system:
0 is the oldest loaded snapshot and 100 the newest. The viewport is a
window onto that axis described by a zoom factor and a center; this module
holds the window arithmetic, the effective pan/zoom bounds and the pure
transforms the interaction handlers apply for wheel and drag input.

Nothing here keeps state. Every function takes the current values and
returns new ones.
"""

import math
from dataclasses import dataclass, replace
from typing import List, Optional

from memoir_timeline.data.event_ingestor import TimeRange, TimelineEvent
from memoir_timeline.data.history_range import FullHistoryRange

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS

# Window durations selectable as the starting window
WINDOW_DURATIONS_MS = {
    'hour': HOUR_MS,
    'day': DAY_MS,
    'week': 7 * DAY_MS,
    'month': 30 * DAY_MS,
    'year': 365 * DAY_MS,
}

STARTING_WINDOWS = ('auto',) + tuple(WINDOW_DURATIONS_MS)

# Slightly wider than the data so no snapshot sits right on the edge
AUTO_ZOOM = 0.95

DEFAULT_VIEW_CENTER = 50.0

MAX_ZOOM = 10000.0

# newZoom = zoom * exp(deltaY * WHEEL_DELTA_SCALE * WHEEL_ZOOM_RATE)
WHEEL_DELTA_SCALE = -0.1
WHEEL_ZOOM_RATE = 0.1


@dataclass(frozen=True)
class ViewportState:
    """Zoom factor and window center, in data-range percent."""
    zoom: float = 1.0
    view_center: float = DEFAULT_VIEW_CENTER

    @property
    def window_width(self) -> float:
        return 100.0 / self.zoom

    @property
    def window_start(self) -> float:
        return self.view_center - self.window_width / 2

    @property
    def window_end(self) -> float:
        return self.view_center + self.window_width / 2

    def position_under(self, percent: float) -> float:
        """Data position shown at percent (0-100) of the rendered width."""
        return self.window_start + (percent / 100.0) * self.window_width

    def display_position(self, data_position: float) -> float:
        """Percent of the rendered width at which data_position is drawn."""
        return (data_position - self.window_start) / self.window_width * 100.0


@dataclass(frozen=True)
class EffectiveBounds:
    """Pan/zoom limits in data-range percent."""
    min_position: float
    max_position: float

    @property
    def span(self) -> float:
        return self.max_position - self.min_position

    @property
    def midpoint(self) -> float:
        return (self.min_position + self.max_position) / 2

    @property
    def min_zoom(self) -> float:
        """Zoom at which the window exactly covers the bounds."""
        return 100.0 / self.span


@dataclass(frozen=True)
class VisibleEvent:
    """An event inside the current window with its on-screen position."""
    event: TimelineEvent
    display_position: float


def time_to_position(timestamp_ms: float, time_range: TimeRange) -> float:
    """Project a timestamp onto the data coordinate system."""
    return (timestamp_ms - time_range.min_time) / time_range.duration * 100.0


def position_to_time(position: float, time_range: TimeRange) -> float:
    """Inverse of time_to_position(); positions outside 0-100 are allowed."""
    return time_range.min_time + (position / 100.0) * time_range.duration


def window_duration_ms(state: ViewportState, time_range: TimeRange) -> float:
    """Real-time length of the visible window."""
    return time_range.duration * state.window_width / 100.0


def zoom_for_starting_window(window: str, data_duration_ms: float, auto_zoom: float = AUTO_ZOOM) -> float:
    """
    Zoom that makes the window exactly one `window` unit long.

    A data range shorter than the unit gives a zoom below 1, i.e. a window
    wider than the data.

    Args:
        window (str): One of STARTING_WINDOWS; anything else behaves as 'auto'
        data_duration_ms (float): TimeRange.duration
        auto_zoom (float): Zoom used for 'auto'

    Returns:
        float: Zoom factor
    """
    unit_ms = WINDOW_DURATIONS_MS.get(window)
    if unit_ms is None:
        return auto_zoom
    return (data_duration_ms / unit_ms) * 100.0


def initial_viewport(window: str, time_range: TimeRange, auto_zoom: float = AUTO_ZOOM) -> ViewportState:
    """Viewport shown right after a new snapshot set is loaded."""
    return ViewportState(zoom_for_starting_window(window, time_range.duration, auto_zoom), DEFAULT_VIEW_CENTER)


def compute_effective_bounds(time_range: TimeRange, now_ms: float, floor_ms: float,
                             full_history: Optional[FullHistoryRange] = None) -> EffectiveBounds:
    """
    Union of the data range, the history floor, now and the full history.

    The union always contains 0 and 100, so an inverted or too narrow
    full-history interval is silently widened rather than rejected.

    Args:
        time_range (TimeRange): Current data range
        now_ms (float): Current time
        floor_ms (float): Absolute oldest date the user can always reach
        full_history (FullHistoryRange): Optional collaborator-supplied span

    Returns:
        EffectiveBounds: Bounds in data-range percent
    """
    oldest = min(time_range.min_time, floor_ms)
    newest = max(time_range.max_time, now_ms)

    if full_history is not None:
        oldest = min(oldest, full_history.start_ms)
        newest = max(newest, full_history.end_ms)

    return EffectiveBounds(time_to_position(oldest, time_range), time_to_position(newest, time_range))


def clamp_view_center(center: float, window_width: float, bounds: EffectiveBounds) -> float:
    """
    Keep the window inside the bounds.

    When the window is wider than the bounds there is no valid clamp range
    and the view is centered on the bounds instead.
    """
    min_center = bounds.min_position + window_width / 2
    max_center = bounds.max_position - window_width / 2
    if min_center > max_center:
        return bounds.midpoint
    return max(min_center, min(max_center, center))


def zoom_at_cursor(state: ViewportState, bounds: EffectiveBounds, cursor_percent: float, delta_y: float,
                   center_weight: float = 0.0, max_zoom: float = MAX_ZOOM,
                   delta_scale: float = WHEEL_DELTA_SCALE, zoom_rate: float = WHEEL_ZOOM_RATE) -> ViewportState:
    """
    Apply one wheel step.

    The data position at the (center-weighted) cursor stays under that same
    screen position after the zoom, then the center is clamped to the bounds.

    Args:
        state (ViewportState): Current viewport
        bounds (EffectiveBounds): Current effective bounds
        cursor_percent (float): Cursor position as percent of the rendered width
        delta_y (float): Wheel delta, browser convention (negative = zoom in)
        center_weight (float): 0 zooms to the cursor, 1 zooms to the center
        max_zoom (float): Upper zoom limit
        delta_scale (float): Wheel delta scale factor
        zoom_rate (float): Exponential zoom rate

    Returns:
        ViewportState: The new viewport
    """
    weight = max(0.0, min(1.0, center_weight))
    anchor_percent = cursor_percent * (1.0 - weight) + 50.0 * weight
    anchor_position = state.position_under(anchor_percent)

    min_zoom = bounds.min_zoom
    new_zoom = state.zoom * math.exp(delta_y * delta_scale * zoom_rate)
    new_zoom = max(min_zoom, min(max_zoom, new_zoom))

    new_width = 100.0 / new_zoom
    new_center = anchor_position + new_width * (0.5 - anchor_percent / 100.0)

    return ViewportState(new_zoom, clamp_view_center(new_center, new_width, bounds))


def pan_viewport(state: ViewportState, bounds: EffectiveBounds, delta_px: float, width_px: float) -> ViewportState:
    """
    Apply a drag of delta_px pixels; dragging right moves the view left.

    Args:
        state (ViewportState): Current viewport
        bounds (EffectiveBounds): Current effective bounds
        delta_px (float): Pointer movement since the previous drag event
        width_px (float): Rendered width of the track

    Returns:
        ViewportState: The new viewport (unchanged when width_px <= 0)
    """
    if width_px <= 0:
        return state

    delta_position = delta_px / width_px * state.window_width
    center = clamp_view_center(state.view_center - delta_position, state.window_width, bounds)
    return replace(state, view_center=center)


def visible_events(events: List[TimelineEvent], state: ViewportState) -> List[VisibleEvent]:
    """
    Events inside the current window, in input order.

    Args:
        events (list): TimelineEvent objects
        state (ViewportState): Current viewport

    Returns:
        list: VisibleEvent objects with their display positions
    """
    start = state.window_start
    end = state.window_end
    return [
        VisibleEvent(event, state.display_position(event.data_position))
        for event in events
        if start <= event.data_position <= end
    ]
