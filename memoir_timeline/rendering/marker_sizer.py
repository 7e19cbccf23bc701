"""
Marker Sizer - Size and opacity of event markers.

Markers grow as the user zooms in and the most relevant snapshots in view
are drawn larger and more opaque. Relevance is normalized over the visible
events only, so emphasis is always relative to what is on screen.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

from memoir_timeline.rendering.viewport import VisibleEvent


@dataclass(frozen=True)
class MarkerStyle:
    """Sizing parameters; see the 'markers' configuration section."""
    min_size: float = 8.0
    max_size: float = 40.0
    min_window_hours: float = 1.0
    max_window_hours: float = 5 * 365 * 24.0
    max_size_boost: float = 12.0
    size_exponent: float = 2.0
    opacity_min: float = 0.35
    opacity_max: float = 1.0
    opacity_exponent: float = 1.5
    neutral_score: float = 0.5


@dataclass(frozen=True)
class SizedMarker:
    """A visible event ready to be drawn."""
    event: object
    display_position: float
    size: float
    opacity: float
    normalized_score: float

    @property
    def relevance(self):
        return self.event.relevance


def base_size_for_window(window_hours: float, style: MarkerStyle = MarkerStyle()) -> float:
    """
    Marker base size for a window length.

    max_size at or below min_window_hours, min_size at or above
    max_window_hours, interpolated on log(hours) in between.

    Args:
        window_hours (float): Visible window duration in hours
        style (MarkerStyle): Sizing parameters

    Returns:
        float: Base marker diameter in pixels
    """
    if window_hours <= style.min_window_hours:
        return style.max_size
    if window_hours >= style.max_window_hours:
        return style.min_size

    log_min = math.log(style.min_window_hours)
    log_max = math.log(style.max_window_hours)
    closeness = (log_max - math.log(window_hours)) / (log_max - log_min)
    return style.min_size + closeness * (style.max_size - style.min_size)


def normalize_scores(scores: Sequence[float], neutral: float = 0.5) -> List[float]:
    """
    Rescale scores to [0, 1] using their own min and max.

    Args:
        scores (list): Raw relevance scores
        neutral (float): Value used for every score when all are equal

    Returns:
        list: Normalized scores in the same order
    """
    if not scores:
        return []

    low = min(scores)
    high = max(scores)
    if high - low <= 0:
        return [neutral] * len(scores)
    return [(score - low) / (high - low) for score in scores]


def size_markers(visible: List[VisibleEvent], window_hours: float,
                 style: MarkerStyle = MarkerStyle()) -> List[SizedMarker]:
    """
    Compute size and opacity for each visible event.

    Args:
        visible (list): VisibleEvent objects in the current window
        window_hours (float): Visible window duration in hours
        style (MarkerStyle): Sizing parameters

    Returns:
        list: SizedMarker objects, same order as `visible`
    """
    base_size = base_size_for_window(window_hours, style)
    normalized = normalize_scores([item.event.relevance for item in visible], style.neutral_score)
    opacity_range = style.opacity_max - style.opacity_min

    return [
        SizedMarker(
            event=item.event,
            display_position=item.display_position,
            size=base_size + (score ** style.size_exponent) * style.max_size_boost,
            opacity=style.opacity_min + (score ** style.opacity_exponent) * opacity_range,
            normalized_score=score,
        )
        for item, score in zip(visible, normalized)
    ]


def marker_color(relevance: float):
    """
    RGB tint for a marker: brighter and warmer for higher relevance.

    Args:
        relevance (float): Raw relevance in [0, 1]

    Returns:
        tuple: (red, green, blue) in 0-255
    """
    prominence = max(1.0, min(10.0, relevance * 10))
    return (int(100 + prominence * 15), int(100 + prominence * 10), int(100 + prominence * 10))
