"""
Memoir Timeline

Interactive timeline for memory snapshots: projects scored, timestamped
search results onto a zoomable and pannable axis, derives tick marks and
labels at any zoom level and keeps the most relevant markers readable when
they crowd together.

The Qt widget lives in memoir_timeline.timeline_canvas and is not imported
here, so the engine can be used without a display.
"""

__version__ = "1.0.0"

from .config import TimelineConfig
from .timeline_engine import TimelineEngine, TimelineFrame

__all__ = ['TimelineConfig', 'TimelineEngine', 'TimelineFrame']
