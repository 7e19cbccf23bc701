"""
Timeline rendering math: viewport transforms, interaction, ticks, marker
sizing and overlap resolution.
"""

from .viewport import ViewportState, EffectiveBounds, VisibleEvent
from .zoom_manager import ZoomManager
from .marker_sizer import MarkerStyle, SizedMarker
from .overlap_resolver import OverlapResolver
from .tick_generator import TickMark, TickLabel

__all__ = [
    'ViewportState',
    'EffectiveBounds',
    'VisibleEvent',
    'ZoomManager',
    'MarkerStyle',
    'SizedMarker',
    'OverlapResolver',
    'TickMark',
    'TickLabel',
]
