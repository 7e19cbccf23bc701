"""
Utility helpers for the memoir timeline: timestamp parsing, error handling
and tooltip text.
"""

from .timestamp_parser import TimestampParser
from .tooltip_manager import TooltipManager

__all__ = ['TimestampParser', 'TooltipManager']
