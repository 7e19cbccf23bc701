"""
Zoom Manager - Owns the viewport state and applies user input to it.

This module provides the ZoomManager class which manages:
- The current zoom factor and view center
- Wheel zoom around the cursor
- Drag panning
- Clamping to the effective bounds after every change

The manager is the only thing that mutates the viewport. Everything derived
from it (visible events, ticks, markers) is recomputed from `state`.
"""

import logging
from typing import Optional

from memoir_timeline.rendering.viewport import (
    DEFAULT_VIEW_CENTER, MAX_ZOOM, WHEEL_DELTA_SCALE, WHEEL_ZOOM_RATE,
    EffectiveBounds, ViewportState, pan_viewport, zoom_at_cursor,
)

# Configure logger
logger = logging.getLogger(__name__)


class ZoomManager:
    """
    Manages zoom and pan interaction for the timeline.

    Zoom is a continuous factor: the visible window is 100 / zoom percent of
    the data range wide. Zoom-out is limited by the effective bounds passed
    with each input event, zoom-in by max_zoom.
    """

    def __init__(self, initial_zoom=1.0, max_zoom=MAX_ZOOM, center_weight=0.0,
                 delta_scale=WHEEL_DELTA_SCALE, zoom_rate=WHEEL_ZOOM_RATE):
        """
        Initialize the ZoomManager.

        Args:
            initial_zoom (float): Initial zoom factor
            max_zoom (float): Maximum zoom factor
            center_weight (float): 0 zooms to the cursor, 1 zooms to the center
            delta_scale (float): Wheel delta scale factor
            zoom_rate (float): Exponential zoom rate

        Raises:
            ValueError: If initial_zoom is not positive
        """
        if initial_zoom <= 0:
            raise ValueError(f"Initial zoom must be positive, got {initial_zoom}")

        self.max_zoom = max_zoom
        self.center_weight = center_weight
        self.delta_scale = delta_scale
        self.zoom_rate = zoom_rate

        self._state = ViewportState(initial_zoom, DEFAULT_VIEW_CENTER)
        self._is_dragging = False
        self._drag_last_x = None

    @property
    def state(self):
        """
        Get the current viewport state.

        Returns:
            ViewportState: Current zoom and center
        """
        return self._state

    @property
    def current_zoom(self):
        return self._state.zoom

    @property
    def is_dragging(self):
        return self._is_dragging

    def reset(self, zoom, view_center=DEFAULT_VIEW_CENTER):
        """
        Reset the viewport, e.g. after a new snapshot set is loaded.

        Args:
            zoom (float): New zoom factor
            view_center (float): New center (data-range midpoint by default)
        """
        self._state = ViewportState(zoom, view_center)
        self._is_dragging = False
        self._drag_last_x = None

    def handle_wheel(self, cursor_x, width_px, delta_y, bounds: EffectiveBounds):
        """
        Zoom around the cursor.

        Args:
            cursor_x (float): Cursor x in pixels, relative to the track's left edge
            width_px (float): Rendered track width in pixels
            delta_y (float): Wheel delta, browser convention (negative = zoom in)
            bounds (EffectiveBounds): Current effective bounds

        Returns:
            bool: True if the event was applied, False if it was ignored
        """
        if width_px <= 0 or not 0 <= cursor_x <= width_px:
            return False

        cursor_percent = cursor_x / width_px * 100.0
        new_state = zoom_at_cursor(
            self._state, bounds, cursor_percent, delta_y,
            center_weight=self.center_weight, max_zoom=self.max_zoom,
            delta_scale=self.delta_scale, zoom_rate=self.zoom_rate,
        )

        logger.debug(
            f"Wheel zoom: cursor={cursor_percent:.1f}% min_zoom={bounds.min_zoom:.4f} "
            f"zoom {self._state.zoom:.4f} -> {new_state.zoom:.4f}, "
            f"center {self._state.view_center:.3f} -> {new_state.view_center:.3f}"
        )

        self._state = new_state
        return True

    def begin_drag(self, x):
        """
        Start a pan gesture.

        Args:
            x (float): Pointer x in pixels
        """
        self._is_dragging = True
        self._drag_last_x = x

    def drag_to(self, x, width_px, bounds: EffectiveBounds):
        """
        Continue a pan gesture.

        Args:
            x (float): Pointer x in pixels
            width_px (float): Rendered track width in pixels
            bounds (EffectiveBounds): Current effective bounds

        Returns:
            bool: True if the viewport was updated
        """
        if not self._is_dragging or self._drag_last_x is None or width_px <= 0:
            return False

        delta_px = x - self._drag_last_x
        self._drag_last_x = x
        self._state = pan_viewport(self._state, bounds, delta_px, width_px)
        return True

    def end_drag(self):
        """Finish a pan gesture."""
        self._is_dragging = False
        self._drag_last_x = None

    def can_zoom_in(self):
        """
        Check if zooming in is possible.

        Returns:
            bool: True if below the maximum zoom
        """
        return self._state.zoom < self.max_zoom

    def can_zoom_out(self, bounds: Optional[EffectiveBounds] = None):
        """
        Check if zooming out is possible.

        Args:
            bounds (EffectiveBounds): Current bounds; without them there is no limit

        Returns:
            bool: True if above the minimum zoom
        """
        if bounds is None:
            return True
        return self._state.zoom > bounds.min_zoom

    def __repr__(self):
        return (
            f"ZoomManager(zoom={self._state.zoom:.4f}, "
            f"center={self._state.view_center:.3f}, "
            f"dragging={self._is_dragging})"
        )
