"""
Hit testing for pointer hover over timeline markers.
"""

from typing import List, Optional

from memoir_timeline.rendering.marker_sizer import SizedMarker

# Percent of the rendered width within which a marker counts as hovered
HOVER_THRESHOLD = 3.0


def pointer_percent_from_pixels(x: float, width_px: float) -> Optional[float]:
    """Pointer position as percent of the track, None when outside it."""
    if width_px <= 0 or not 0 <= x <= width_px:
        return None
    return x / width_px * 100.0


def find_hovered_marker(markers: List[SizedMarker], pointer_percent: float,
                        threshold: float = HOVER_THRESHOLD) -> Optional[SizedMarker]:
    """
    Marker nearest to the pointer, if it is close enough.

    On equal distances the earlier marker in the list wins.

    Args:
        markers (list): Displayed markers
        pointer_percent (float): Pointer position in display percent
        threshold (float): Maximum distance, exclusive

    Returns:
        SizedMarker: The hovered marker, or None
    """
    closest = None
    closest_distance = None

    for marker in markers:
        distance = abs(marker.display_position - pointer_percent)
        if closest is None or distance < closest_distance:
            closest = marker
            closest_distance = distance

    if closest is not None and closest_distance < threshold:
        return closest
    return None
