"""
Overlap Resolver - Suppresses markers hidden behind more relevant ones.

This module provides the OverlapResolver class which decides which of the
visible markers are actually drawn. Markers are accepted greedily, most
relevant first; a marker that collides on screen with an already accepted
one is dropped unless the two have close relevance scores, in which case
both are shown.

The walk is greedy and order-dependent on purpose: the outcome is fully
determined by the relevance ranking, with the original snapshot order
breaking ties.
"""

import logging
from typing import List, Optional

from memoir_timeline.rendering.marker_sizer import SizedMarker

# Configure logger
logger = logging.getLogger(__name__)


class OverlapResolver:
    """
    Score-aware greedy overlap suppression for timeline markers.
    """

    # Width assumed before the host has reported its real width
    REFERENCE_WIDTH_PX = 1000

    def __init__(self, always_show_zoom=200.0, overlap_ratio=0.8,
                 score_proximity_threshold=0.15, max_markers=50,
                 reference_width_px=REFERENCE_WIDTH_PX):
        """
        Initialize the overlap resolver.

        Args:
            always_show_zoom (float): At or above this zoom no marker is suppressed
            overlap_ratio (float): Fraction of the combined radii below which
                two markers count as overlapping
            score_proximity_threshold (float): Relative score difference above
                which the lower-scoring of two overlapping markers is dropped
            max_markers (int): Maximum number of markers returned
            reference_width_px (int): Width used when none is given
        """
        self.always_show_zoom = always_show_zoom
        self.overlap_ratio = overlap_ratio
        self.score_proximity_threshold = score_proximity_threshold
        self.max_markers = max_markers
        self.reference_width_px = reference_width_px

    @staticmethod
    def sort_markers(markers: List[SizedMarker]) -> List[SizedMarker]:
        """
        Order markers by descending relevance, ties by original snapshot order.

        Args:
            markers (list): SizedMarker objects

        Returns:
            list: New sorted list
        """
        return sorted(markers, key=lambda m: (-m.relevance, m.event.index))

    @staticmethod
    def score_proximity(score_a, score_b):
        """
        Relative difference between two scores.

        Args:
            score_a (float): First relevance score
            score_b (float): Second relevance score

        Returns:
            float: |a - b| / mean(a, b), 0.0 when both are zero
        """
        average = (score_a + score_b) / 2
        if average <= 0:
            return 0.0
        return abs(score_a - score_b) / average

    def overlaps(self, marker_a: SizedMarker, marker_b: SizedMarker, width_px=None):
        """
        Check whether two markers collide on screen.

        Args:
            marker_a (SizedMarker): First marker
            marker_b (SizedMarker): Second marker
            width_px (float): Rendered track width in pixels

        Returns:
            bool: True if their centers are closer than the scaled combined radii
        """
        width = width_px if width_px and width_px > 0 else self.reference_width_px
        distance_px = abs(marker_a.display_position - marker_b.display_position) / 100.0 * width
        combined_radii = (marker_a.size + marker_b.size) / 2
        return distance_px < combined_radii * self.overlap_ratio

    def resolve(self, markers: List[SizedMarker], zoom: float, width_px: Optional[float] = None) -> List[SizedMarker]:
        """
        Select the markers to draw.

        Args:
            markers (list): SizedMarker objects for the visible window
            zoom (float): Current zoom factor
            width_px (float): Rendered track width in pixels

        Returns:
            list: Accepted markers, most relevant first
        """
        ordered = self.sort_markers(markers)

        if zoom >= self.always_show_zoom:
            return ordered[:self.max_markers]

        accepted = []
        for candidate in ordered:
            if len(accepted) >= self.max_markers:
                break

            rejected = False
            for kept in accepted:
                if not self.overlaps(candidate, kept, width_px):
                    continue
                if self.score_proximity(candidate.relevance, kept.relevance) > self.score_proximity_threshold:
                    rejected = True
                    break

            if not rejected:
                accepted.append(candidate)

        suppressed = len(ordered) - len(accepted)
        if suppressed:
            logger.debug(f"Overlap resolver kept {len(accepted)} of {len(ordered)} markers")

        return accepted
