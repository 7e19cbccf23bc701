"""
Tooltip Manager - Centralized user-facing text for the timeline.

This module keeps every string the timeline shows to the user in one place:
interaction hints, empty-state messages, the status line and the hover
tooltip for a snapshot marker.
"""


class TooltipManager:
    """
    Centralized manager for timeline tooltips and informational text.
    """

    # Timeline Canvas Tooltips
    CANVAS_TOOLTIPS = {
        'interaction_hint': 'Scroll to zoom • Drag to pan',
    }

    # Empty state messages
    EMPTY_STATE = {
        'title': 'No snapshots to display',
        'no_query': 'Search for memories to populate the timeline',
        'no_results': 'No results found for "{query}"',
    }

    TOOLTIP_WIDTH = 256

    @classmethod
    def get_canvas_tooltip(cls, key):
        """
        Get tooltip for canvas element.

        Args:
            key (str): Tooltip key

        Returns:
            str: Tooltip text
        """
        return cls.CANVAS_TOOLTIPS.get(key, '')

    @classmethod
    def get_empty_state(cls, search_query=''):
        """
        Get the (title, subtitle) pair shown when there is nothing to plot.

        Args:
            search_query (str): Query that produced the empty result, if any

        Returns:
            tuple: (title, subtitle)
        """
        if search_query:
            subtitle = cls.EMPTY_STATE['no_results'].format(query=search_query)
        else:
            subtitle = cls.EMPTY_STATE['no_query']
        return cls.EMPTY_STATE['title'], subtitle

    @classmethod
    def get_status_line(cls, timeframe_label, visible_count, total_count, search_query=''):
        """
        Build the status line shown above the track.

        Args:
            timeframe_label (str): Human-readable window span
            visible_count (int): Snapshots inside the visible window
            total_count (int): Snapshots with a timestamp
            search_query (str): Active search query

        Returns:
            str: Status line text
        """
        text = f"Window: {timeframe_label} • {visible_count} of {total_count} snapshots"
        if search_query:
            text += f' • Search: "{search_query}"'
        return text

    @classmethod
    def get_event_tooltip(cls, event):
        """
        Get the tooltip lines for a hovered snapshot.

        Args:
            event: TimelineEvent being hovered

        Returns:
            list: [date line, title line, description line]
        """
        return [event.date_label, event.title, event.description]
