"""
Timeline Canvas - Qt widget hosting the interactive memory timeline.

This module provides the TimelineCanvas class which paints the current
TimelineFrame with QPainter and routes wheel and mouse input to the
TimelineEngine. All layout decisions are made by the engine; the widget only
converts between widget pixels and track-relative pixels and draws.
"""

import logging

from PyQt5.QtCore import Qt, QRectF, pyqtSignal
from PyQt5.QtGui import QBrush, QColor, QFont, QFontMetrics, QPainter, QPen
from PyQt5.QtWidgets import QWidget

from memoir_timeline.data.history_range import fallback_full_history, full_history_from_user_info
from memoir_timeline.rendering.marker_sizer import marker_color
from memoir_timeline.rendering.tick_generator import MAJOR
from memoir_timeline.timeline_engine import TimelineEngine
from memoir_timeline.utils.error_handler import DataLoadError, ErrorHandler
from memoir_timeline.utils.tooltip_manager import TooltipManager

# Configure logger
logger = logging.getLogger(__name__)


class TimelineCanvas(QWidget):
    """
    Interactive timeline widget.

    Signals:
        viewport_changed: Emitted with (window_start, window_end) in data percent
        event_hovered: Emitted with the hovered snapshot, {} when nothing is hovered
    """

    viewport_changed = pyqtSignal(float, float)
    event_hovered = pyqtSignal(dict)

    # Layout
    MARGIN_X = 48
    STATUS_HEIGHT = 28
    AXIS_HEIGHT = 36
    MAJOR_TICK_HEIGHT = 10
    MINOR_TICK_HEIGHT = 5

    # Qt reports wheel steps in eighths of a degree, 120 per notch
    WHEEL_NOTCH = 120
    DELTA_PER_NOTCH = 100

    # Colors
    BACKGROUND_COLOR = QColor(24, 24, 27)
    TRACK_COLOR = QColor(82, 82, 91)
    TEXT_COLOR = QColor(212, 212, 216)
    MUTED_TEXT_COLOR = QColor(161, 161, 170)
    TOOLTIP_BACKGROUND = QColor(39, 39, 42, 235)

    def __init__(self, parent=None, config=None, clock=None):
        """
        Initialize the timeline canvas.

        Args:
            parent: Parent widget
            config (TimelineConfig): Timeline preferences
            clock (callable): Returns the current time in epoch ms
        """
        super().__init__(parent)

        self.engine = TimelineEngine(config, clock)
        self.error_handler = ErrorHandler(self)

        self.search_query = ''
        self._hovered = None

        self.setMouseTracking(True)
        self.setMinimumHeight(160)
        self.setCursor(Qt.OpenHandCursor)
        self.setToolTip(TooltipManager.get_canvas_tooltip('interaction_hint'))

    def _track_rect(self):
        """Rectangle of the drawable timeline track in widget coordinates."""
        return QRectF(
            self.MARGIN_X,
            self.STATUS_HEIGHT,
            max(0, self.width() - 2 * self.MARGIN_X),
            max(0, self.height() - self.STATUS_HEIGHT - self.AXIS_HEIGHT),
        )

    def _track_x(self, widget_x):
        return widget_x - self.MARGIN_X

    def set_snapshots(self, snapshots, search_query=''):
        """
        Show a new set of snapshots.

        Args:
            snapshots (list): Snapshot dictionaries from the memory service
            search_query (str): Query that produced them
        """
        self.search_query = search_query or ''
        self._hovered = None
        self.engine.set_snapshots(snapshots)
        self._emit_viewport_changed()
        self.update()

    def set_starting_window(self, window):
        self.engine.set_starting_window(window)
        self._emit_viewport_changed()
        self.update()

    def set_full_history(self, full_history):
        self.engine.set_full_history(full_history)

    def load_full_history(self, fetch_user_info):
        """
        Fetch the user's history span and use it as the zoom-out limit.

        Args:
            fetch_user_info (callable): Returns the user info payload
                ({'total_snapshots': int, 'oldest_snapshot': str | None})

        Returns:
            FullHistoryRange: The range now in use
        """
        now_ms = self.engine.clock()
        try:
            user_info = fetch_user_info()
            full_history = full_history_from_user_info(user_info, now_ms)
            logger.info(f"Full history range loaded, starting {full_history.start_ms}")
        except Exception as e:
            self.error_handler.handle_error(
                DataLoadError("Could not load full history range", source='user info', original_error=e),
                "loading user info"
            )
            full_history = fallback_full_history(now_ms)

        self.engine.set_full_history(full_history)
        return full_history

    def _emit_viewport_changed(self):
        state = self.engine.state
        self.viewport_changed.emit(state.window_start, state.window_end)

    def _set_hovered(self, marker):
        """Update the hovered marker; returns True if a different snapshot is now hovered."""
        previous = self._hovered
        self._hovered = marker

        if marker is None and previous is None:
            return False
        if marker is not None and previous is not None and marker.event.index == previous.event.index:
            return False

        self.event_hovered.emit(dict(marker.event.snapshot) if marker is not None else {})
        return True

    def wheelEvent(self, event):
        """
        Zoom around the cursor.

        Args:
            event: QWheelEvent
        """
        delta_y = -event.angleDelta().y() / self.WHEEL_NOTCH * self.DELTA_PER_NOTCH
        x = self._track_x(event.pos().x())
        width = self._track_rect().width()

        if self.engine.handle_wheel(x, width, delta_y):
            # Markers moved under the pointer
            self._set_hovered(self.engine.hover(x, width))
            self._emit_viewport_changed()
            self.update()

        event.accept()

    def mousePressEvent(self, event):
        """
        Start panning on left button press.

        Args:
            event: QMouseEvent
        """
        if event.button() == Qt.LeftButton and self.engine.time_range is not None:
            self.engine.begin_drag(self._track_x(event.pos().x()))
            self._set_hovered(None)
            self.setCursor(Qt.ClosedHandCursor)
            self.update()
            event.accept()
            return

        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        """
        Pan while dragging, otherwise update the hovered marker.

        Args:
            event: QMouseEvent
        """
        x = self._track_x(event.pos().x())
        width = self._track_rect().width()

        if self.engine.is_dragging:
            if self.engine.drag_to(x, width):
                self._set_hovered(None)
                self._emit_viewport_changed()
                self.update()
            event.accept()
            return

        hovered = self.engine.hover(x, width)
        if self._set_hovered(hovered):
            self.setCursor(Qt.PointingHandCursor if hovered is not None else Qt.OpenHandCursor)
            self.update()

        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        """
        Finish panning.

        Args:
            event: QMouseEvent
        """
        if event.button() == Qt.LeftButton and self.engine.is_dragging:
            self.engine.end_drag()
            self.setCursor(Qt.OpenHandCursor)
            event.accept()
            return

        super().mouseReleaseEvent(event)

    def leaveEvent(self, event):
        """Clear the hover tooltip when the pointer leaves the widget."""
        if self._set_hovered(None):
            self.update()
        super().leaveEvent(event)

    def resizeEvent(self, event):
        """
        Re-layout on resize; overlap estimation depends on the track width.

        Args:
            event: QResizeEvent
        """
        super().resizeEvent(event)
        self._set_hovered(None)
        self.update()

    def paintEvent(self, event):
        """
        Paint the timeline.

        Args:
            event: QPaintEvent
        """
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.fillRect(self.rect(), self.BACKGROUND_COLOR)

        rect = self._track_rect()
        frame = self.engine.compute_frame(rect.width())

        if self.engine.time_range is None:
            self._paint_empty_state(painter)
            painter.end()
            return

        self._paint_status(painter, frame)
        self._paint_axis(painter, rect, frame)
        self._paint_markers(painter, rect, frame)
        if self._hovered is not None:
            self._paint_tooltip(painter, rect)

        painter.end()

    def _paint_empty_state(self, painter):
        title, subtitle = self.engine.empty_state_text(self.search_query)
        center_y = self.height() / 2

        title_font = QFont()
        title_font.setPointSize(11)
        title_font.setBold(True)
        painter.setFont(title_font)
        painter.setPen(self.TEXT_COLOR)
        painter.drawText(QRectF(0, center_y - 24, self.width(), 22), Qt.AlignCenter, title)

        painter.setFont(QFont())
        painter.setPen(self.MUTED_TEXT_COLOR)
        painter.drawText(QRectF(0, center_y + 2, self.width(), 22), Qt.AlignCenter, subtitle)

    def _paint_status(self, painter, frame):
        status = TooltipManager.get_status_line(
            frame.timeframe_label, frame.visible_count, frame.total_count, self.search_query
        )
        painter.setPen(self.MUTED_TEXT_COLOR)
        painter.drawText(
            QRectF(self.MARGIN_X, 0, self.width() - 2 * self.MARGIN_X, self.STATUS_HEIGHT),
            Qt.AlignLeft | Qt.AlignVCenter, status
        )
        painter.drawText(
            QRectF(self.MARGIN_X, 0, self.width() - 2 * self.MARGIN_X, self.STATUS_HEIGHT),
            Qt.AlignRight | Qt.AlignVCenter, self.engine.data_range_text()
        )

    def _paint_axis(self, painter, rect, frame):
        axis_y = rect.bottom()

        painter.setPen(QPen(self.TRACK_COLOR, 1))
        painter.drawLine(int(rect.left()), int(axis_y), int(rect.right()), int(axis_y))

        for tick in frame.ticks:
            x = rect.left() + tick.position / 100.0 * rect.width()
            height = self.MAJOR_TICK_HEIGHT if tick.kind == MAJOR else self.MINOR_TICK_HEIGHT
            painter.drawLine(int(x), int(axis_y), int(x), int(axis_y + height))

        painter.setPen(self.MUTED_TEXT_COLOR)
        metrics = QFontMetrics(painter.font())
        for label in frame.labels:
            x = rect.left() + label.position / 100.0 * rect.width()
            text_width = metrics.horizontalAdvance(label.text)
            painter.drawText(
                QRectF(x - text_width / 2 - 2, axis_y + self.MAJOR_TICK_HEIGHT + 2, text_width + 4, metrics.height()),
                Qt.AlignCenter, label.text
            )

    def _paint_markers(self, painter, rect, frame):
        center_y = rect.center().y()

        # Least relevant first so the most relevant end up on top
        for marker in reversed(frame.markers):
            x = rect.left() + marker.display_position / 100.0 * rect.width()
            red, green, blue = marker_color(marker.relevance)
            color = QColor(red, green, blue)
            color.setAlphaF(marker.opacity)

            is_hovered = self._hovered is not None and marker.event.index == self._hovered.event.index
            painter.setBrush(QBrush(color))
            painter.setPen(QPen(self.TEXT_COLOR, 2) if is_hovered else Qt.NoPen)

            radius = marker.size / 2
            painter.drawEllipse(QRectF(x - radius, center_y - radius, marker.size, marker.size))

        painter.setBrush(Qt.NoBrush)

    def _paint_tooltip(self, painter, rect):
        lines = TooltipManager.get_event_tooltip(self._hovered.event)
        metrics = QFontMetrics(painter.font())
        line_height = metrics.height()
        width = TooltipManager.TOOLTIP_WIDTH
        height = line_height * len(lines) + 12

        x = rect.left() + self._hovered.display_position / 100.0 * rect.width() - width / 2
        x = max(0, min(self.width() - width, x))
        y = max(0, rect.center().y() - self._hovered.size / 2 - height - 6)

        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(self.TOOLTIP_BACKGROUND))
        painter.drawRoundedRect(QRectF(x, y, width, height), 6, 6)
        painter.setBrush(Qt.NoBrush)

        for i, line in enumerate(lines):
            painter.setPen(self.MUTED_TEXT_COLOR if i == 0 else self.TEXT_COLOR)
            text = metrics.elidedText(line, Qt.ElideRight, width - 16)
            painter.drawText(QRectF(x + 8, y + 6 + i * line_height, width - 16, line_height),
                             Qt.AlignLeft | Qt.AlignVCenter, text)
