"""
Error Handler Utility
=====================

This module provides centralized error handling for the memoir timeline:
the timeline exception hierarchy, logging setup for the package, and a Qt
error handler that logs, records and broadcasts failures coming from
external collaborators (user-info service, configuration files).

The timeline engine itself never raises on malformed data; errors only
arise at the edges where the timeline talks to the outside world.
"""

import logging
import sys
import traceback
from datetime import datetime
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

# Configure logger
logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ErrorSeverity:
    """Error severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class TimelineError(Exception):
    """Base exception for timeline-related errors."""

    def __init__(self, message: str, details: Optional[str] = None,
                 severity: str = ErrorSeverity.ERROR):
        """
        Initialize timeline error.

        Args:
            message: User-friendly error message
            details: Technical details for logging
            severity: Error severity level
        """
        super().__init__(message)
        self.message = message
        self.details = details or message
        self.severity = severity


class ConfigError(TimelineError):
    """Exception for invalid configuration keys or values."""

    def __init__(self, message: str, section: Optional[str] = None,
                 key: Optional[str] = None):
        details = message
        if section:
            details += f"\nSection: {section}"
        if key:
            details += f"\nKey: {key}"
        super().__init__(message, details, ErrorSeverity.ERROR)
        self.section = section
        self.key = key


class DataLoadError(TimelineError):
    """Exception for failures of the services that feed the timeline."""

    def __init__(self, message: str, source: Optional[str] = None,
                 original_error: Optional[Exception] = None):
        details = message
        if source:
            details += f"\nSource: {source}"
        if original_error:
            details += f"\nOriginal error: {type(original_error).__name__}: {original_error}"
        super().__init__(message, details, ErrorSeverity.WARNING)
        self.source = source
        self.original_error = original_error


def setup_logging(log_level: int = logging.INFO, log_file: Optional[str] = None,
                  logger_name: str = 'memoir_timeline') -> logging.Logger:
    """
    Configure logging for the timeline package.

    Args:
        log_level: Logging level (e.g., logging.INFO, logging.DEBUG)
        log_file: Optional file to write logs to
        logger_name: Logger to configure (the package logger by default)

    Returns:
        logging.Logger: The configured logger
    """
    package_logger = logging.getLogger(logger_name)

    # Clear any existing handlers
    package_logger.handlers = []
    package_logger.setLevel(log_level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            package_logger.error(f"Failed to set up file logging: {e}")
        else:
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)

    return package_logger


class ErrorHandler(QObject):
    """
    Centralized error handler for the timeline widget.

    Logs each handled error at the level matching its severity, keeps the
    most recent ones for inspection and re-emits them so the host window can
    surface them however it likes.

    Signals:
        error_occurred: Emitted when an error is handled (severity, message, details)
    """

    error_occurred = pyqtSignal(str, str, str)  # severity, message, details

    def __init__(self, parent=None, max_stored_errors: int = 10):
        """
        Initialize error handler.

        Args:
            parent: Parent QObject
            max_stored_errors: Number of recent errors to keep
        """
        super().__init__(parent)
        self._error_count = 0
        self._last_errors = []
        self._max_stored_errors = max_stored_errors

    def handle_error(self, error: Exception, context: str = "") -> str:
        """
        Handle an error with logging, history and signal emission.

        Args:
            error: The exception that occurred
            context: Context description (e.g., "loading user info")

        Returns:
            str: The severity the error was handled with
        """
        self._error_count += 1

        if isinstance(error, TimelineError):
            message = error.message
            details = error.details
            severity = error.severity
        else:
            message = f"An unexpected error occurred while {context}" if context else "An unexpected error occurred"
            error_traceback = "".join(traceback.format_exception(type(error), error, error.__traceback__))
            details = f"Context: {context}\n{type(error).__name__}: {error}\n{error_traceback}"
            severity = ErrorSeverity.ERROR

        log_message = f"Error in {context}: {details}" if context else f"Error: {details}"

        if severity == ErrorSeverity.CRITICAL:
            logger.critical(log_message)
        elif severity == ErrorSeverity.ERROR:
            logger.error(log_message)
        elif severity == ErrorSeverity.WARNING:
            logger.warning(log_message)
        else:
            logger.info(log_message)

        self._store_error(severity, message, details)
        self.error_occurred.emit(severity, message, details)
        return severity

    def _store_error(self, severity: str, message: str, details: str):
        """Store error in history, keeping only the last N."""
        self._last_errors.append({
            'timestamp': datetime.now(),
            'severity': severity,
            'message': message,
            'details': details
        })

        if len(self._last_errors) > self._max_stored_errors:
            self._last_errors = self._last_errors[-self._max_stored_errors:]

    def get_error_history(self) -> list:
        """
        Get recent error history.

        Returns:
            list: List of error records (oldest first)
        """
        return self._last_errors.copy()

    def get_error_count(self) -> int:
        """
        Get total error count.

        Returns:
            int: Number of errors handled since the last clear
        """
        return self._error_count

    def clear_error_history(self):
        """Clear error history and reset count."""
        self._last_errors.clear()
        self._error_count = 0
