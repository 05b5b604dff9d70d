"""
Structured logger implementation.

Log records are emitted as single-line JSON documents through the
standard library ``logging`` machinery, so handlers configured by the
hosting process still apply.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

from .logger_interface import LoggerInterface, LogLevel


class StructuredLogger(LoggerInterface):
    """
    Structured logger implementation.

    Each record carries a timestamp, level, logger name, message and the
    merged logger/call-site context.
    """

    def __init__(
        self,
        name: str,
        level: LogLevel = LogLevel.INFO,
        output: TextIO = sys.stdout
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Initial log level
            output: Output stream used when the logger has no handler yet
        """
        self.name = name
        self._level = level
        self._context: Dict[str, Any] = {}

        self._logger = logging.getLogger(name)
        self._logger.setLevel(level.severity)

        # Loggers are process-wide; attach the stream handler only once
        if not self._logger.handlers:
            handler = logging.StreamHandler(output)
            handler.setFormatter(logging.Formatter('%(message)s'))
            self._logger.addHandler(handler)

    def _log(
        self,
        level: LogLevel,
        message: str,
        exc_info: Optional[BaseException] = None,
        **kwargs: Any
    ) -> None:
        if level.severity < self._level.severity:
            return

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level.value,
            "logger": self.name,
            "message": message,
            "context": {**self._context, **kwargs}
        }

        if exc_info is not None:
            log_entry["exception"] = {
                "type": exc_info.__class__.__name__,
                "message": str(exc_info),
                "traceback": traceback.format_exception(
                    type(exc_info),
                    exc_info,
                    exc_info.__traceback__
                )
            }

        self._logger.log(level.severity, json.dumps(log_entry, default=str))

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self._log(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self._log(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""
        self._log(LogLevel.ERROR, message, **kwargs)

    def exception(self, message: str, exc_info: Optional[BaseException] = None, **kwargs: Any) -> None:
        """Log an exception."""
        if exc_info is None:
            exc_info = sys.exc_info()[1]
        self._log(LogLevel.ERROR, message, exc_info=exc_info, **kwargs)

    def set_level(self, level: LogLevel) -> None:
        """Set the logging level."""
        self._level = level
        self._logger.setLevel(level.severity)

    def get_level(self) -> LogLevel:
        """Get the current logging level."""
        return self._level

    def add_context(self, **kwargs: Any) -> None:
        """Add context data."""
        self._context.update(kwargs)

    def get_context(self) -> Dict[str, Any]:
        """Get the current context data."""
        return self._context.copy()


_default_level = LogLevel.INFO
# Loggers created without an explicit level follow the default level, one per name
_default_level_loggers: Dict[str, StructuredLogger] = {}


def set_default_level(level: LogLevel) -> None:
    """
    Set the default level.

    Applies to loggers created after this call and to every logger that
    was created without an explicit level.
    """
    global _default_level
    _default_level = level
    logging.getLogger("recipe_search").setLevel(level.severity)
    for logger in _default_level_loggers.values():
        logger.set_level(level)


def configure_logging(
    name: str = "recipe_search",
    level: Optional[LogLevel] = None,
    output: TextIO = sys.stdout
) -> StructuredLogger:
    """
    Configure and return a StructuredLogger instance.

    Without an explicit level the logger follows the process-wide default
    level, and repeated calls with the same name return the same logger.

    Args:
        name: Logger name
        level: Logging level, defaults to the process-wide default level
        output: Output stream for logs

    Returns:
        StructuredLogger: Configured logger instance
    """
    if level is not None:
        return StructuredLogger(name=name, level=level, output=output)

    logger = _default_level_loggers.get(name)
    if logger is None:
        logger = StructuredLogger(name=name, level=_default_level, output=output)
        _default_level_loggers[name] = logger
    return logger
