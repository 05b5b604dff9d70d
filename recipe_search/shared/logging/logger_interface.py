"""
Logger interface for the recipe search engine.

Every engine component logs through this contract so that search,
scoring and instrumentation records share one machine-readable shape.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional


class LogLevel(Enum):
    """Standard log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def severity(self) -> int:
        """Numeric severity, matching the stdlib logging constants."""
        return _SEVERITY[self]

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """
        Resolve a level from its (case-insensitive) name.

        Args:
            name: Level name such as ``"info"``

        Returns:
            LogLevel: Matching level

        Raises:
            ValueError: If the name is not a known level
        """
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {name}") from None


_SEVERITY = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARNING: 30,
    LogLevel.ERROR: 40,
    LogLevel.CRITICAL: 50,
}


class LoggerInterface(ABC):
    """
    Interface for logging implementations.

    Keyword arguments passed to the level methods become structured
    context on the emitted record.
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""

    @abstractmethod
    def exception(self, message: str, exc_info: Optional[BaseException] = None, **kwargs: Any) -> None:
        """
        Log an error together with exception details.

        Args:
            message: The message to log
            exc_info: Exception whose type, message and traceback are attached
            **kwargs: Additional context data
        """

    @abstractmethod
    def set_level(self, level: LogLevel) -> None:
        """Set the minimum level that will be emitted."""

    @abstractmethod
    def get_level(self) -> LogLevel:
        """Get the minimum level that will be emitted."""

    @abstractmethod
    def add_context(self, **kwargs: Any) -> None:
        """Add context data to all subsequent log records."""

    @abstractmethod
    def get_context(self) -> Dict[str, Any]:
        """Get a copy of the current context data."""
