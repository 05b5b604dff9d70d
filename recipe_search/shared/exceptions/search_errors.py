"""
Error taxonomy of the recipe search engine.

Errors are split by who caused them: ``ValidationError`` is raised for
malformed client input before any backend I/O, ``DatabaseError`` wraps
backend execution failures and ``ScoringError`` wraps failures inside a
named scoring computation.
"""

from typing import List, Optional


class SearchEngineError(Exception):
    """Base class for all errors raised by the engine."""

    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class ValidationError(SearchEngineError):
    """
    Client-caused error for a malformed query or request.

    ``issues`` lists every individual problem found, ``message`` joins
    them for display.
    """

    status_code = 400

    def __init__(self, message: str, issues: Optional[List[str]] = None):
        super().__init__(message)
        self.issues = issues or [message]


class DatabaseError(SearchEngineError):
    """Server-caused error for a failed backend query or aggregation."""

    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, cause)

    @classmethod
    def from_exception(cls, operation: str, error: BaseException) -> "DatabaseError":
        """
        Wrap a backend exception for the given operation.

        Args:
            operation: Human readable operation name, e.g. ``"search"``
            error: The original backend exception

        Returns:
            DatabaseError: Error naming only the operation; the original is kept as ``cause``
        """
        return cls(f"{operation[:1].upper()}{operation[1:]} failed", cause=error)


class ScoringError(SearchEngineError):
    """Error raised when a named scoring operation fails."""

    status_code = 500

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to calculate {operation}{detail}", cause)
        self.operation = operation
