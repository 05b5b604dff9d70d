"""
CLI handler for managing command execution.

This module provides a base handler for CLI commands that turns engine
errors into printed messages and process exit codes.
"""

from typing import Any, Optional
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...cli.formatters.output_formatter import OutputFormatter
from ....shared.exceptions import SearchEngineError, ValidationError

# Process exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2


@dataclass
class CommandResult:
    """Result of a command execution."""

    success: bool
    message: str
    data: Optional[Any] = None
    error: Optional[Exception] = None

    @property
    def exit_code(self) -> int:
        """Exit code matching the kind of failure."""
        if self.success:
            return EXIT_OK
        if isinstance(self.error, ValidationError):
            return EXIT_INVALID_INPUT
        return EXIT_FAILURE


class CommandHandler(ABC):
    """
    Base class for command handlers.

    Subclasses implement ``run``; ``execute`` reports engine errors
    through the formatter and wraps the outcome in a ``CommandResult``.
    """

    def __init__(self, formatter: OutputFormatter):
        """
        Initialize the handler.

        Args:
            formatter: Output formatter
        """
        self.formatter = formatter

    @abstractmethod
    async def run(self, **kwargs: Any) -> CommandResult:
        """
        Run the command.

        Args:
            **kwargs: Command arguments

        Returns:
            CommandResult: Command execution result
        """
        pass

    async def execute(self, **kwargs: Any) -> CommandResult:
        """
        Execute the command, converting engine errors into results.

        Args:
            **kwargs: Command arguments

        Returns:
            CommandResult: Command execution result
        """
        try:
            return await self.run(**kwargs)
        except ValidationError as e:
            return self.handle_error(e, "Invalid request")
        except SearchEngineError as e:
            return self.handle_error(e, "Request failed")

    def handle_error(
        self,
        error: SearchEngineError,
        message: str = "An error occurred"
    ) -> CommandResult:
        """
        Handle command execution error.

        Args:
            error: Engine error that occurred
            message: Error message

        Returns:
            CommandResult: Error result
        """
        self.formatter.print(self.formatter.format_error(message, error.message))

        return CommandResult(
            success=False,
            message=message,
            error=error
        )

    def handle_success(
        self,
        message: str,
        data: Optional[Any] = None
    ) -> CommandResult:
        """
        Handle command execution success.

        Args:
            message: Success message
            data: Optional result data

        Returns:
            CommandResult: Success result
        """
        if not self.formatter.as_json:
            self.formatter.print(self.formatter.format_summary(message))

        return CommandResult(
            success=True,
            message=message,
            data=data
        )
