"""
Output formatter for CLI commands.

This module provides consistent formatting for CLI output,
including tables, JSON, and error panels.
"""

from typing import Any, Dict, List, Optional, Union
import json
from tabulate import tabulate
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.text import Text


class OutputFormatter:
    """
    Formatter for CLI command output.

    Renders rich tables and panels on a terminal, or plain tabulate grids
    when rich output is disabled.
    """

    def __init__(self, use_rich: bool = True, as_json: bool = False):
        """
        Initialize the formatter.

        Args:
            use_rich: Whether to use rich formatting
            as_json: Whether data is printed as JSON instead of tables
        """
        self.use_rich = use_rich
        self.as_json = as_json
        self.console = Console() if use_rich else None

    def format_table(
        self,
        data: List[Dict[str, Any]],
        headers: Optional[List[str]] = None,
        title: Optional[str] = None
    ) -> Union[str, Table]:
        """
        Format data as a table.

        Args:
            data: List of dictionaries containing row data
            headers: Optional list of header names
            title: Optional table title

        Returns:
            Union[str, Table]: Rich table or plain text grid
        """
        if not data:
            return "No data to display"

        keys = headers or list(data[0].keys())
        if self.use_rich:
            table = Table(title=title) if title else Table()
            for key in keys:
                table.add_column(key)
            for row in data:
                table.add_row(*[str(row.get(key, "")) for key in keys])
            return table

        grid = tabulate(
            [[row.get(key, "") for key in keys] for row in data],
            headers=keys,
            tablefmt="grid"
        )
        return f"{title}\n{grid}" if title else grid

    def format_json(
        self,
        data: Union[Dict[str, Any], List[Any]],
        pretty: bool = True
    ) -> str:
        """
        Format data as JSON.

        Args:
            data: Data to format
            pretty: Whether to pretty print

        Returns:
            str: Formatted JSON
        """
        return json.dumps(data, indent=2 if pretty else None, default=str)

    def format_error(
        self,
        message: str,
        details: Optional[str] = None
    ) -> Union[str, Panel]:
        """
        Format error message.

        Args:
            message: Error message
            details: Optional error details

        Returns:
            Union[str, Panel]: Formatted error
        """
        if self.use_rich:
            error_text = Text(message, style="bold red")
            if details:
                error_text.append("\n" + details, style="red")
            return Panel(error_text, title="Error", border_style="red")
        if details:
            return f"Error: {message}\n{details}"
        return f"Error: {message}"

    def format_summary(self, message: str) -> Union[str, Text]:
        if self.use_rich:
            return Text(message, style="bold green")
        return message

    def print(
        self,
        content: Any,
        style: Optional[str] = None
    ) -> None:
        """
        Print content with optional styling.

        Args:
            content: Content to print
            style: Optional style
        """
        if self.use_rich:
            if style:
                self.console.print(content, style=style)
            else:
                self.console.print(content)
        else:
            print(content)

    def print_data(
        self,
        data: Union[Dict[str, Any], List[Any]],
        rows: List[Dict[str, Any]],
        title: Optional[str] = None
    ) -> None:
        """
        Print command output as JSON or as a table.

        Args:
            data: Full structured output, used for JSON
            rows: Table rows, used otherwise
            title: Optional table title
        """
        if self.as_json:
            # Plain print so JSON stays machine readable
            print(self.format_json(data))
        else:
            self.print(self.format_table(rows, title=title))
