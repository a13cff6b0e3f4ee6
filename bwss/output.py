"""Operator-facing output for the bwss CLI."""

from typing import Any, Optional

from rich.console import Console
from rich.table import Table


class OutputFormatter:
    """Formats messages, tables and prompts for the terminal."""

    def __init__(
        self,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        """Initialize output formatter.

        Args:
            quiet: Suppress informational output
            console: Console for regular output (defaults to stdout)
            err_console: Console for errors and warnings (defaults to stderr)
        """
        self.quiet = quiet
        self.console = console or Console(highlight=False, markup=False)
        self.err_console = err_console or Console(
            stderr=True, highlight=False, markup=False
        )

    def print(self, message: Any = "", style: Optional[str] = None) -> None:
        """Print a message unconditionally."""
        self.console.print(message, style=style)

    def info(self, message: str) -> None:
        """Print an informational message unless quiet."""
        if not self.quiet:
            self.console.print(message)

    def success(self, message: str) -> None:
        """Print a success message."""
        if not self.quiet:
            self.console.print(message, style="green")

    def warning(self, message: str, style: str = "yellow") -> None:
        """Print a warning to stderr."""
        self.err_console.print(message, style=style)

    def error(self, message: str) -> None:
        """Print an error to stderr."""
        self.err_console.print(message, style="red")

    def detail(self, message: str) -> None:
        """Print unstyled diagnostic text (e.g. output of bw) to stderr."""
        self.err_console.print(message)

    def print_table(
        self,
        columns: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print a table, even in quiet mode.

        Args:
            columns: Column headers
            rows: Row values, one list per row
            title: Optional table title
        """
        table = Table(title=title)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*row)
        self.console.print(table)
