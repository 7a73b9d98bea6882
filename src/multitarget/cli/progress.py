"""
This module provides Rich-based console output utilities for the
multitarget CLI.
"""

import sys
from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console
from rich.table import Table

# Global console instance
console = Console()


@contextmanager
def status(message: str) -> Iterator[None]:
    """
    Show a status spinner while performing an operation.

    Args:
        message: Status message to display

    Example:
        >>> with status("Fetching HAL crate..."):
        ...     report = resolver.analyze(url)
    """
    with console.status(f"[bold blue]{message}"):
        yield


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message in blue."""
    console.print(f"[blue]ℹ[/blue] {message}")


def print_table(
    title: Optional[str],
    columns: list,
    rows: list,
    show_header: bool = True,
) -> None:
    """
    Print a formatted table.

    Args:
        title: Table title
        columns: List of column names
        rows: List of row data (each row is a list of values)
        show_header: Whether to show column headers
    """
    table = Table(title=title, show_header=show_header)

    for col in columns:
        table.add_column(col)

    for row in rows:
        table.add_row(*[str(v) for v in row])

    console.print(table)


def is_terminal() -> bool:
    """Check if we're running in a terminal (TTY)."""
    return sys.stdout.isatty() and sys.stdin.isatty()
