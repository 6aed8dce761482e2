"""Rich console used for tables and styled summaries."""

from typing import Iterable, Sequence

from rich.console import Console
from rich.table import Table

_console: Console | None = None


def get_console() -> Console:
    """Get or create the shared Rich Console (stdout)."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def print_table(
    title: str, columns: Sequence[str], rows: Iterable[Sequence[object]]
) -> None:
    """Render rows as a Rich table.

    Args:
        title: Table caption
        columns: Column headers
        rows: Row values; None renders as an empty cell
    """
    table = Table(title=title, show_lines=False)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*("" if value is None else str(value) for value in row))
    get_console().print(table)


def print_styled(message: str, style: str | None = None) -> None:
    """Print a message with an optional Rich style (e.g. "bold green")."""
    get_console().print(message, style=style)
