import os
import sys


def get_terminal_size() -> tuple[int, int]:
    """Return (columns, rows) of the terminal, or (80, 24) if not a tty."""
    if not sys.stdout.isatty():
        return (80, 24)
    size = os.get_terminal_size()
    return (size.columns, size.lines)


def grid_size_for_terminal(reserved_rows: int = 1) -> tuple[int, int]:
    """Largest grid that fits the terminal, keeping `reserved_rows` free for status text."""
    columns, rows = get_terminal_size()
    return max(1, columns), max(1, rows - reserved_rows)
