"""
Text rendering of alignment tables
"""
from typing import Optional

from ..line_alignment.accumulate import AlignmentTable, Entry, Row


def render_entry(entry: Optional[Entry]) -> str:
    """'<symbol> <text>', just the text for a match, '' for no data"""
    if entry is None:
        return ""
    if not entry.symbol:
        return entry.text
    return f"{entry.symbol} {entry.text}"


def render_row(position: int, row: Row, separator: str = ";") -> str:
    return f"{position}. " + separator.join(render_entry(entry) for entry in row)


def render_table(table: AlignmentTable, separator: str = ";") -> str:
    """
    One line per row, prefixed by its 1-based position

    Example:
        >>> print(render_table(table))
        1. a
        2. ! b|x
        3. c
    """
    return "\n".join(
        render_row(position, row, separator)
        for position, row in enumerate(table, start=1)
    )
