"""
Rendering alignment tables as text or figures
"""

from .render import render_entry, render_row, render_table
from .table_plot import plot_table, table_codes

__all__ = [
    "render_entry",
    "render_row",
    "render_table",
    "plot_table",
    "table_codes"
]
