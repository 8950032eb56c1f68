"""
Alignment table plotting (one column per compared sequence)
"""
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap
from matplotlib.patches import Patch
from typing import Optional, Tuple

from ..line_alignment.accumulate import AlignmentTable

# code -> (symbol, label, colour); code 0 is "no data"
_KINDS = [
    (None, "no data", "#f0f0f0"),
    ("", "match", "#cfe8cf"),
    ("!", "change", "#ffe08a"),
    ("-", "delete", "#f4a6a6"),
    ("+", "insert", "#a6c8f4"),
]
_CODES = {symbol: code for code, (symbol, _, _) in enumerate(_KINDS)}


def table_codes(table: AlignmentTable) -> np.ndarray:
    """(rows x sequences) int matrix of entry kinds, 0 where a slot is empty"""
    width = len(table.other_names) or max((len(row) for row in table), default=0)
    codes = np.zeros((len(table), width), dtype=np.int8)
    for i, row in enumerate(table):
        for k, entry in enumerate(row):
            codes[i, k] = 0 if entry is None else _CODES[entry.symbol]
    return codes


def plot_table(
    table: AlignmentTable,
    figsize: Optional[Tuple[float, float]] = None,
    show_text: bool = True,
    font_size: int = 8,
    max_chars: int = 24,
    title: Optional[str] = None,
) -> plt.Figure:
    """
    Draw the table as a coloured grid.
    - Rows are alignment positions (1-based, top to bottom).
    - Columns are the compared sequences, labelled with their names.
    - Cell text is the entry text, cut at max_chars.
    """
    codes = table_codes(table)
    nrows, ncols = codes.shape
    if figsize is None:
        figsize = (max(4.0, 2.5 * ncols), max(2.0, 0.3 * nrows + 1.0))

    fig, ax = plt.subplots(figsize=figsize)
    cmap = ListedColormap([colour for _, _, colour in _KINDS])
    if codes.size:
        ax.imshow(codes, cmap=cmap, vmin=0, vmax=len(_KINDS) - 1,
                  aspect="auto", interpolation="nearest")

    if show_text:
        for i, row in enumerate(table):
            for k, entry in enumerate(row):
                if entry is None:
                    continue
                text = entry.text if len(entry.text) <= max_chars else entry.text[:max_chars - 1] + "…"
                label = f"{entry.symbol} {text}" if entry.symbol else text
                ax.text(k, i, label, ha="center", va="center", fontsize=font_size)

    ax.set_xticks(range(ncols))
    ax.set_xticklabels(table.other_names[:ncols] or [str(k + 1) for k in range(ncols)],
                       fontsize=font_size)
    ax.xaxis.tick_top()
    ax.set_yticks(range(nrows))
    ax.set_yticklabels([str(i + 1) for i in range(nrows)], fontsize=font_size)

    handles = [Patch(color=colour, label=label) for _, label, colour in _KINDS[1:]]
    ax.legend(handles=handles, loc="upper left", bbox_to_anchor=(1.01, 1.0),
              fontsize=font_size, frameon=False)

    ax.set_title(title or f"base: {table.base_name}", fontsize=font_size + 2, fontweight="bold")
    plt.tight_layout()
    return fig
