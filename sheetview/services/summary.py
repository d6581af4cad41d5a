from __future__ import annotations

from collections.abc import Sequence

from ..models.view_state import SortDirection, ViewState
from .pipeline import PageView

"""Text rendering of the current page and its readouts.

Formats:
- summary line: ``Showing {visible} of {total} records``
- page readout: ``Page {page} of {total_pages}``
- header glyphs: ``▲`` ascending, ``▼`` descending, ``↕`` not sorted
"""

__all__ = [
    "render_page_readout",
    "render_summary_line",
    "render_table",
    "sort_glyph",
]

GLYPH_ASC = "▲"
GLYPH_DESC = "▼"
GLYPH_UNSORTED = "↕"


def render_summary_line(view: PageView) -> str:
    return f"Showing {len(view.rows)} of {view.total_rows} records"


def render_page_readout(view: PageView) -> str:
    return f"Page {view.page} of {view.total_pages}"


def sort_glyph(column: str, state: ViewState) -> str:
    if state.sort_key != column:
        return GLYPH_UNSORTED
    return GLYPH_ASC if state.sort_direction is SortDirection.ASC else GLYPH_DESC


def render_table(view: PageView, columns: Sequence[str], state: ViewState) -> str:
    """Render the visible page as a fixed-width text grid.

    The ``#`` column shows the absolute 1-based position of the row in the
    filtered and sorted sequence. Cells are taken from each row by column
    name; missing cells render empty.
    """
    header = ["#"] + [f"{col} {sort_glyph(col, state)}" for col in columns]
    body = [
        [str(view.start_index + i + 1)] + [row.get(col) for col in columns]
        for i, row in enumerate(view.rows)
    ]
    widths = [len(h) for h in header]
    for line in body:
        for i, cell in enumerate(line):
            widths[i] = max(widths[i], len(cell))

    def fmt(cells: list[str]) -> str:
        return " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(cells)).rstrip()

    lines = [fmt(header), "-+-".join("-" * w for w in widths)]
    lines.extend(fmt(line) for line in body)
    return "\n".join(lines)
