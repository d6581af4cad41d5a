from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

"""View state and edit target models.

ViewState is an immutable value: every user action (search, sort toggle,
page navigation) produces a new instance via ``dataclasses.replace``. The
pipeline in ``sheetview.services.pipeline`` derives the visible page from the
table plus this value only.
"""

__all__ = [
    "SortDirection",
    "ViewState",
    "EditTarget",
]


class SortDirection(Enum):
    """Sort direction for the active sort column."""
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


@dataclass(frozen=True)
class ViewState:
    """Search term, sort spec and page number controlling what is displayed.

    ``current_page`` is 1-based. It is never pushed below 1; an out-of-range
    page simply yields an empty slice.
    """
    search_term: str = ""
    sort_key: str | None = None
    sort_direction: SortDirection = SortDirection.ASC
    current_page: int = 1

    @classmethod
    def initial(cls) -> ViewState:
        return cls()

    def with_search(self, term: str) -> ViewState:
        # current_page is kept; an out-of-range page yields an empty slice
        return replace(self, search_term=term or "")

    def toggle_sort(self, key: str) -> ViewState:
        """Clicking the active column flips direction, a new column starts ascending."""
        if self.sort_key == key:
            return replace(self, sort_direction=self.sort_direction.flipped())
        return replace(self, sort_key=key, sort_direction=SortDirection.ASC)

    def with_page(self, page: int, total_pages: int) -> ViewState:
        """Jump to ``page`` clamped to ``[1, total_pages]``.

        With no pages at all (empty result) the current page is kept.
        """
        if total_pages <= 0:
            return self
        return replace(self, current_page=max(1, min(page, total_pages)))

    def next_page(self, total_pages: int) -> ViewState:
        return self.with_page(self.current_page + 1, total_pages)

    def prev_page(self) -> ViewState:
        return replace(self, current_page=max(1, self.current_page - 1))


@dataclass(frozen=True)
class EditTarget:
    """The single cell currently in edit mode.

    ``display_row_index`` is the 0-based position on the displayed page;
    ``row_id`` is resolved from it when the cell is selected and is ``None``
    when the index did not point at a displayed row.
    """
    display_row_index: int
    column_key: str
    row_id: int | None
