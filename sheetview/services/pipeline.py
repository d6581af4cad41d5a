from __future__ import annotations

import logging
import math
import re
import unicodedata
from collections.abc import Sequence
from dataclasses import dataclass

from ..models.row import Row
from ..models.view_state import SortDirection, ViewState
from ..table.store import TableStore

"""View pipeline: filter -> sort -> paginate.

Every stage is a pure function taking the previous stage's output plus its own
part of the ViewState. Nothing here mutates the TableStore; the page shown to
the user is always recomputed from the store.
"""

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "PageView",
    "ViewPipeline",
    "clamp_page",
    "derive_view",
    "filter_rows",
    "fold",
    "natural_key",
    "paginate",
    "sort_rows",
    "total_pages",
]

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10

_CHUNK_RE = re.compile(r"\d+|[^\W\d_]+|[\W_]+")


@dataclass(frozen=True)
class PageView:
    """Result of one pipeline run.

    ``ordered_rows`` is the full filtered+sorted sequence (what export writes);
    ``rows`` is the visible slice of it starting at ``start_index``.
    """
    rows: tuple[Row, ...]
    ordered_rows: tuple[Row, ...]
    page: int
    page_size: int
    total_pages: int

    @property
    def total_rows(self) -> int:
        return len(self.ordered_rows)

    @property
    def start_index(self) -> int:
        return (self.page - 1) * self.page_size


def filter_rows(rows: Sequence[Row], search_term: str) -> list[Row]:
    """Keep rows where any cell contains ``search_term`` (case-insensitive).

    An empty term returns the rows unchanged.
    """
    if not search_term:
        return list(rows)
    needle = search_term.casefold()
    return [
        row for row in rows
        if any(needle in str(value).casefold() for value in row.values.values())
    ]


def fold(text: str) -> str:
    """Drop accents and case: ``"Émile"`` -> ``"emile"``."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def natural_key(text: str) -> tuple:
    """Sort key ordering text the way a locale-aware collator does.

    Primary level ignores accents and case, compares digit runs numerically
    and puts punctuation before digits before letters: ``"$10"`` < ``"9"`` <
    ``"10"`` < ``"Émile"`` < ``"Eve"``. Ties are broken unaccented first, then
    lowercase first, so the order is total.
    """
    parts = []
    for chunk in _CHUNK_RE.findall(fold(text)):
        if chunk.isdecimal():
            parts.append((1, int(chunk), ""))
        elif chunk[0].isalpha():
            parts.append((2, 0, chunk))
        else:
            parts.append((0, 0, chunk))
    return (tuple(parts), text.casefold(), text.swapcase())


def sort_rows(rows: Sequence[Row], sort_key: str | None, direction: SortDirection) -> list[Row]:
    """Order rows by the stringified value at ``sort_key``.

    Missing and empty values compare as ``""``. Python's sort is stable, also
    with ``reverse=True``, so rows comparing equal keep their filter order.
    """
    if sort_key is None:
        return list(rows)
    return sorted(
        rows,
        key=lambda row: natural_key(str(row.values.get(sort_key) or "")),
        reverse=direction is SortDirection.DESC,
    )


def total_pages(count: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    return math.ceil(count / page_size) if count > 0 else 0


def clamp_page(page: int, pages: int) -> int:
    """Clamp a page number to ``[1, pages]``; with zero pages keep it as is."""
    if pages <= 0:
        return page
    return max(1, min(page, pages))


def paginate(rows: Sequence[Row], page: int, page_size: int = DEFAULT_PAGE_SIZE) -> list[Row]:
    """Return rows ``[(page-1)*size, page*size)``; out of range gives ``[]``."""
    if page < 1:
        return []
    start = (page - 1) * page_size
    return list(rows[start:start + page_size])


def derive_view(rows: Sequence[Row], state: ViewState, page_size: int = DEFAULT_PAGE_SIZE) -> PageView:
    """Run filter -> sort -> paginate for ``state``."""
    filtered = filter_rows(rows, state.search_term)
    ordered = sort_rows(filtered, state.sort_key, state.sort_direction)
    visible = paginate(ordered, state.current_page, page_size)
    return PageView(
        rows=tuple(visible),
        ordered_rows=tuple(ordered),
        page=state.current_page,
        page_size=page_size,
        total_pages=total_pages(len(ordered), page_size),
    )


class ViewPipeline:
    """Memoizing wrapper around :func:`derive_view` for one TableStore.

    The cached result is keyed on ``(store.version, state)``; any load or edit
    bumps the version and forces a recompute.
    """

    def __init__(self, store: TableStore, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.store = store
        self.page_size = page_size
        self._cache_key: tuple[int, ViewState] | None = None
        self._cached: PageView | None = None

    def view(self, state: ViewState) -> PageView:
        key = (self.store.version, state)
        if self._cached is not None and self._cache_key == key:
            return self._cached
        result = derive_view(tuple(self.store), state, self.page_size)
        logger.debug(
            "view derived version=%d page=%d/%d rows=%d",
            self.store.version, result.page, result.total_pages, result.total_rows,
        )
        self._cache_key = key
        self._cached = result
        return result
