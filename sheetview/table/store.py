from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from ..models.row import Row

"""Table store: canonical in-memory rows of the uploaded sheet.

The store is the single source of truth. Derived (filtered / sorted / paged)
sequences are rebuilt from ``rows`` and are never written back. Edits resolve
the target row through a ``row_id -> position`` index.
"""

__all__ = [
    "TableStore",
]

logger = logging.getLogger(__name__)


class TableStore:
    """Ordered row container with id-based cell mutation.

    ``version`` increases on every load and successful edit; it is used as
    part of the cache key of the view pipeline.
    """

    def __init__(self, rows: Iterable[Row] | None = None) -> None:
        self._rows: list[Row] = []
        self._index: dict[int, int] = {}
        self.version = 0
        if rows is not None:
            self.load(rows)

    def load(self, rows: Iterable[Row]) -> None:
        """Replace the table wholesale."""
        self._rows = list(rows)
        self._index = {row.row_id: pos for pos, row in enumerate(self._rows)}
        self.version += 1
        logger.debug("table loaded rows=%d version=%d", len(self._rows), self.version)

    @property
    def rows(self) -> tuple[Row, ...]:
        return tuple(self._rows)

    @property
    def columns(self) -> list[str]:
        """Column names implied by the keys of the first row."""
        if not self._rows:
            return []
        return list(self._rows[0].values.keys())

    def get(self, row_id: int) -> Row | None:
        pos = self._index.get(row_id)
        return None if pos is None else self._rows[pos]

    def update_cell(self, row_id: int | None, column_key: str, new_value: str) -> bool:
        """Set one cell of one row.

        No validation is done on the value or the column: an unknown column is
        added to that row only. An unknown ``row_id`` is a silent no-op.

        Returns:
            True if a row was found and updated
        """
        pos = self._index.get(row_id) if row_id is not None else None
        if pos is None:
            logger.debug("edit skipped: row_id=%s not in table", row_id)
            return False
        self._rows[pos] = self._rows[pos].with_value(column_key, new_value)
        self.version += 1
        return True

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(tuple(self._rows))
