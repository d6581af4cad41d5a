from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

"""Row model for the spreadsheet viewer.

A Row is one record of the uploaded sheet: column name -> display string.
Each row carries a synthetic ``row_id`` assigned at ingestion time so that an
edit made on a filtered/sorted page can be resolved back to the source row by
id lookup instead of object identity.
"""

__all__ = [
    "Row",
    "rows_from_records",
]


@dataclass(frozen=True)
class Row:
    """Single record of the table.

    ``row_id`` is 1-based and follows the original file order (first data row
    = 1). ``values`` preserves the column order of the source sheet.
    """
    row_id: int
    values: dict[str, str] = field(default_factory=dict)

    def get(self, column: str, default: str = "") -> str:
        return self.values.get(column, default)

    def with_value(self, column: str, value: str) -> Row:
        """Return a copy with one cell replaced (or added if the column is unknown)."""
        updated = dict(self.values)
        updated[column] = value
        return Row(row_id=self.row_id, values=updated)


def rows_from_records(records: Iterable[Mapping[str, Any]], start: int = 1) -> list[Row]:
    """Wrap plain mappings into Rows, numbering them in iteration order."""
    return [Row(row_id=i, values=dict(r)) for i, r in enumerate(records, start=start)]
