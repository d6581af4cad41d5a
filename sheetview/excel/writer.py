from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils import get_column_letter

from ..models.row import Row

"""Spreadsheet export.

Writes the full filtered+sorted row sequence (not only the visible page) to a
single-sheet .xlsx file via pandas/openpyxl and sizes each column to fit its
longest value.

Control characters that .xlsx cannot store are dropped from headers and
cells. The workbook is written to a temporary file next to the target and
moved into place only once complete, so a failed export never replaces an
earlier good file.
"""

__all__ = [
    "DEFAULT_EXPORT_FILE_NAME",
    "DEFAULT_EXPORT_SHEET_NAME",
    "DEFAULT_WIDTH_PADDING",
    "ExportError",
    "compute_column_widths",
    "export_rows",
    "header_columns",
    "strip_illegal",
]

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_FILE_NAME = "Exported_Data.xlsx"
DEFAULT_EXPORT_SHEET_NAME = "FilteredData"
DEFAULT_WIDTH_PADDING = 2


class ExportError(Exception):
    """Raised when the export file cannot be written."""


def header_columns(rows: Sequence[Row]) -> list[str]:
    """Union of row keys in first-seen order."""
    seen: dict[str, None] = {}
    for row in rows:
        for key in row.values:
            seen.setdefault(key, None)
    return list(seen)


def strip_illegal(value: str) -> str:
    """Remove control characters that openpyxl refuses to store."""
    return ILLEGAL_CHARACTERS_RE.sub("", value) if isinstance(value, str) else value


def compute_column_widths(rows: Sequence[Row], padding: int = DEFAULT_WIDTH_PADDING) -> list[int]:
    """Display width per column position.

    width[i] = max(len(name), len(str(value)) over rows) + padding, where
    ``i`` is the key position inside each row. Widths are matched to
    columns by position, so rows are expected to share one column order.
    Empty values count as ``""``.
    """
    widths: list[int] = []
    for row in rows:
        for i, (key, value) in enumerate(row.values.items()):
            text = str(value) if value else ""
            width = max(len(key), len(text))
            if i < len(widths):
                widths[i] = max(widths[i], width)
            else:
                widths.append(width)
    return [w + padding for w in widths]


def export_rows(
    rows: Sequence[Row],
    path: str | Path = DEFAULT_EXPORT_FILE_NAME,
    *,
    sheet_name: str = DEFAULT_EXPORT_SHEET_NAME,
    padding: int = DEFAULT_WIDTH_PADDING,
) -> Path:
    """Write ``rows`` to ``path`` as one sheet with a header row.

    An empty sequence produces a sheet with neither header nor data. An
    existing file at ``path`` is overwritten.

    Raises:
        ExportError: the workbook could not be written
    """
    path = Path(path)
    columns = header_columns(rows)
    widths = compute_column_widths(rows, padding)
    records = [{key: strip_illegal(value) for key, value in row.values.items()} for row in rows]
    df = pd.DataFrame(records, columns=columns)
    df.columns = [strip_illegal(c) for c in columns]

    tmp: Path | None = None
    try:
        fd, name = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".xlsx", dir=path.parent)
        os.close(fd)
        tmp = Path(name)
        with pd.ExcelWriter(tmp, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=sheet_name, index=False)
            ws = writer.sheets[sheet_name]
            for idx, width in enumerate(widths, start=1):
                ws.column_dimensions[get_column_letter(idx)].width = width
        os.replace(tmp, path)
        tmp = None
    except Exception as e:
        raise ExportError(f"cannot write '{path}': {e}") from e
    finally:
        if tmp is not None:
            tmp.unlink(missing_ok=True)

    logger.debug("exported rows=%d columns=%d to %s", len(rows), len(columns), path)
    return path
