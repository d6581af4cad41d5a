from __future__ import annotations

import logging
import numbers
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import numpy as np
import openpyxl
import pandas as pd

from ..models.row import Row, rows_from_records
from .number_format import format_general, format_number

"""Spreadsheet ingestion.

Reads the FIRST sheet of an uploaded file using the first row as header, and
converts every cell to the string that would be displayed: dates as
``YYYY-MM-DD``, numbers through the cell's number format (``0%``,
``#,##0.00``, ``General``...), booleans as ``TRUE``/``FALSE`` and blanks as ``""``.

.xlsx/.xlsm are read cell by cell with openpyxl (cached values, not formulas)
so the number format is available; .csv is read as text with pandas.
"""

__all__ = [
    "DEFAULT_DATE_FORMAT",
    "SUPPORTED_EXTENSIONS",
    "IngestError",
    "FileSelectionError",
    "UnsupportedFileError",
    "SheetReadError",
    "cell_display",
    "header_names",
    "read_first_sheet",
    "normalize_sheet",
    "read_table",
    "to_display",
]

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%Y-%m-%d"
EXCEL_EXTENSIONS = {".xlsx", ".xlsm"}
SUPPORTED_EXTENSIONS = EXCEL_EXTENSIONS | {".csv"}


class IngestError(Exception):
    """Base class for upload failures."""

class FileSelectionError(IngestError):
    """Raised when no file was selected or the selected path does not exist."""

class UnsupportedFileError(IngestError):
    """Raised for a file extension the codec cannot read."""

class SheetReadError(IngestError):
    """Raised when the codec fails to decode the file."""


def to_display(value: Any, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Convert a decoded cell value to its display string."""
    if isinstance(value, str):
        return value
    if value is None or value is pd.NaT:
        return ""
    if isinstance(value, (datetime, date)):
        return value.strftime(date_format)
    if isinstance(value, time):
        return value.isoformat()
    # bool before numbers: bool is Integral
    if isinstance(value, (bool, np.bool_)):
        return "TRUE" if value else "FALSE"
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real):
        if pd.isna(value):
            return ""
        return format_general(float(value))
    return str(value)


def cell_display(cell: Any, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Display string of an openpyxl cell, honouring its number format."""
    value = cell.value
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return format_number(value, getattr(cell, "number_format", None))
    return to_display(value, date_format)


def header_names(cells: list[str]) -> list[str]:
    """Column names the way pandas derives them from a header row.

    Empty cells become ``Unnamed: {i}``; repeated names get ``.1``, ``.2``...
    """
    names: list[str] = []
    seen: dict[str, int] = {}
    for i, cell in enumerate(cells):
        name = cell.strip() or f"Unnamed: {i}"
        if name in seen:
            seen[name] += 1
            name = f"{name}.{seen[name]}"
        else:
            seen[name] = 0
        names.append(name)
    return names


def _read_workbook(path: Path, date_format: str) -> pd.DataFrame:
    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        if not wb.worksheets:
            return pd.DataFrame()
        ws = wb.worksheets[0]
        # dimensions recorded by some writers are stale
        ws.reset_dimensions()
        grid = [[cell_display(c, date_format) for c in row] for row in ws.iter_rows()]
    finally:
        wb.close()

    for line in grid:
        while line and line[-1] == "":
            line.pop()
    while grid and not grid[-1]:
        grid.pop()
    if not grid:
        return pd.DataFrame()

    width = max(len(line) for line in grid)
    padded = [line + [""] * (width - len(line)) for line in grid]
    return pd.DataFrame(padded[1:], columns=header_names(padded[0]), dtype=object)


def read_first_sheet(path: Path, date_format: str = DEFAULT_DATE_FORMAT) -> pd.DataFrame:
    """Decode the first sheet of ``path`` with the first row as header.

    Workbook cells come back already rendered as display strings. CSV is read
    with ``dtype=str`` and pandas' NA string conversion disabled so that text
    such as ``"NA"`` survives.
    """
    ext = path.suffix.lower()
    if ext == ".csv":
        try:
            return pd.read_csv(path, dtype=str, keep_default_na=False)
        except pd.errors.EmptyDataError:
            return pd.DataFrame()
    return _read_workbook(path, date_format)


def normalize_sheet(
    df: pd.DataFrame,
    date_format: str = DEFAULT_DATE_FORMAT,
    skip_blank_rows: bool = True,
) -> list[dict[str, str]]:
    """Turn a decoded sheet into records of column name -> display string.

    Steps:
    1. Header cells are stringified and stripped
    2. Each cell is converted with :func:`to_display`
    3. Rows whose cells are all blank are dropped (when ``skip_blank_rows``)
    """
    columns = [str(c).strip() for c in df.columns.tolist()]
    records: list[dict[str, str]] = []
    for raw in df.itertuples(index=False, name=None):
        record = {col: to_display(val, date_format) for col, val in zip(columns, raw, strict=False)}
        if skip_blank_rows and all(v == "" for v in record.values()):
            continue
        records.append(record)
    return records


def read_table(
    path: str | Path | None,
    *,
    date_format: str = DEFAULT_DATE_FORMAT,
    skip_blank_rows: bool = True,
) -> list[Row]:
    """Read an uploaded spreadsheet into Rows with stable ids.

    Raises:
        FileSelectionError: no path given, or the path does not exist
        UnsupportedFileError: extension not in SUPPORTED_EXTENSIONS
        SheetReadError: the file could not be decoded
    """
    if path is None or str(path) == "":
        raise FileSelectionError("no file selected")
    path = Path(path)
    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileError(
            f"unsupported file type '{path.suffix}' (use {', '.join(sorted(SUPPORTED_EXTENSIONS))})"
        )
    if not path.is_file():
        raise FileSelectionError(f"file not found: {path}")

    try:
        df = read_first_sheet(path, date_format)
    except Exception as e:
        raise SheetReadError(f"cannot read '{path.name}': {e}") from e

    records = normalize_sheet(df, date_format=date_format, skip_blank_rows=skip_blank_rows)
    logger.debug("read %s columns=%d rows=%d", path.name, df.shape[1], len(records))
    return rows_from_records(records)
