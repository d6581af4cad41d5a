from __future__ import annotations
from pathlib import Path
from unittest.mock import patch

import pandas as pd
import pytest
from openpyxl import load_workbook
from openpyxl.utils.exceptions import IllegalCharacterError

from sheetview.excel.writer import (
    DEFAULT_EXPORT_FILE_NAME,
    ExportError,
    compute_column_widths,
    export_rows,
    header_columns,
    strip_illegal,
)
from sheetview.models.row import rows_from_records


def test_compute_column_widths_uses_longest_value_or_header():
    rows = rows_from_records([
        {"Name": "Al", "Description": "short"},
        {"Name": "Bartholomew", "Description": "x"},
    ])
    assert compute_column_widths(rows) == [len("Bartholomew") + 2, len("Description") + 2]


def test_compute_column_widths_custom_padding_and_empty_values():
    rows = rows_from_records([{"Id": "", "Code": "ABCDEFG"}])
    assert compute_column_widths(rows, padding=0) == [2, 7]


def test_compute_column_widths_empty():
    assert compute_column_widths([]) == []


def test_header_columns_union_in_first_seen_order():
    rows = rows_from_records([{"a": "1", "b": "2"}, {"a": "3", "c": "4"}])
    assert header_columns(rows) == ["a", "b", "c"]


def test_export_rows_writes_header_rows_and_widths(temp_workdir: Path):
    rows = rows_from_records([
        {"Name": "Alice", "City": "Oslo"},
        {"Name": "Bob", "City": "Kuala Lumpur"},
    ])
    out = export_rows(rows, temp_workdir / "out.xlsx")
    wb = load_workbook(out)
    assert wb.sheetnames == ["FilteredData"]
    ws = wb["FilteredData"]
    assert [[c.value for c in r] for r in ws.iter_rows()] == [
        ["Name", "City"],
        ["Alice", "Oslo"],
        ["Bob", "Kuala Lumpur"],
    ]
    assert ws.column_dimensions["A"].width == 7
    assert ws.column_dimensions["B"].width == 14


def test_export_rows_custom_sheet_name(temp_workdir: Path):
    rows = rows_from_records([{"a": "1"}])
    out = export_rows(rows, temp_workdir / "x.xlsx", sheet_name="Results", padding=5)
    ws = load_workbook(out)["Results"]
    assert ws.column_dimensions["A"].width == 6


def test_export_rows_default_file_name(temp_workdir: Path):
    out = export_rows(rows_from_records([{"a": "1"}]))
    assert out == Path(DEFAULT_EXPORT_FILE_NAME)
    assert (temp_workdir / DEFAULT_EXPORT_FILE_NAME).exists()


def test_export_rows_overwrites_existing(temp_workdir: Path):
    target = temp_workdir / "same.xlsx"
    export_rows(rows_from_records([{"a": "1"}, {"a": "2"}]), target)
    export_rows(rows_from_records([{"b": "9"}]), target)
    ws = load_workbook(target).active
    assert [[c.value for c in r] for r in ws.iter_rows()] == [["b"], ["9"]]


def test_export_empty_sequence_has_no_header(temp_workdir: Path):
    out = export_rows([], temp_workdir / "empty.xlsx")
    ws = load_workbook(out)["FilteredData"]
    assert all(c.value is None for r in ws.iter_rows() for c in r)


def test_export_to_missing_directory_raises(temp_workdir: Path):
    with pytest.raises(ExportError):
        export_rows(rows_from_records([{"a": "1"}]), temp_workdir / "no" / "such" / "dir.xlsx")


def test_export_drops_control_characters(temp_workdir: Path):
    rows = rows_from_records([{"Note\x02": "bad\x01value", "Code": "A\x1f1"}])
    out = export_rows(rows, temp_workdir / "ctrl.xlsx")
    ws = load_workbook(out).active
    assert [[c.value for c in r] for r in ws.iter_rows()] == [["Note", "Code"], ["badvalue", "A1"]]


def test_strip_illegal_keeps_tabs_and_newlines():
    assert strip_illegal("a\tb\nc\x00d") == "a\tb\ncd"


def test_failed_export_keeps_previous_file(temp_workdir: Path):
    target = temp_workdir / "keep.xlsx"
    export_rows(rows_from_records([{"a": "good"}]), target)
    before = target.read_bytes()

    with patch.object(pd.DataFrame, "to_excel", side_effect=IllegalCharacterError("bad cell")):
        with pytest.raises(ExportError) as e:
            export_rows(rows_from_records([{"a": "new"}]), target)

    assert "keep.xlsx" in str(e.value)
    assert e.value.__cause__ is not None
    assert target.read_bytes() == before
    assert sorted(p.name for p in temp_workdir.iterdir() if p.is_file()) == ["keep.xlsx"]
