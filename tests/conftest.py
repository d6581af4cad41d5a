# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pandas as pd
import pytest

from sheetview.logging.init import reset_logging
from sheetview.models.row import Row, rows_from_records


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handlers bind sys.stdout at creation; capsys swaps it per test
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """page_size: 5
date_format: "%d/%m/%Y"
skip_blank_rows: true
export:
  file_name: out.xlsx
  sheet_name: Results
  width_padding: 3
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "sheetview.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_excel(path: Path, rows: list[list[object]], sheet: str = "Sheet1", extra_sheets: dict | None = None) -> Path:
    """Write ``rows`` (first row = header) to an .xlsx file without pandas' own header."""
    with pd.ExcelWriter(path) as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        for name, extra in (extra_sheets or {}).items():
            pd.DataFrame(extra).to_excel(writer, sheet_name=name, header=False, index=False)
    return path


@pytest.fixture()
def people_rows() -> list[list[object]]:
    """25 data rows x 3 columns; three rows mention Smith in different cases."""
    first = [
        "Alice", "Bob", "Carol", "Dave", "Eve", "Frank", "Grace", "Heidi", "Ivan", "Judy",
        "Mallory", "Niaj", "Olivia", "Peggy", "Rupert", "Sybil", "Trent", "Victor", "Walter", "Xena",
        "Yusuf", "Zoe", "Quinn", "Uma", "Kim",
    ]
    header = ["Name", "City", "Age"]
    body: list[list[object]] = []
    for i, name in enumerate(first):
        city = ["Oslo", "Lima", "Rome", "Kyiv", "Pune"][i % 5]
        body.append([name, city, 20 + i])
    body[3][0] = "Dave Smith"
    body[10][1] = "SMITHTOWN"
    body[17][0] = "victor smith"
    return [header] + body


@pytest.fixture()
def people_xlsx(temp_workdir: Path, people_rows) -> Path:
    return make_excel(temp_workdir / "data" / "people.xlsx", people_rows)


@pytest.fixture()
def sample_rows() -> list[Row]:
    return rows_from_records([
        {"Name": "Alice", "Item": "item10", "Qty": "10"},
        {"Name": "bob", "Item": "item2", "Qty": "2"},
        {"Name": "Carol", "Item": "Item1", "Qty": ""},
        {"Name": "Dave Smith", "Item": "item2", "Qty": "7"},
    ])
