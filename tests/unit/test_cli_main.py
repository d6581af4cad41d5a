from __future__ import annotations
from pathlib import Path

import pytest
from openpyxl import load_workbook

from sheetview.cli import EXIT_FATAL, EXIT_SUCCESS
from sheetview.cli import main as cli_main


def test_cli_shows_first_page(people_xlsx: Path, capsys):
    code = cli_main([str(people_xlsx)])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "INFO loaded 25 rows from people.xlsx" in out
    assert "Name ↕" in out
    assert "Age ↕" in out
    assert "SUMMARY Showing 10 of 25 records, Page 1 of 3" in out


def test_cli_search_sort_page(people_xlsx: Path, capsys):
    code = cli_main([str(people_xlsx), "--search", "SMITH", "--sort-by", "Name", "--descending"])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "Name ▼" in out
    assert "SUMMARY Showing 3 of 3 records, Page 1 of 1" in out
    body = [line for line in out.splitlines() if line[:1].isdigit()]
    assert [line.split(" | ")[1].strip() for line in body] == ["victor smith", "Mallory", "Dave Smith"]


def test_cli_page_is_clamped(people_xlsx: Path, capsys):
    code = cli_main([str(people_xlsx), "--page", "7"])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "SUMMARY Showing 5 of 25 records, Page 3 of 3" in out


def test_cli_edit_and_export(people_xlsx: Path, temp_workdir: Path, capsys):
    target = temp_workdir / "result.xlsx"
    code = cli_main([
        str(people_xlsx), "--page", "2", "--edit", "1:City=Bergen", "--export", str(target),
    ])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    shown = [[c.strip() for c in line.split(" | ")] for line in out.splitlines() if line.startswith("11 ")]
    assert shown == [["11", "Mallory", "Bergen", "30"]]
    ws = load_workbook(target)["FilteredData"]
    rows = [[c.value for c in r] for r in ws.iter_rows()]
    assert len(rows) == 26
    assert rows[11] == ["Mallory", "Bergen", "30"]


def test_cli_edit_outside_page_warns(people_xlsx: Path, capsys):
    code = cli_main([str(people_xlsx), "--edit", "42:City=Nowhere"])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "WARN edit skipped: no row 42 on page 1" in out


def test_cli_export_default_name(people_xlsx: Path, temp_workdir: Path, capsys):
    code = cli_main([str(people_xlsx), "--export"])
    assert code == EXIT_SUCCESS
    assert (temp_workdir / "Exported_Data.xlsx").exists()


def test_cli_config_from_default_location(people_xlsx: Path, write_config: Path, capsys):
    code = cli_main([str(people_xlsx)])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "SUMMARY Showing 5 of 25 records, Page 1 of 5" in out


def test_cli_unknown_sort_column_warns(people_xlsx: Path, capsys):
    code = cli_main([str(people_xlsx), "--sort-by", "Salary"])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "WARN unknown sort column 'Salary'" in out


def test_cli_missing_file(temp_workdir: Path, capsys):
    code = cli_main([str(temp_workdir / "missing.xlsx")])
    out = capsys.readouterr().out
    assert code == EXIT_FATAL
    assert "ERROR upload: file not found:" in out


def test_cli_bad_config(people_xlsx: Path, temp_workdir: Path, capsys):
    cfg = temp_workdir / "config" / "bad.yml"
    cfg.write_text("page_size: -3\n", encoding="utf-8")
    code = cli_main([str(people_xlsx), "--config", str(cfg)])
    out = capsys.readouterr().out
    assert code == EXIT_FATAL
    assert "ERROR config: config validation failed" in out


@pytest.mark.parametrize("bad", ["City=X", "x:City=X", "0:City=X", "1:City"])
def test_cli_rejects_malformed_edit(people_xlsx: Path, bad: str):
    with pytest.raises(SystemExit) as e:
        cli_main([str(people_xlsx), "--edit", bad])
    assert e.value.code == 2


def test_cli_debug_mode(people_xlsx: Path, capsys):
    code = cli_main([str(people_xlsx), "--debug"])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS
    assert "DEBUG debug mode enabled" in out


def test_cli_help_describes_descending(monkeypatch, capsys):
    monkeypatch.setenv("COLUMNS", "200")
    with pytest.raises(SystemExit) as e:
        cli_main(["--help"])
    assert e.value.code == 0
    out = " ".join(capsys.readouterr().out.split())
    assert "With --sort-by: sort descending" in out
    assert "toggle" not in out
