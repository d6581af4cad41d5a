from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..config.loader import ConfigError, load_config
from ..excel.reader import IngestError
from ..excel.writer import ExportError
from ..logging.init import log_summary, setup_logging
from ..services.session import SheetSession
from ..services.summary import render_page_readout, render_summary_line, render_table

"""CLI entrypoint.

Flow:
- Load config (optional YAML)
- Upload the given spreadsheet
- Apply search -> sort -> page selection, then cell edits on the shown page
- Print the page and a SUMMARY readout line
- Optionally export the filtered+sorted rows
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1


def _parse_edit(text: str) -> tuple[int, str, str]:
    """Parse ``ROW:COLUMN=VALUE`` (ROW is the 1-based position on the shown page)."""
    row_part, sep, rest = text.partition(":")
    column, eq, value = rest.partition("=")
    if not sep or not eq or not column:
        raise argparse.ArgumentTypeError(f"expected ROW:COLUMN=VALUE, got '{text}'")
    try:
        row = int(row_part)
    except ValueError:
        raise argparse.ArgumentTypeError(f"ROW must be an integer, got '{row_part}'") from None
    if row < 1:
        raise argparse.ArgumentTypeError(f"ROW must be >= 1, got {row}")
    return row, column, value


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{text}'") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="sheetview",
        description="Search, sort, page, edit and re-export a spreadsheet",
    )
    p.add_argument("file", help="Spreadsheet to load (.xlsx, .xlsm or .csv)")
    p.add_argument("--search", default="", help="Keep rows where any cell contains TERM (case-insensitive)")
    p.add_argument("--sort-by", metavar="COLUMN", help="Sort by COLUMN (ascending)")
    p.add_argument("--descending", action="store_true", help="With --sort-by: sort descending")
    p.add_argument("--page", type=_positive_int, default=1, help="Page to show (clamped to the page count)")
    p.add_argument(
        "--edit", type=_parse_edit, action="append", default=[], metavar="ROW:COLUMN=VALUE",
        help="Set a cell on the shown page; may be repeated",
    )
    p.add_argument(
        "--export", nargs="?", const="", default=None, metavar="PATH",
        help="Export filtered+sorted rows (default file name from config)",
    )
    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    # None -> read sys.argv; an explicit [] must not pick up pytest's own args
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    session = SheetSession(cfg)
    try:
        session.upload(args.file)
    except IngestError as e:
        logger.error(f"upload: {e}")
        return EXIT_FATAL

    if args.search:
        session.search(args.search)
    if args.sort_by:
        if args.sort_by not in session.columns:
            logger.warning(f"unknown sort column '{args.sort_by}' (values treated as empty)")
        session.sort_by(args.sort_by)
        if args.descending:
            session.sort_by(args.sort_by)
    elif args.descending:
        logger.warning("--descending ignored without --sort-by")
    if args.page != 1:
        session.go_to_page(args.page)

    for row, column, value in args.edit:
        session.select_cell(row - 1, column)
        if not session.commit_edit(value):
            logger.warning(f"edit skipped: no row {row} on page {session.state.current_page}")

    view = session.view()
    print(render_table(view, session.columns, session.state))
    log_summary(f"{render_summary_line(view)}, {render_page_readout(view)}")

    if args.export is not None:
        try:
            session.export(args.export or None)
        except ExportError as e:
            logger.error(f"export: {e}")
            return EXIT_FATAL

    return EXIT_SUCCESS
