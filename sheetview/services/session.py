from __future__ import annotations

import logging
from pathlib import Path

from ..config.loader import ViewerConfig
from ..excel.reader import IngestError, read_table
from ..excel.writer import export_rows
from ..models.upload import UploadStatus
from ..models.view_state import EditTarget, ViewState
from ..table.store import TableStore
from .editing import EditSession, EditState
from .pipeline import PageView, ViewPipeline
from .progress import LoadingIndicator

"""Viewer session: wires ingestion, table store, view pipeline, editing and export.

One session corresponds to one browser tab of the original tool: a single
table, a single ViewState and at most one cell in edit mode.
"""

__all__ = [
    "SheetSession",
]

logger = logging.getLogger(__name__)


class SheetSession:
    """Facade over the viewer stages.

    Upload lifecycle: IDLE -> LOADING -> READY | FAILED. A failed upload leaves
    the previous table untouched; the next successful upload recovers.
    """

    def __init__(self, config: ViewerConfig | None = None) -> None:
        self.config = config or ViewerConfig()
        self.store = TableStore()
        self.pipeline = ViewPipeline(self.store, page_size=self.config.page_size)
        self.editor = EditSession(self.store)
        self.state = ViewState.initial()
        self.status = UploadStatus.IDLE
        self.last_error: IngestError | None = None
        self.source: Path | None = None

    # --- ingestion ---
    def upload(self, path: str | Path | None) -> int:
        """Replace the table with the contents of ``path``.

        Returns:
            Number of rows loaded

        Raises:
            IngestError: the file could not be selected or decoded
        """
        self.status = UploadStatus.LOADING
        with LoadingIndicator(Path(path or "")) as indicator:
            try:
                rows = read_table(
                    path,
                    date_format=self.config.date_format,
                    skip_blank_rows=self.config.skip_blank_rows,
                )
            except IngestError as e:
                indicator.finish(success=False)
                self.status = UploadStatus.FAILED
                self.last_error = e
                logger.debug("upload failed: %s", e)
                raise
            indicator.finish(success=True, rows=len(rows))

        self.store.load(rows)
        self.state = ViewState.initial()
        self.editor.clear()
        self.status = UploadStatus.READY
        self.last_error = None
        self.source = Path(path)
        logger.info(f"loaded {len(rows)} rows from {self.source.name}")
        return len(rows)

    # --- view state ---
    @property
    def columns(self) -> list[str]:
        return self.store.columns

    def view(self) -> PageView:
        return self.pipeline.view(self.state)

    def search(self, term: str) -> PageView:
        self.state = self.state.with_search(term)
        return self.view()

    def sort_by(self, key: str) -> PageView:
        self.state = self.state.toggle_sort(key)
        return self.view()

    def next_page(self) -> PageView:
        self.state = self.state.next_page(self.view().total_pages)
        return self.view()

    def prev_page(self) -> PageView:
        self.state = self.state.prev_page()
        return self.view()

    def go_to_page(self, page: int) -> PageView:
        self.state = self.state.with_page(page, self.view().total_pages)
        return self.view()

    # --- editing ---
    @property
    def edit_state(self) -> EditState:
        return self.editor.state

    def select_cell(self, display_row_index: int, column_key: str) -> EditTarget:
        return self.editor.select(display_row_index, column_key, self.view())

    def commit_edit(self, new_value: str) -> bool:
        return self.editor.commit(new_value)

    # --- export ---
    def export(self, path: str | Path | None = None) -> Path:
        """Write the whole filtered+sorted sequence, ignoring pagination."""
        target = Path(path) if path is not None else Path(self.config.export.file_name)
        ordered = self.view().ordered_rows
        written = export_rows(
            ordered,
            target,
            sheet_name=self.config.export.sheet_name,
            padding=self.config.export.width_padding,
        )
        logger.info(f"exported {len(ordered)} rows to {written}")
        return written
