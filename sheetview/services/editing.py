from __future__ import annotations

import logging
from enum import Enum

from ..models.view_state import EditTarget
from ..table.store import TableStore
from .pipeline import PageView

"""Single-cell edit state machine.

Viewing --select--> Editing(cell) --commit--> Viewing

Selecting a displayed cell resolves the displayed row to its ``row_id`` right
away, so the commit does not depend on the page still looking the same. Blur
and Enter both map to :meth:`EditSession.commit`.
"""

__all__ = [
    "EditState",
    "EditSession",
]

logger = logging.getLogger(__name__)


class EditState(Enum):
    VIEWING = "viewing"
    EDITING = "editing"


class EditSession:
    """Holds at most one :class:`EditTarget` and commits it into a TableStore."""

    def __init__(self, store: TableStore) -> None:
        self.store = store
        self.target: EditTarget | None = None

    @property
    def state(self) -> EditState:
        return EditState.VIEWING if self.target is None else EditState.EDITING

    def select(self, display_row_index: int, column_key: str, page: PageView) -> EditTarget:
        """Enter edit mode for one displayed cell, replacing any previous target."""
        row_id = None
        if 0 <= display_row_index < len(page.rows):
            row_id = page.rows[display_row_index].row_id
        self.target = EditTarget(
            display_row_index=display_row_index,
            column_key=column_key,
            row_id=row_id,
        )
        return self.target

    def commit(self, new_value: str) -> bool:
        """Write ``new_value`` to the selected cell and return to viewing.

        The target is cleared even when the row could not be found.

        Returns:
            True if the table was updated
        """
        target = self.target
        if target is None:
            return False
        try:
            updated = self.store.update_cell(target.row_id, target.column_key, new_value)
        finally:
            self.target = None
        if not updated:
            logger.debug(
                "edit discarded: display_row=%d column=%s",
                target.display_row_index, target.column_key,
            )
        return updated

    def clear(self) -> None:
        self.target = None
