"""Domain models for the spreadsheet viewer.

Rows of the uploaded table, the immutable view state driving the
filter -> sort -> paginate pipeline, the edit target and the upload status.
"""

from .row import Row, rows_from_records
from .upload import UploadStatus
from .view_state import EditTarget, SortDirection, ViewState

__all__ = [
    # Table models
    "Row",
    "rows_from_records",
    # View models
    "EditTarget",
    "SortDirection",
    "ViewState",
    # Lifecycle
    "UploadStatus",
]
