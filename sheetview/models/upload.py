from __future__ import annotations

from enum import Enum

"""Upload lifecycle status.

State transitions: idle -> loading -> (ready | failed). A failed upload is
recoverable: the next successful upload moves the session back to ready.
"""

__all__ = [
    "UploadStatus",
]


class UploadStatus(Enum):
    """Status of the most recent upload.

    - IDLE: nothing uploaded yet
    - LOADING: file read / decode in progress
    - READY: table populated from the last upload
    - FAILED: last upload failed; the table keeps its previous contents
    """
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"
