from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Loading indicator with tqdm (TTY only).

Shown while an uploaded file is read and decoded. In non-TTY environments
(CI, pipes) no bar is created to avoid ANSI control sequence spam. The
indicator is always closed when loading ends, whether it succeeded or not.
"""

__all__ = [
    "LoadingIndicator",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Return True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class LoadingIndicator:
    """Indeterminate tqdm bar for one upload.

    Usage::

        with LoadingIndicator(path) as indicator:
            rows = read_table(path)
            indicator.finish(success=True, rows=len(rows))
    """

    def __init__(self, file_path: Path, *, description: str = "Loading") -> None:
        self.file_path = file_path
        self.description = f"{description} {file_path.name}"
        self.active = True
        self.success: bool | None = None

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=None,
                desc=self.description,
                unit="row",
                disable=False,
                leave=False,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def finish(self, success: bool = True, rows: int = 0) -> None:
        """Stop the indicator and record the outcome."""
        self.success = success
        if self.enabled and self.pbar is not None:
            if success:
                self.pbar.update(rows)
            self.pbar.set_postfix(status="ok" if success else "failed")
        self.close()

    def close(self) -> None:
        self.active = False
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> LoadingIndicator:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.active:
            self.finish(success=exc_type is None)
