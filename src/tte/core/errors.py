# tte/core/errors.py
"""tte.core.errors
==================
Exception hierarchy for the editor core.

Only file I/O is allowed to fail inside the core; every other out-of-range
request (cursor past the end, delete past the last row, ...) is a no-op or a
clamped result. The exceptions below are raised by `Document.open` and
`Document.save` and are always caught by the `Editor`, which turns them into
status messages.
"""

from typing import Optional


class TteError(Exception):
    """Base exception for all editor errors.

    Attributes:
        message: Human-readable error message.
        path: The file path involved, if any.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} | Path: {self.path}"
        return self.message


class FileReadError(TteError):
    """Raised when a file cannot be opened, read or decoded."""


class FileWriteError(TteError):
    """Raised when the document cannot be written to disk."""
