"""Exception types raised by the datastore.

Every failure surfaced by the counter or the record store is one of these,
so callers can tell a missing record apart from an I/O failure.
"""

from __future__ import annotations

from pathlib import Path


class DatastoreError(Exception):
    """Base class for all datastore failures.

    Attributes:
        path: The file or directory involved, when there is one.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class NotFoundError(DatastoreError, LookupError):
    """The requested record id has no backing file."""


class ReadError(DatastoreError):
    """Reading a record, the counter, or the directory listing failed."""


class WriteError(DatastoreError):
    """Writing, replacing or removing a file failed."""


class IdOverflowError(DatastoreError, OverflowError):
    """The next id does not fit in the fixed zero-padded width."""
