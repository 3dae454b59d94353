"""Low-level text file helpers shared by the counter and the record store."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

# mkstemp creates 0600 files; new files get the usual umask-derived mode instead
_UMASK = os.umask(0)
os.umask(_UMASK)


def read_text(path: Path) -> str:
    """Read a UTF-8 file without newline translation."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def _target_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        return 0o666 & ~_UMASK


def atomic_write_text(path: Path, text: str) -> None:
    """Atomically replace the content of path with text.

    Writes to a temporary file in the same directory and moves it over the
    destination with os.replace, so readers see either the old or the new
    content and never a partial write. An existing destination keeps its
    permission bits; a new one gets the default mode for the process umask.

    Raises:
        OSError: If the temp file cannot be written or moved into place.
    """
    temp_fd, temp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.chmod(temp_path, _target_mode(path))
        os.replace(temp_path, path)  # Atomic on POSIX
    except (OSError, ValueError):
        # Clean up temp file on failure
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def exclusive_write_text(path: Path, text: str) -> None:
    """Write text to a file that must not exist yet.

    Raises:
        FileExistsError: If path already exists. The existing file is untouched.
        OSError: If the write fails. Any partially written file is removed.
    """
    f = open(path, "x", encoding="utf-8", newline="")
    try:
        with f:
            f.write(text)
    except (OSError, ValueError):
        # Remove the partial file so the id does not look like a record
        try:
            os.unlink(path)
        except OSError:
            pass
        raise
