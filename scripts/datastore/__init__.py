"""Datastore factory and exports for the todo store.

This module builds a ready-to-use record store from environment variables
resolved against a base directory.

Environment Variables:
    TODO_DATA_DIR: Directory holding one file per record (relative or absolute).
                   Default: <base_dir>/data
    TODO_COUNTER_PATH: Counter file used for id allocation (relative or absolute).
                       Default: <base_dir>/counter.txt

Example:
    from datastore import get_datastore
    from pathlib import Path

    store = get_datastore(Path("/home/user/project"))
    record = await store.create("buy milk")
    records = await store.read_all()
"""

from __future__ import annotations

import os
from pathlib import Path

from datastore.counter import Counter
from datastore.errors import (
    DatastoreError,
    IdOverflowError,
    NotFoundError,
    ReadError,
    WriteError,
)
from datastore.protocol import Record, RecordStore
from datastore.records import FileRecordStore

__all__ = [
    "Counter",
    "DatastoreError",
    "FileRecordStore",
    "IdOverflowError",
    "NotFoundError",
    "ReadError",
    "Record",
    "RecordStore",
    "WriteError",
    "get_counter_path",
    "get_data_dir",
    "get_datastore",
]


def _resolve_safe_path(base_dir: Path, user_path: str) -> Path | None:
    """Resolve a path, ensuring it stays within base_dir.

    Args:
        base_dir: The base directory paths must stay within.
        user_path: User-provided path (relative or absolute).

    Returns:
        Resolved absolute path, or None if path escapes base_dir.
    """
    if not user_path or not user_path.strip():
        return None

    if "\x00" in user_path:
        return None

    candidate = Path(user_path)
    if not candidate.is_absolute():
        candidate = base_dir / candidate

    # Resolve to absolute, following symlinks
    resolved = candidate.resolve()
    base_resolved = base_dir.resolve()

    try:
        resolved.relative_to(base_resolved)
        return resolved
    except ValueError:
        return None  # Path escapes base directory


def _get_env_path(base_dir: Path, var_name: str, default: Path) -> Path:
    """Get a path from an environment variable, or the default.

    Raises:
        ValueError: If the variable's value escapes base_dir.
    """
    custom_path = os.environ.get(var_name, "").strip()

    if custom_path:
        safe_path = _resolve_safe_path(base_dir, custom_path)
        if safe_path is None:
            raise ValueError(f"{var_name} '{custom_path}' escapes base directory")
        return safe_path

    return default


def get_data_dir(base_dir: Path) -> Path:
    """Get the record directory from TODO_DATA_DIR or default to <base_dir>/data."""
    return _get_env_path(base_dir, "TODO_DATA_DIR", base_dir / "data")


def get_counter_path(base_dir: Path) -> Path:
    """Get the counter file from TODO_COUNTER_PATH or default to <base_dir>/counter.txt."""
    return _get_env_path(base_dir, "TODO_COUNTER_PATH", base_dir / "counter.txt")


def get_datastore(base_dir: Path) -> FileRecordStore:
    """Build and bootstrap the configured record store.

    Resolves the data directory and counter file, wires a Counter into a
    FileRecordStore and creates the data directory if it is missing.

    Args:
        base_dir: Directory relative paths are resolved against.

    Returns:
        An initialized FileRecordStore.

    Raises:
        ValueError: If a configured path escapes base_dir.
        WriteError: If the data directory cannot be created.
    """
    counter = Counter(get_counter_path(base_dir))
    store = FileRecordStore(get_data_dir(base_dir), counter)
    store.initialize()
    return store
