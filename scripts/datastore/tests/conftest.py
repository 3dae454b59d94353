"""Shared fixtures for datastore tests.

Every fixture builds its files under pytest's tmp_path so tests never share
a counter file or a data directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from datastore.counter import Counter
from datastore.records import FileRecordStore


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create a temporary project directory for testing.

    Returns:
        Path to a clean temporary directory.
    """
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def counter_file(tmp_project: Path) -> Path:
    """Path of the counter file. The file itself is not created."""
    return tmp_project / "counter.txt"


@pytest.fixture
def data_dir(tmp_project: Path) -> Path:
    """Path of the record directory. The directory itself is not created."""
    return tmp_project / "data"


@pytest.fixture
def counter(counter_file: Path) -> Counter:
    """Create a counter over a fresh, empty counter file."""
    counter_file.write_text("", encoding="utf-8")
    return Counter(counter_file)


@pytest.fixture
def store(data_dir: Path, counter: Counter) -> FileRecordStore:
    """Create an initialized record store with an empty data directory."""
    record_store = FileRecordStore(data_dir, counter)
    record_store.initialize()
    return record_store
