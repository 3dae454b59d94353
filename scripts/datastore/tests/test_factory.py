"""Tests for datastore configuration and the get_datastore factory."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from datastore import (
    FileRecordStore,
    _resolve_safe_path,
    get_counter_path,
    get_data_dir,
    get_datastore,
)


# =============================================================================
# TestResolveSafePath
# =============================================================================


class TestResolveSafePath:
    """Tests for _resolve_safe_path()."""

    def test_relative_path_within_base(self, tmp_project: Path) -> None:
        result = _resolve_safe_path(tmp_project, "store/data")
        assert result == (tmp_project / "store" / "data").resolve()

    def test_absolute_path_within_base(self, tmp_project: Path) -> None:
        target = tmp_project / "counter.txt"
        assert _resolve_safe_path(tmp_project, str(target)) == target.resolve()

    def test_escaping_relative_path_returns_none(self, tmp_project: Path) -> None:
        assert _resolve_safe_path(tmp_project, "../../escape") is None

    def test_escaping_absolute_path_returns_none(self, tmp_project: Path) -> None:
        assert _resolve_safe_path(tmp_project, "/etc/passwd") is None

    def test_empty_path_returns_none(self, tmp_project: Path) -> None:
        assert _resolve_safe_path(tmp_project, "") is None
        assert _resolve_safe_path(tmp_project, "   ") is None

    def test_null_byte_returns_none(self, tmp_project: Path) -> None:
        assert _resolve_safe_path(tmp_project, "data\x00evil") is None


# =============================================================================
# TestPathConfiguration
# =============================================================================


class TestPathConfiguration:
    """Tests for get_data_dir() and get_counter_path()."""

    def test_defaults(self, tmp_project: Path) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert get_data_dir(tmp_project) == tmp_project / "data"
            assert get_counter_path(tmp_project) == tmp_project / "counter.txt"

    def test_custom_relative_paths(self, tmp_project: Path) -> None:
        env = {"TODO_DATA_DIR": "store/records", "TODO_COUNTER_PATH": "store/next.txt"}
        with patch.dict(os.environ, env, clear=True):
            assert get_data_dir(tmp_project) == (tmp_project / "store" / "records").resolve()
            assert get_counter_path(tmp_project) == (tmp_project / "store" / "next.txt").resolve()

    def test_whitespace_value_uses_default(self, tmp_project: Path) -> None:
        with patch.dict(os.environ, {"TODO_DATA_DIR": "   "}, clear=True):
            assert get_data_dir(tmp_project) == tmp_project / "data"

    def test_escaping_data_dir_raises(self, tmp_project: Path) -> None:
        with patch.dict(os.environ, {"TODO_DATA_DIR": "../../elsewhere"}, clear=True):
            with pytest.raises(ValueError, match="TODO_DATA_DIR"):
                get_data_dir(tmp_project)

    def test_escaping_counter_path_raises(self, tmp_project: Path) -> None:
        with patch.dict(os.environ, {"TODO_COUNTER_PATH": "/tmp/../counter.txt"}, clear=True):
            with pytest.raises(ValueError, match="TODO_COUNTER_PATH"):
                get_counter_path(tmp_project)


# =============================================================================
# TestGetDatastore
# =============================================================================


class TestGetDatastore:
    """Tests for get_datastore()."""

    def test_returns_initialized_store(self, tmp_project: Path) -> None:
        with patch.dict(os.environ, {}, clear=True):
            store = get_datastore(tmp_project)

        assert isinstance(store, FileRecordStore)
        assert store.data_dir.is_dir()
        assert store.counter.counter_file == tmp_project / "counter.txt"

    def test_is_idempotent(self, tmp_project: Path) -> None:
        with patch.dict(os.environ, {}, clear=True):
            get_datastore(tmp_project)
            store = get_datastore(tmp_project)
        assert store.data_dir.is_dir()

    @pytest.mark.asyncio
    async def test_store_uses_configured_paths(self, tmp_project: Path) -> None:
        env = {"TODO_DATA_DIR": "records", "TODO_COUNTER_PATH": "ids/counter.txt"}
        with patch.dict(os.environ, env, clear=True):
            store = get_datastore(tmp_project)

        record = await store.create("configured")

        assert (tmp_project / "records" / f"{record['id']}.txt").exists()
        assert (tmp_project / "ids" / "counter.txt").read_text(encoding="utf-8") == "00001"

    def test_escaping_path_raises_before_creating_anything(self, tmp_project: Path) -> None:
        with patch.dict(os.environ, {"TODO_DATA_DIR": "../outside"}, clear=True):
            with pytest.raises(ValueError):
                get_datastore(tmp_project)

        assert not (tmp_project.parent / "outside").exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
