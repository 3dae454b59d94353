"""One-file-per-record storage for todos.

Each record lives in ``<data_dir>/<id>.txt`` and holds the raw record text.
The directory listing is the only index: a record exists exactly when its
file exists. New ids come from a Counter; no other operation touches it.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from pathlib import Path

from datastore.counter import Counter
from datastore.errors import NotFoundError, ReadError, WriteError
from datastore.fileio import atomic_write_text, exclusive_write_text, read_text
from datastore.protocol import Record

logger = logging.getLogger(__name__)

RECORD_SUFFIX: str = ".txt"

_ID_PATTERN = re.compile(r"[0-9]{5}")
_FILENAME_PATTERN = re.compile(r"([0-9]{5})\.txt")


def parse_record_filename(name: str) -> str | None:
    """Classify a directory entry name.

    Returns:
        The record id for names like "00042.txt", or None for anything else
        (temp files, stray files).
    """
    match = _FILENAME_PATTERN.fullmatch(name)
    if match is None:
        return None
    return match.group(1)


class FileRecordStore:
    """Record store keeping one UTF-8 text file per record.

    Attributes:
        data_dir: Directory holding the record files.
        counter: Counter used to allocate ids for new records.

    Example:
        store = FileRecordStore(Path("data"), Counter(Path("counter.txt")))
        store.initialize()
        record = await store.create("buy milk")
        await store.update(record["id"], "buy oat milk")
    """

    def __init__(self, data_dir: Path, counter: Counter) -> None:
        self.data_dir = data_dir
        self.counter = counter

    def path_for(self, record_id: str) -> Path:
        """Return the file path backing record_id.

        Raises:
            NotFoundError: If record_id is not a well-formed id. Such an id
                can never have a backing file.
        """
        if not isinstance(record_id, str) or not _ID_PATTERN.fullmatch(record_id):
            raise NotFoundError(f"No record with id {record_id!r}")
        return self.data_dir / f"{record_id}{RECORD_SUFFIX}"

    def initialize(self) -> None:
        """Ensure the data directory exists. Idempotent."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteError(
                f"Cannot create data directory {self.data_dir}: {e}", self.data_dir
            ) from e

    # -- blocking helpers, run via asyncio.to_thread ------------------------

    def _write_new(self, path: Path, text: str) -> None:
        try:
            exclusive_write_text(path, text)
        except FileExistsError as e:
            raise WriteError(f"Record file {path} already exists", path) from e
        except (OSError, UnicodeEncodeError) as e:
            raise WriteError(f"Cannot write record file {path}: {e}", path) from e

    def _read(self, record_id: str, path: Path) -> str:
        try:
            return read_text(path)
        except FileNotFoundError as e:
            raise NotFoundError(f"No record with id {record_id!r}", path) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(f"Cannot read record file {path}: {e}", path) from e

    def _list_ids(self) -> list[str]:
        try:
            names = os.listdir(self.data_dir)
        except OSError as e:
            raise ReadError(
                f"Cannot list data directory {self.data_dir}: {e}", self.data_dir
            ) from e

        ids = []
        for name in names:
            record_id = parse_record_filename(name)
            if record_id is None:
                logger.debug("Skipping unrecognized entry %s in %s", name, self.data_dir)
                continue
            ids.append(record_id)
        return sorted(ids)

    def _read_all(self) -> list[Record]:
        records: list[Record] = []
        for record_id in self._list_ids():
            try:
                text = self._read(record_id, self.path_for(record_id))
            except NotFoundError:
                # Deleted between listing and reading
                continue
            records.append({"id": record_id, "text": text})
        return records

    def _replace(self, record_id: str, path: Path, text: str) -> None:
        try:
            path.stat()
        except FileNotFoundError as e:
            raise NotFoundError(f"No record with id {record_id!r}", path) from e
        except OSError as e:
            raise ReadError(f"Cannot stat record file {path}: {e}", path) from e
        try:
            atomic_write_text(path, text)
        except (OSError, UnicodeEncodeError) as e:
            raise WriteError(f"Cannot write record file {path}: {e}", path) from e

    def _remove(self, record_id: str, path: Path) -> None:
        try:
            os.unlink(path)
        except FileNotFoundError as e:
            raise NotFoundError(f"No record with id {record_id!r}", path) from e
        except OSError as e:
            raise WriteError(f"Cannot remove record file {path}: {e}", path) from e

    # -- public API ---------------------------------------------------------

    async def create(self, text: str) -> Record:
        """Allocate a new id and write text under it.

        A failed write leaves the allocated id consumed; the counter is not
        rolled back, so the id sequence may contain gaps.

        Raises:
            ReadError, WriteError, IdOverflowError: From the counter, unchanged.
            WriteError: If the record file cannot be written.
        """
        record_id = await self.counter.next_id()
        path = self.path_for(record_id)
        await asyncio.to_thread(self._write_new, path, text)
        logger.debug("Created record %s", record_id)
        return {"id": record_id, "text": text}

    async def read_one(self, record_id: str) -> Record:
        """Return the record stored under record_id, text exactly as stored."""
        path = self.path_for(record_id)
        text = await asyncio.to_thread(self._read, record_id, path)
        return {"id": record_id, "text": text}

    async def read_all(self) -> list[Record]:
        """Return every record sorted by id.

        Directory listing order is filesystem defined; sorting by the
        zero-padded id gives allocation order.
        """
        return await asyncio.to_thread(self._read_all)

    async def update(self, record_id: str, text: str) -> Record:
        """Replace the text of an existing record. Never creates a record."""
        path = self.path_for(record_id)
        await asyncio.to_thread(self._replace, record_id, path, text)
        logger.debug("Updated record %s", record_id)
        return {"id": record_id, "text": text}

    async def delete(self, record_id: str) -> None:
        """Remove the record stored under record_id."""
        path = self.path_for(record_id)
        await asyncio.to_thread(self._remove, record_id, path)
        logger.debug("Deleted record %s", record_id)
