"""File-backed id counter for the todo datastore.

The counter file holds the last issued id as a zero-padded decimal string
with no trailing newline (e.g., "00142"). A missing or blank file counts as
zero. Allocation is serialised within the process by a threading.Lock taken in
the worker thread. Two processes sharing one counter file are not protected
against each other.
"""

from __future__ import annotations

import asyncio
import logging
import re
import threading
from pathlib import Path

from datastore.errors import IdOverflowError, ReadError, WriteError
from datastore.fileio import atomic_write_text, read_text

logger = logging.getLogger(__name__)

ID_WIDTH: int = 5
MAX_ID: int = 10**ID_WIDTH - 1

_COUNTER_PATTERN = re.compile(r"[0-9]+")


def format_id(value: int) -> str:
    """Format an integer as a fixed-width zero-padded id.

    Raises:
        ValueError: If value is negative.
        IdOverflowError: If value does not fit in ID_WIDTH digits.
    """
    if value < 0:
        raise ValueError(f"Id must be non-negative, got {value}")
    if value > MAX_ID:
        raise IdOverflowError(f"Id {value} exceeds maximum {MAX_ID}")
    return f"{value:0{ID_WIDTH}d}"


def parse_counter(raw: str, path: Path | None = None) -> int:
    """Parse counter file content into an integer.

    Surrounding whitespace is ignored and blank content means zero.

    Raises:
        ReadError: If the content is not a non-negative decimal integer.
    """
    stripped = raw.strip()
    if not stripped:
        return 0
    if not _COUNTER_PATTERN.fullmatch(stripped):
        raise ReadError(f"Counter content {stripped!r} is not a valid id", path)
    return int(stripped)


class Counter:
    """Allocates unique, strictly increasing ids from a counter file.

    Attributes:
        counter_file: The Path to the counter file.

    Example:
        counter = Counter(Path("/home/user/project/counter.txt"))
        new_id = await counter.next_id()  # "00001"
    """

    def __init__(self, counter_file: Path) -> None:
        self.counter_file = counter_file
        self._lock = threading.Lock()

    def _read_value(self) -> int:
        try:
            raw = read_text(self.counter_file)
        except FileNotFoundError:
            return 0
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(
                f"Cannot read counter file {self.counter_file}: {e}",
                self.counter_file,
            ) from e
        return parse_counter(raw, self.counter_file)

    def _write_value(self, formatted: str) -> None:
        try:
            self.counter_file.parent.mkdir(parents=True, exist_ok=True)
            atomic_write_text(self.counter_file, formatted)
        except OSError as e:
            raise WriteError(
                f"Cannot write counter file {self.counter_file}: {e}",
                self.counter_file,
            ) from e

    def _allocate(self) -> str:
        with self._lock:
            new_id = format_id(self._read_value() + 1)
            self._write_value(new_id)
        return new_id

    async def next_id(self) -> str:
        """Allocate the next id and persist it.

        The read, increment and write happen under a lock, so concurrent
        callers in this process never receive the same id. The counter file
        is only replaced once the new value is fully written.

        Returns:
            The newly issued id as a zero-padded string.

        Raises:
            ReadError: If the counter file cannot be read or parsed.
            WriteError: If the new value cannot be persisted.
            IdOverflowError: If the counter is already at MAX_ID.
        """
        new_id = await asyncio.to_thread(self._allocate)
        logger.debug("Allocated id %s from %s", new_id, self.counter_file)
        return new_id
