"""Protocols and type definitions for record stores.

This module defines the record structure and the interface every record
store implements.
"""

from __future__ import annotations

from typing import Protocol, TypedDict


class Record(TypedDict):
    """Structure for a single stored todo.

    Attributes:
        id: Zero-padded five digit identifier (e.g., "00042").
        text: The record body, stored and returned verbatim.
    """

    id: str
    text: str


class RecordStore(Protocol):
    """Protocol for todo record stores.

    All operations except initialize are coroutines.
    """

    def initialize(self) -> None:
        """Create the backing storage if it does not exist yet.

        Safe to call more than once.

        Raises:
            WriteError: If the storage location cannot be created.
        """
        ...

    async def create(self, text: str) -> Record:
        """Allocate a fresh id and persist text under it.

        Args:
            text: The record body.

        Returns:
            The new Record.

        Raises:
            ReadError: If the id counter cannot be read or parsed.
            WriteError: If the counter or the record cannot be written.
            IdOverflowError: If no more ids are available.
        """
        ...

    async def read_one(self, record_id: str) -> Record:
        """Load a single record.

        Raises:
            NotFoundError: If no record exists for record_id.
            ReadError: If the record exists but cannot be read.
        """
        ...

    async def read_all(self) -> list[Record]:
        """Load every record, ordered by id.

        Returns:
            A list of Records. Empty list if the store is empty.

        Raises:
            ReadError: If the storage cannot be listed or a record cannot be read.
        """
        ...

    async def update(self, record_id: str, text: str) -> Record:
        """Replace the body of an existing record.

        Raises:
            NotFoundError: If no record exists for record_id. Nothing is created.
            WriteError: If the new body cannot be written.
        """
        ...

    async def delete(self, record_id: str) -> None:
        """Remove a record.

        Raises:
            NotFoundError: If no record exists for record_id.
            WriteError: If the record cannot be removed.
        """
        ...
