"""
Storage abstraction layer.

All persistence goes through this interface. Records are plain dicts in
their wire form (camelCase keys, integer ``id``); services convert them to
and from the models in ``qadash.core.models``.

The interface is key-addressed: callers read, write and delete single
records by id. Whole-collection access (``read_all``/``write_all``) remains
for sweeps such as reconciliation.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from qadash.auth.sessions import SessionStore
from qadash.core.errors import ConflictError


Document = dict[str, Any]


class DuplicateRecordError(ConflictError):
    """A record with this id already exists in the collection."""


# =============================================================================
# Collection Names
# =============================================================================


class Collections:
    """Standard collection names. Each maps to one file in the data directory."""

    USERS = "users"
    TEAM_MEMBERS = "team-members"
    TASKS = "tasks"
    WORK_LOGS = "work-logs"

    ALL = (USERS, TEAM_MEMBERS, TASKS, WORK_LOGS)


# =============================================================================
# Record Store Interface
# =============================================================================


class RecordStore(ABC):
    """
    Storage for the dashboard's record collections.

    Local Implementation: one JSON array file per collection
    Test Implementation: in-memory lists
    """

    @abstractmethod
    async def get(self, collection: str, id: int) -> Document | None:
        """Get a record by id."""
        pass

    @abstractmethod
    async def list(self, collection: str) -> list[Document]:
        """All records of a collection, in insertion order."""
        pass

    @abstractmethod
    async def create(self, collection: str, data: Document) -> Document:
        """
        Append a record. Assigns the next free id when ``data`` has none.

        Raises:
            DuplicateRecordError: ``data["id"]`` is already taken
        """
        pass

    @abstractmethod
    async def put(self, collection: str, record: Document) -> None:
        """Insert or replace the record with ``record["id"]``."""
        pass

    @abstractmethod
    async def delete(self, collection: str, id: int) -> bool:
        pass

    @abstractmethod
    async def next_id(self, *collections: str) -> int:
        """An id unused in every one of the given collections."""
        pass

    @abstractmethod
    async def exists(self, collection: str) -> bool:
        """Whether the collection has ever been written."""
        pass

    @abstractmethod
    async def read_all(self, collection: str) -> list[Document]:
        pass

    @abstractmethod
    async def write_all(self, collection: str, records: list[Document]) -> None:
        """Replace the whole collection."""
        pass


class CollectionBackedStore(RecordStore):
    """
    RecordStore over a load/save-a-whole-collection backend.

    Each read-modify-write holds a per-collection lock, so writes to
    different records never overwrite each other within the process.
    Concurrent writes to the same record are still last-writer-wins.
    """

    def __init__(self):
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()
        self.write_count = 0

    # -------------------------------------------------------------------------
    # Backend hooks
    # -------------------------------------------------------------------------

    @abstractmethod
    def _load(self, collection: str) -> list[Document]:
        pass

    @abstractmethod
    def _save(self, collection: str, records: list[Document]) -> None:
        pass

    @abstractmethod
    def _exists(self, collection: str) -> bool:
        pass

    # -------------------------------------------------------------------------
    # RecordStore
    # -------------------------------------------------------------------------

    def _lock(self, collection: str) -> threading.RLock:
        with self._locks_guard:
            if collection not in self._locks:
                self._locks[collection] = threading.RLock()
            return self._locks[collection]

    def _write(self, collection: str, records: list[Document]) -> None:
        self._save(collection, records)
        self.write_count += 1

    async def get(self, collection: str, id: int) -> Document | None:
        with self._lock(collection):
            for record in self._load(collection):
                if record.get("id") == id:
                    return record
        return None

    async def list(self, collection: str) -> list[Document]:
        with self._lock(collection):
            return self._load(collection)

    async def create(self, collection: str, data: Document) -> Document:
        with self._lock(collection):
            records = self._load(collection)
            ids = {r.get("id") for r in records}

            record = dict(data)
            if record.get("id") is None:
                record["id"] = max((i for i in ids if isinstance(i, int)), default=0) + 1
            elif record["id"] in ids:
                raise DuplicateRecordError(f"Record {record['id']} already exists in {collection}")

            records.append(record)
            self._write(collection, records)
            return record

    async def put(self, collection: str, record: Document) -> None:
        with self._lock(collection):
            records = self._load(collection)
            for index, existing in enumerate(records):
                if existing.get("id") == record["id"]:
                    records[index] = record
                    break
            else:
                records.append(record)
            self._write(collection, records)

    async def delete(self, collection: str, id: int) -> bool:
        with self._lock(collection):
            records = self._load(collection)
            remaining = [r for r in records if r.get("id") != id]
            if len(remaining) == len(records):
                return False
            self._write(collection, remaining)
            return True

    async def next_id(self, *collections: str) -> int:
        highest = 0
        for collection in collections:
            with self._lock(collection):
                for record in self._load(collection):
                    record_id = record.get("id")
                    if isinstance(record_id, int) and record_id > highest:
                        highest = record_id
        return highest + 1

    async def exists(self, collection: str) -> bool:
        return self._exists(collection)

    async def read_all(self, collection: str) -> list[Document]:
        return await self.list(collection)

    async def write_all(self, collection: str, records: list[Document]) -> None:
        with self._lock(collection):
            self._write(collection, list(records))


# =============================================================================
# Storage Provider (dependency injection container)
# =============================================================================


class StorageProvider(BaseModel):
    """
    Container for the storage backends.

    Initialize once at app startup with appropriate implementations.
    Services receive what they need from it without knowing the
    underlying implementation.
    """

    model_config = {"arbitrary_types_allowed": True}

    records: RecordStore
    sessions: SessionStore
