"""
Local storage implementations.

``JsonFileRecordStore`` is the production backend: one JSON array per
collection in the data directory, rewritten atomically on every change.
``InMemoryRecordStore`` keeps the same semantics without touching disk.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path

from qadash.auth.sessions import InMemorySessionStore
from qadash.storage.base import CollectionBackedStore, Document, StorageProvider

logger = logging.getLogger(__name__)


# =============================================================================
# JSON File Record Store
# =============================================================================


class JsonFileRecordStore(CollectionBackedStore):
    """Each collection is ``<data_dir>/<collection>.json`` holding one array."""

    def __init__(self, base_path: str = "./data"):
        super().__init__()
        self.base_path = Path(base_path)

    def _path(self, collection: str) -> Path:
        return self.base_path / f"{collection}.json"

    def _load(self, collection: str) -> list[Document]:
        path = self._path(collection)
        if not path.exists():
            return []
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"{path} does not hold a JSON array")
        return data

    def _save(self, collection: str, records: list[Document]) -> None:
        path = self._path(collection)
        self.base_path.mkdir(parents=True, exist_ok=True)
        # Write beside the target and swap it in, so readers never see half a file
        fd, tmp_name = tempfile.mkstemp(dir=self.base_path, prefix=f".{collection}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(records, fh, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug("Wrote %d records to %s", len(records), path)

    def _exists(self, collection: str) -> bool:
        return self._path(collection).exists()


# =============================================================================
# In-Memory Record Store
# =============================================================================


class InMemoryRecordStore(CollectionBackedStore):
    """Record storage for tests and throwaway runs."""

    def __init__(self, initial: dict[str, list[Document]] | None = None):
        super().__init__()
        self._data: dict[str, list[Document]] = copy.deepcopy(initial or {})

    def _load(self, collection: str) -> list[Document]:
        # Callers mutate what they load; hand out copies
        return copy.deepcopy(self._data.get(collection, []))

    def _save(self, collection: str, records: list[Document]) -> None:
        self._data[collection] = copy.deepcopy(records)

    def _exists(self, collection: str) -> bool:
        return collection in self._data


# =============================================================================
# Factory
# =============================================================================


def create_local_storage(data_dir: str = "./data") -> StorageProvider:
    """Create a StorageProvider with JSON files and in-memory sessions."""
    return StorageProvider(
        records=JsonFileRecordStore(data_dir),
        sessions=InMemorySessionStore(),
    )


def create_memory_storage(initial: dict[str, list[Document]] | None = None) -> StorageProvider:
    return StorageProvider(
        records=InMemoryRecordStore(initial),
        sessions=InMemorySessionStore(),
    )
