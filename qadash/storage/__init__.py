"""
Storage abstractions.

- RecordStore → JSON array files (JsonFileRecordStore) or memory
- SessionStore → process memory (see qadash.auth.sessions)
"""

from qadash.storage.base import (
    Collections,
    CollectionBackedStore,
    DuplicateRecordError,
    RecordStore,
    StorageProvider,
)
from qadash.storage.local import (
    InMemoryRecordStore,
    JsonFileRecordStore,
    create_local_storage,
    create_memory_storage,
)
from qadash.storage.seed import seed_default_data

__all__ = [
    "Collections",
    "CollectionBackedStore",
    "DuplicateRecordError",
    "RecordStore",
    "StorageProvider",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "create_local_storage",
    "create_memory_storage",
    "seed_default_data",
]
