"""
Services package.

The persistence gateway lives in budget_ledger.services.persistence and is
imported from there; it depends on the ledger store, which in turn depends
on the storage services below.
"""

from budget_ledger.services.storage import (
    ByteStoreInterface,
    CorruptSnapshotError,
    FileByteStore,
    InMemoryByteStore,
    PersistenceError,
    StorageQuotaExceededError,
)

__all__ = [
    "ByteStoreInterface",
    "CorruptSnapshotError",
    "FileByteStore",
    "InMemoryByteStore",
    "PersistenceError",
    "StorageQuotaExceededError",
]
