"""
Storage Services Package

Provides the abstract byte store interface and its implementations.
Local files are the normal medium; memory is used by tests.
"""

from budget_ledger.services.storage.interface import (
    ByteStoreInterface,
    CorruptSnapshotError,
    PersistenceError,
    StorageQuotaExceededError,
)
from budget_ledger.services.storage.file_store import FileByteStore
from budget_ledger.services.storage.memory import InMemoryByteStore

__all__ = [
    # Interface
    "ByteStoreInterface",
    # Exceptions
    "CorruptSnapshotError",
    "PersistenceError",
    "StorageQuotaExceededError",
    # Implementations
    "FileByteStore",
    "InMemoryByteStore",
]
