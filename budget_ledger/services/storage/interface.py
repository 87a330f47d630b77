"""
Abstract Storage Interface

DESIGN DECISION: The durable medium is a plain key-value byte store.
This allows us to:
1. Keep snapshots on disk in normal use
2. Use in-memory storage for testing
3. Swap in another medium without touching the ledger

The interface is intentionally tiny - the ledger writes one snapshot
under one fixed key.
"""

from abc import ABC, abstractmethod
from typing import Optional


class ByteStoreInterface(ABC):
    """
    Abstract interface for the durable byte store.

    Any medium (local files, memory, ...) must implement these methods.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[bytes]:
        """
        Read the bytes stored under `key`.

        Returns:
            The stored bytes, or None if nothing is stored yet

        Raises:
            PersistenceError: If the medium cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, data: bytes) -> None:
        """
        Store `data` under `key`, replacing any previous value.

        A failed write leaves the previous value in place.

        Raises:
            StorageQuotaExceededError: If the medium refuses the size
            PersistenceError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove the value under `key`.

        Returns:
            True if something was removed
        """
        pass


class PersistenceError(IOError):
    """Base exception for durable storage failures."""
    pass


class StorageQuotaExceededError(PersistenceError):
    """The medium rejected a write because it is too large."""
    pass


class CorruptSnapshotError(PersistenceError):
    """Stored bytes are not a valid ledger snapshot."""
    pass
