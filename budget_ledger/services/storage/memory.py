"""In-memory byte store, for tests and sessions that should not touch disk."""

from typing import Optional

from budget_ledger.services.storage.interface import (
    ByteStoreInterface,
    StorageQuotaExceededError,
)


class InMemoryByteStore(ByteStoreInterface):
    """Dict-backed byte store with an optional size quota."""

    def __init__(self, quota_bytes: Optional[int] = None):
        self._data: dict[str, bytes] = {}
        self._quota_bytes = quota_bytes

    def read(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def write(self, key: str, data: bytes) -> None:
        if self._quota_bytes is not None and len(data) > self._quota_bytes:
            raise StorageQuotaExceededError(
                f"Value of {len(data)} bytes exceeds quota of {self._quota_bytes} bytes"
            )
        self._data[key] = bytes(data)

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._data)
