"""
Local File Storage Implementation

Each key is one file in the data directory: "<key>.json".

DESIGN DECISION: Writes go to a temporary file in the same directory
which then replaces the target in one rename. A crash mid-write leaves
the previous snapshot intact, never half a snapshot.

Transient OS errors (locked file, busy network drive) are retried with
exponential backoff before being reported as PersistenceError.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from budget_ledger.services.storage.interface import (
    ByteStoreInterface,
    PersistenceError,
    StorageQuotaExceededError,
)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class FileByteStore(ByteStoreInterface):
    """
    Byte store backed by files in a local directory.

    The directory is created on first write.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        quota_bytes: Optional[int] = None,
        retry_attempts: int = 3,
        retry_wait_seconds: float = 0.5,
        suffix: str = ".json",
    ):
        self._directory = Path(directory)
        self._quota_bytes = quota_bytes
        self._suffix = suffix
        self._retrying = Retrying(
            stop=stop_after_attempt(retry_attempts),
            wait=wait_exponential(multiplier=retry_wait_seconds, max=10),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )
        self._logger = structlog.get_logger(__name__)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        """File that holds `key`."""
        if not _KEY_PATTERN.match(key):
            raise PersistenceError(f"Storage key not usable as a file name: {key!r}")
        return self._directory / f"{key}{self._suffix}"

    def read(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            return self._retrying(self._read_file, path)
        except OSError as e:
            self._logger.error("file_store_read_failed", path=str(path), error=str(e))
            raise PersistenceError(f"Could not read {path}: {e}") from e

    def write(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        if self._quota_bytes is not None and len(data) > self._quota_bytes:
            raise StorageQuotaExceededError(
                f"Snapshot of {len(data)} bytes exceeds quota of {self._quota_bytes} bytes"
            )
        try:
            self._retrying(self._write_file, path, data)
        except OSError as e:
            self._logger.error("file_store_write_failed", path=str(path), error=str(e))
            raise PersistenceError(f"Could not write {path}: {e}") from e

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceError(f"Could not delete {path}: {e}") from e
        return True

    @staticmethod
    def _read_file(path: Path) -> Optional[bytes]:
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def _write_file(self, path: Path, data: bytes) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._directory, prefix=f".{path.stem}-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
