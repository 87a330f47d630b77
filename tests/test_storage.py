"""Tests for the byte store implementations."""

import os

import pytest

from budget_ledger.services.storage import (
    FileByteStore,
    InMemoryByteStore,
    PersistenceError,
    StorageQuotaExceededError,
)


class TestInMemoryByteStore:
    """Tests for the dict-backed store."""

    def test_read_write_delete(self):
        store = InMemoryByteStore()
        assert store.read("k") is None
        store.write("k", b"data")
        assert store.read("k") == b"data"
        assert store.keys() == ["k"]
        assert store.delete("k") is True
        assert store.delete("k") is False

    def test_quota(self):
        store = InMemoryByteStore(quota_bytes=4)
        store.write("k", b"1234")
        with pytest.raises(StorageQuotaExceededError):
            store.write("k", b"12345")
        assert store.read("k") == b"1234"


class TestFileByteStore:
    """Tests for the local file store."""

    def test_missing_key_reads_none(self, tmp_path):
        assert FileByteStore(tmp_path / "data").read("ledger") is None

    def test_write_creates_directory(self, tmp_path):
        store = FileByteStore(tmp_path / "data")
        store.write("ledger", b"{}")
        assert (tmp_path / "data" / "ledger.json").read_bytes() == b"{}"
        assert store.read("ledger") == b"{}"

    def test_overwrite(self, tmp_path):
        store = FileByteStore(tmp_path)
        store.write("ledger", b"first")
        store.write("ledger", b"second")
        assert store.read("ledger") == b"second"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["ledger.json"]

    def test_delete(self, tmp_path):
        store = FileByteStore(tmp_path)
        store.write("ledger", b"x")
        assert store.delete("ledger") is True
        assert store.delete("ledger") is False

    def test_unsafe_key_rejected(self, tmp_path):
        with pytest.raises(PersistenceError):
            FileByteStore(tmp_path).write("../escape", b"x")

    def test_quota(self, tmp_path):
        store = FileByteStore(tmp_path, quota_bytes=3)
        with pytest.raises(StorageQuotaExceededError):
            store.write("ledger", b"1234")
        assert store.read("ledger") is None

    def test_transient_read_error_is_retried(self, tmp_path, monkeypatch):
        store = FileByteStore(tmp_path, retry_attempts=3, retry_wait_seconds=0)
        calls = []

        def flaky(path):
            calls.append(path)
            if len(calls) == 1:
                raise OSError("resource busy")
            return b"ok"

        monkeypatch.setattr(store, "_read_file", flaky)
        assert store.read("ledger") == b"ok"
        assert len(calls) == 2

    def test_persistent_write_error_surfaces(self, tmp_path, monkeypatch):
        store = FileByteStore(tmp_path, retry_attempts=2, retry_wait_seconds=0)
        calls = []

        def broken(path, data):
            calls.append(path)
            raise PermissionError("read-only file system")

        monkeypatch.setattr(store, "_write_file", broken)
        with pytest.raises(PersistenceError, match="read-only"):
            store.write("ledger", b"x")
        assert len(calls) == 2

    def test_failed_replace_keeps_previous_file(self, tmp_path, monkeypatch):
        store = FileByteStore(tmp_path, retry_attempts=1, retry_wait_seconds=0)
        store.write("ledger", b"old")

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)
        with pytest.raises(PersistenceError):
            store.write("ledger", b"new")
        monkeypatch.undo()

        assert store.read("ledger") == b"old"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["ledger.json"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
