"""Shared fixtures: every test gets its own ledger, storage and audit log."""

import pytest

from budget_ledger.audit import AuditLogger
from budget_ledger.config import LedgerSettings
from budget_ledger.ledger import LedgerStore
from budget_ledger.services.persistence import PersistenceGateway
from budget_ledger.services.storage import InMemoryByteStore


@pytest.fixture
def byte_store():
    return InMemoryByteStore()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def gateway(byte_store, audit_logger):
    return PersistenceGateway(byte_store, audit_logger=audit_logger)


@pytest.fixture
def notices():
    """Collects every PersistenceNotice a store emits."""
    return []


@pytest.fixture
def store(gateway, audit_logger, notices):
    return LedgerStore(gateway=gateway, audit_logger=audit_logger, notifier=notices.append)


@pytest.fixture
def settings(tmp_path):
    return LedgerSettings(_env_file=None, data_dir=tmp_path / "data")
