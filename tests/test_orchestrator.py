"""Integration tests: a whole session from startup to backup restore."""

import json

import pytest
from datetime import date
from decimal import Decimal

from budget_ledger.config import LedgerSettings
from budget_ledger.exceptions import ValidationError
from budget_ledger.models.audit import AuditEventType
from budget_ledger.orchestrator import create_ledger_session
from budget_ledger.services.storage import InMemoryByteStore


class TestSessionStartup:
    """Tests for create_ledger_session."""

    def test_fresh_start(self, settings, byte_store):
        notices = []
        session = create_ledger_session(
            settings, byte_store=byte_store, notifier=notices.append, today=date(2024, 3, 10)
        )
        assert session.cursor.current == "2024-03"
        assert session.current_label() == "Março 2024"
        assert session.current_month().is_empty
        assert len(session.store) == 1
        assert notices == []

    def test_restores_saved_data(self, settings, byte_store):
        first = create_ledger_session(settings, byte_store=byte_store, today=date(2024, 3, 10))
        first.add_entry("income", "Salary", "5000")

        notices = []
        second = create_ledger_session(
            settings, byte_store=byte_store, notifier=notices.append, today=date(2024, 3, 11)
        )
        assert second.current_totals().income == Decimal("5000")
        assert second.store == first.store
        assert notices[0].operation == "load"
        assert notices[0].success is True

    def test_corrupt_storage_starts_empty(self, settings):
        byte_store = InMemoryByteStore()
        byte_store.write(settings.storage_key, b"{broken")
        notices = []
        session = create_ledger_session(
            settings, byte_store=byte_store, notifier=notices.append, today=date(2024, 3, 10)
        )
        assert len(session.store) == 0
        assert notices[0].success is False
        events = [event.event_type for event in session.audit_logger.recent_events()]
        assert AuditEventType.LOAD_FAILED in events

    def test_default_file_storage(self, settings):
        session = create_ledger_session(settings, today=date(2024, 3, 10))
        session.add_entry("fixedExpenses", "Rent", 1500)
        assert settings.snapshot_path.exists()
        saved = json.loads(settings.snapshot_path.read_text(encoding="utf-8"))
        assert saved["2024-03"]["despesasFixas"][0]["valor"] == 1500


class TestSessionOperations:
    """Tests for month-scoped helpers and backups."""

    @pytest.fixture
    def session(self, settings, byte_store):
        return create_ledger_session(settings, byte_store=byte_store, today=date(2024, 3, 10))

    def test_add_and_remove_in_current_month(self, session):
        entry = session.add_entry("variableExpenses", "Mercado", "80", "alimentacao")
        assert session.current_month().variable_expenses == [entry]
        session.cursor.next()
        assert session.current_month().is_empty
        session.cursor.previous()
        session.remove_entry("variableExpenses", entry.id)
        assert session.current_totals().variable_expenses == Decimal("0")

    def test_export_then_import(self, session):
        session.add_entry("income", "Salary", 5000)
        backup = session.export_backup(today=date(2024, 3, 31))
        before = session.store.snapshot()

        session.add_entry("income", "Later", 1)
        restored = session.import_file(backup.content)

        assert restored == 1
        assert session.store.snapshot() == before
        assert session.audit_logger.recent_events(1)[0].event_type == AuditEventType.SNAPSHOT_IMPORTED

    def test_bad_import_keeps_ledger(self, session):
        session.add_entry("income", "Salary", 5000)
        before = session.store.snapshot()
        with pytest.raises(ValidationError):
            session.import_file(b"{not json")
        assert session.store.snapshot() == before

    def test_import_is_persisted(self, session, byte_store, settings):
        session.import_file(
            b'{"2020-01": {"ganhos": [], "despesasFixas": [], "despesasVariaveis": []}}'
        )
        assert list(json.loads(byte_store.read(settings.storage_key))) == ["2020-01"]

    def test_manual_save(self, session):
        assert session.save() is True

    def test_picker_years_follow_settings(self, tmp_path, byte_store):
        settings = LedgerSettings(
            _env_file=None, data_dir=tmp_path, picker_years_back=1, picker_years_ahead=1
        )
        session = create_ledger_session(settings, byte_store=byte_store)
        assert session.picker_years(2024) == [2023, 2024, 2025]


class TestSettings:
    """Tests for configuration."""

    def test_defaults(self, settings):
        assert settings.storage_key == "controle-financeiro-dados"
        assert settings.export_filename_prefix == "controle-financeiro-backup"
        assert settings.month_name_locale == "pt"

    def test_environment_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BUDGET_LEDGER_MONTH_NAME_LOCALE", "EN")
        monkeypatch.setenv("BUDGET_LEDGER_DATA_DIR", str(tmp_path))
        settings = LedgerSettings(_env_file=None)
        assert settings.month_name_locale == "en"
        assert settings.data_dir == tmp_path

    def test_unknown_locale_rejected(self):
        with pytest.raises(ValueError):
            LedgerSettings(_env_file=None, month_name_locale="fr")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
