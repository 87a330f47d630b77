"""
Session Orchestrator for Budget Ledger

This module ties together all the components for one user session:
settings -> audit logger -> byte store -> persistence gateway ->
ledger store (restored from storage) -> month cursor.

DESIGN DECISION: The session is built once at startup and handed to the
presentation layer. Nothing here is module-level state, so a test can
build as many independent sessions as it likes.

Startup never fails because of storage: a missing snapshot starts an
empty ledger, a corrupt or unreadable one does too (and says so).
"""

from datetime import date
from typing import Optional, Union

from budget_ledger.audit import AuditLogger, configure_logging
from budget_ledger.config import LedgerSettings, get_settings
from budget_ledger.ledger import LedgerStore, Notifier, PersistenceNotice
from budget_ledger.models.audit import AuditEventBuilder
from budget_ledger.models.ledger import Bucket, Entry, MonthLedger, MonthTotals
from budget_ledger.navigation import MonthCursor
from budget_ledger.services.persistence import ExportArtifact, PersistenceGateway
from budget_ledger.services.storage import (
    ByteStoreInterface,
    FileByteStore,
    PersistenceError,
)


class LedgerSession:
    """
    Everything the presentation layer talks to, for one session.

    Month-scoped helpers act on the month under the cursor.
    """

    def __init__(
        self,
        store: LedgerStore,
        cursor: MonthCursor,
        gateway: PersistenceGateway,
        audit_logger: AuditLogger,
        settings: LedgerSettings,
    ):
        self.store = store
        self.cursor = cursor
        self.gateway = gateway
        self.audit_logger = audit_logger
        self._settings = settings

    # Current month view

    def current_month(self) -> MonthLedger:
        return self.store.get_month(self.cursor.current)

    def current_totals(self) -> MonthTotals:
        return self.store.totals(self.cursor.current)

    def current_label(self) -> str:
        return self.cursor.format()

    def add_entry(
        self,
        bucket: Union[Bucket, str],
        name: str,
        amount: object,
        category: Optional[str] = None,
    ) -> Entry:
        return self.store.add_entry(self.cursor.current, bucket, name, amount, category)

    def remove_entry(self, bucket: Union[Bucket, str], entry_id: str) -> None:
        self.store.remove_entry(self.cursor.current, bucket, entry_id)

    def picker_years(self, reference_year: Optional[int] = None) -> list[int]:
        return MonthCursor.picker_years(
            reference_year,
            years_back=self._settings.picker_years_back,
            years_ahead=self._settings.picker_years_ahead,
        )

    # Persistence

    def save(self) -> bool:
        return self.store.save()

    def export_backup(self, today: Optional[date] = None) -> ExportArtifact:
        return self.gateway.export_to_file(self.store, today=today)

    def import_file(self, data: Union[bytes, str]) -> int:
        """
        Restore a backup file over the current ledger.

        Returns:
            Number of months restored

        Raises:
            ValidationError: invalid file; the ledger is unchanged
        """
        imported = self.gateway.import_from_file(data)
        self.store.replace_all(imported.snapshot())
        month_count = len(imported)
        self.audit_logger.log(AuditEventBuilder.snapshot_imported(month_count))
        return month_count


def create_ledger_session(
    settings: Optional[LedgerSettings] = None,
    byte_store: Optional[ByteStoreInterface] = None,
    notifier: Optional[Notifier] = None,
    today: Optional[date] = None,
) -> LedgerSession:
    """
    Factory function to create all session components.

    Args:
        settings: Configuration; defaults to get_settings()
        byte_store: Storage medium; defaults to files in settings.data_dir
        notifier: Receives a PersistenceNotice after every save/load
        today: Date the cursor starts on; defaults to the real date

    Returns:
        A ready LedgerSession
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    audit_logger = AuditLogger(history_size=settings.audit_history_size)
    if byte_store is None:
        byte_store = FileByteStore(
            settings.data_dir,
            quota_bytes=settings.storage_quota_bytes,
            retry_attempts=settings.save_retry_attempts,
        )
    gateway = PersistenceGateway(
        byte_store,
        storage_key=settings.storage_key,
        export_prefix=settings.export_filename_prefix,
        audit_logger=audit_logger,
    )

    store: Optional[LedgerStore] = None
    try:
        store = gateway.load()
    except PersistenceError as e:
        audit_logger.log(AuditEventBuilder.load_failed(str(e)))
        if notifier is not None:
            notifier(PersistenceNotice(
                success=False,
                operation="load",
                message="Could not load saved data; starting with an empty ledger",
                error=str(e),
            ))
    else:
        if store is not None and notifier is not None:
            notifier(PersistenceNotice(
                success=True,
                operation="load",
                message="Saved data restored",
            ))

    if store is None:
        store = LedgerStore(gateway=gateway, audit_logger=audit_logger)
    store.attach(notifier=notifier)

    cursor = MonthCursor(today=today, locale=settings.month_name_locale)

    return LedgerSession(
        store=store,
        cursor=cursor,
        gateway=gateway,
        audit_logger=audit_logger,
        settings=settings,
    )
