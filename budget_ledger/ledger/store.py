"""
Ledger Store

DESIGN DECISION: One LedgerStore instance owns every month of the ledger.
It is built once at startup and passed to whoever needs it; there is no
module-level ledger. Tests simply build a fresh store.

GUARANTEES:
- Entries are only ever appended; display order is insertion order
- A rejected operation leaves the store exactly as it was
- Every mutation is written through to storage (when a gateway is attached)
- A failed write never rolls back memory; the outcome is reported instead

Month materialization contract: get_month() creates an empty ledger for a
month seen for the first time and keeps it. peek_month() and totals()
never create anything. Both accessors hand out copies; the store is the
only owner of its ledgers.
"""

from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Union

import structlog
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from budget_ledger.audit import AuditLogger
from budget_ledger.exceptions import ValidationError
from budget_ledger.models.audit import AuditEventBuilder
from budget_ledger.models.ledger import (
    Bucket,
    Entry,
    LedgerSnapshot,
    MonthLedger,
    MonthTotals,
)
from budget_ledger.models.month import parse_month_key
from budget_ledger.services.storage.interface import PersistenceError
from budget_ledger.validation.validator import EntryInputValidator

if TYPE_CHECKING:
    from budget_ledger.services.persistence import PersistenceGateway


class PersistenceNotice(BaseModel):
    """Outcome of a save, handed to the presentation layer for a toast."""

    success: bool
    operation: str = Field(
        ...,
        description="What triggered the save (e.g. 'add_entry', 'manual_save')"
    )
    message: str
    error: Optional[str] = None


Notifier = Callable[[PersistenceNotice], None]


class LedgerStore:
    """
    Mapping of month key -> MonthLedger, with the mutation/query operations.
    """

    def __init__(
        self,
        snapshot: Optional[LedgerSnapshot] = None,
        gateway: Optional["PersistenceGateway"] = None,
        audit_logger: Optional[AuditLogger] = None,
        notifier: Optional[Notifier] = None,
        validator: Optional[EntryInputValidator] = None,
    ):
        self._months: dict[str, MonthLedger] = (
            _copy_months(snapshot.root) if snapshot is not None else {}
        )
        self._gateway = gateway
        self._audit_logger = audit_logger
        self._notifier = notifier
        self._validator = validator or EntryInputValidator()
        self._logger = structlog.get_logger(__name__)

    # -------------------------------------------------------------------------
    # Wiring
    # -------------------------------------------------------------------------

    def attach(
        self,
        gateway: Optional["PersistenceGateway"] = None,
        audit_logger: Optional[AuditLogger] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        """Connect collaborators after construction (e.g. a loaded store)."""
        if gateway is not None:
            self._gateway = gateway
        if audit_logger is not None:
            self._audit_logger = audit_logger
        if notifier is not None:
            self._notifier = notifier

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_month(self, key: str) -> MonthLedger:
        """
        Copy of the ledger for `key`, created empty on first access.

        The created ledger is kept (write-on-read). Use peek_month() for a
        read without that side effect. Changing the returned copy does not
        change the store; mutations go through add_entry/remove_entry.
        """
        parse_month_key(key)
        return self._materialize(key).model_copy(deep=True)

    def peek_month(self, key: str) -> MonthLedger:
        """Copy of the ledger for `key`, or an empty one. Never modifies the store."""
        parse_month_key(key)
        ledger = self._months.get(key)
        return ledger.model_copy(deep=True) if ledger is not None else MonthLedger.empty()

    def totals(self, key: str) -> MonthTotals:
        """Totals for `key`, recomputed from the current entries."""
        return self.peek_month(key).compute_totals()

    def month_keys(self) -> list[str]:
        return sorted(self._months)

    def snapshot(self) -> LedgerSnapshot:
        """Independent copy of the whole ledger."""
        return LedgerSnapshot(_copy_months(self._months))

    def __contains__(self, key: object) -> bool:
        return key in self._months

    def __len__(self) -> int:
        return len(self._months)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LedgerStore):
            return NotImplemented
        return self._months == other._months

    def __repr__(self) -> str:
        return f"LedgerStore(months={self.month_keys()!r})"

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_entry(
        self,
        key: str,
        bucket: Union[Bucket, str],
        name: Any,
        amount: Any,
        category: Any = None,
    ) -> Entry:
        """
        Append a new entry to `bucket` of month `key`.

        `amount` may be the raw text typed in a form.

        Raises:
            ValidationError: bad key, bucket, name or amount (nothing added)
        """
        try:
            parse_month_key(key)
            target = Bucket.coerce(bucket)
            entry = self._validator.build_entry(name, amount, category)
        except ValidationError as e:
            self._audit_rejection("add_entry", e, key)
            raise

        event = AuditEventBuilder.entry_added(
            month_key=key,
            bucket=target.value,
            entry_id=entry.id,
            name=entry.name,
            amount=str(entry.amount),
        )
        self._materialize(key).entries(target).append(entry)
        self._audit(event)
        self._write_through("add_entry")
        return entry

    def remove_entry(
        self,
        key: str,
        bucket: Union[Bucket, str],
        entry_id: str,
    ) -> None:
        """
        Remove the entry with `entry_id` from `bucket` of month `key`.

        Removing an id that is not there is a no-op, not an error.
        """
        try:
            parse_month_key(key)
            target = Bucket.coerce(bucket)
        except ValidationError as e:
            self._audit_rejection("remove_entry", e, key)
            raise

        found = False
        ledger = self._months.get(key)
        if ledger is not None:
            entries = ledger.entries(target)
            kept = [entry for entry in entries if entry.id != entry_id]
            found = len(kept) != len(entries)
            entries[:] = kept

        self._audit(AuditEventBuilder.entry_removed(
            month_key=key,
            bucket=target.value,
            entry_id=entry_id,
            found=found,
        ))
        self._write_through("remove_entry")

    def replace_all(self, snapshot: Union[LedgerSnapshot, Mapping[str, Any]]) -> None:
        """
        Replace every month at once (used by backup import).

        Either the whole snapshot is accepted or the store is left untouched.

        Raises:
            ValidationError: snapshot does not conform to month -> three lists
        """
        try:
            if isinstance(snapshot, LedgerSnapshot):
                validated = snapshot
            elif isinstance(snapshot, Mapping):
                validated = LedgerSnapshot.model_validate(dict(snapshot))
            else:
                raise ValidationError.single(
                    "snapshot",
                    "invalid_type",
                    f"Snapshot must be a mapping, got {type(snapshot).__name__}",
                )
        except PydanticValidationError as e:
            error = ValidationError.from_pydantic("Snapshot rejected", e)
            self._audit_rejection("replace_all", error)
            raise error from e
        except ValidationError as e:
            self._audit_rejection("replace_all", e)
            raise

        self._months = _copy_months(validated.root)
        self._audit(AuditEventBuilder.ledger_replaced(len(self._months)))
        self._write_through("replace_all")

    def save(self) -> bool:
        """
        Manual save.

        Returns True if the snapshot reached storage. Without a gateway
        there is nothing to save to and False is returned.
        """
        if self._gateway is None:
            self._notify(PersistenceNotice(
                success=False,
                operation="manual_save",
                message="No storage configured",
            ))
            return False
        return self._write_through("manual_save")

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _write_through(self, operation: str) -> bool:
        """Persist the current state; report, never raise, on failure."""
        if self._gateway is None:
            return True

        try:
            self._gateway.save(self)
        except PersistenceError as e:
            self._logger.warning("write_through_failed", operation=operation, error=str(e))
            self._audit(AuditEventBuilder.save_failed(str(e)))
            self._notify(PersistenceNotice(
                success=False,
                operation=operation,
                message="Could not save your data; changes are kept for this session",
                error=str(e),
            ))
            return False

        self._notify(PersistenceNotice(
            success=True,
            operation=operation,
            message="Data saved",
        ))
        return True

    def _materialize(self, key: str) -> MonthLedger:
        ledger = self._months.get(key)
        if ledger is None:
            ledger = MonthLedger.empty()
            self._months[key] = ledger
        return ledger

    def _notify(self, notice: PersistenceNotice) -> None:
        if self._notifier is not None:
            self._notifier(notice)

    def _audit(self, event) -> None:
        if self._audit_logger is not None:
            self._audit_logger.log(event)

    def _audit_rejection(
        self,
        operation: str,
        error: ValidationError,
        key: Optional[str] = None,
    ) -> None:
        self._audit(AuditEventBuilder.validation_failed(
            operation=operation,
            issues=[issue.model_dump() for issue in error.issues],
            month_key=key if isinstance(key, str) else None,
        ))


def _copy_months(months: Mapping[str, MonthLedger]) -> dict[str, MonthLedger]:
    return {key: ledger.model_copy(deep=True) for key, ledger in months.items()}
