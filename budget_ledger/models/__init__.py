"""
Data Models Package

This package contains all Pydantic models used in the Budget Ledger.
All data flowing through the system must conform to these schemas.
"""

from budget_ledger.models.ledger import (
    Bucket,
    Entry,
    ExpenseCategory,
    LedgerSnapshot,
    MonthLedger,
    MonthTotals,
    new_entry_id,
)
from budget_ledger.models.month import (
    MONTH_NAMES,
    format_month_key,
    is_month_key,
    make_month_key,
    month_key_for,
    parse_month_key,
    shift_month,
)
from budget_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Bucket",
    "Entry",
    "ExpenseCategory",
    "LedgerSnapshot",
    "MonthLedger",
    "MonthTotals",
    "new_entry_id",
    # Month keys
    "MONTH_NAMES",
    "format_month_key",
    "is_month_key",
    "make_month_key",
    "month_key_for",
    "parse_month_key",
    "shift_month",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
