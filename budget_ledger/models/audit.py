"""
Audit Models for Budget Ledger

Every significant action on the ledger is logged for audit purposes.
This provides:
1. Traceability of every mutation
2. Debugging information when storage misbehaves
3. A history the user can look back on

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger mutations
    ENTRY_ADDED = "entry_added"
    ENTRY_REMOVED = "entry_removed"
    LEDGER_REPLACED = "ledger_replaced"

    # Persistence
    SNAPSHOT_SAVED = "snapshot_saved"
    SAVE_FAILED = "save_failed"
    SNAPSHOT_LOADED = "snapshot_loaded"
    LOAD_FAILED = "load_failed"

    # Backup files
    SNAPSHOT_EXPORTED = "snapshot_exported"
    SNAPSHOT_IMPORTED = "snapshot_imported"
    IMPORT_REJECTED = "import_rejected"

    # Input
    VALIDATION_FAILED = "validation_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clip(text: str, limit: int = 80) -> str:
    """Shorten user text for a one-line description; details keep it whole."""
    return text if len(text) <= limit else text[:limit - 3] + "..."


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What is this about?
    month_key: Optional[str] = Field(
        default=None,
        description="Month the event relates to, if any"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Entry id the event relates to, if any"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "month_key": self.month_key,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_added("2024-03", "income", entry_id, "Salary", "5000")
        event = AuditEventBuilder.save_failed("quota exceeded")
    """

    @staticmethod
    def entry_added(
        month_key: str,
        bucket: str,
        entry_id: str,
        name: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_ADDED,
            month_key=month_key,
            entity_id=entry_id,
            description=f"Entry added to {bucket}: {_clip(name)}",
            details={
                "bucket": bucket,
                "name": name,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_removed(
        month_key: str,
        bucket: str,
        entry_id: str,
        found: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_REMOVED,
            month_key=month_key,
            entity_id=entry_id,
            description=(
                f"Entry removed from {bucket}"
                if found
                else f"Entry not in {bucket}, nothing removed"
            ),
            details={
                "bucket": bucket,
                "found": found,
            },
            is_user_action=True,
        )

    @staticmethod
    def ledger_replaced(month_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_REPLACED,
            description=f"Ledger replaced with {month_count} month(s)",
            details={"month_count": month_count},
            is_user_action=True,
        )

    @staticmethod
    def snapshot_saved(key: str, size_bytes: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SAVED,
            severity=AuditSeverity.DEBUG,
            description=f"Snapshot saved under {_clip(key)}",
            details={
                "key": key,
                "size_bytes": size_bytes,
            },
        )

    @staticmethod
    def save_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description="Snapshot could not be saved; in-memory ledger kept",
            error_message=error_message,
        )

    @staticmethod
    def snapshot_loaded(month_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            description=f"Snapshot loaded with {month_count} month(s)",
            details={"month_count": month_count},
        )

    @staticmethod
    def load_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            description="Stored snapshot could not be loaded; starting empty",
            error_message=error_message,
        )

    @staticmethod
    def snapshot_exported(filename: str, size_bytes: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_EXPORTED,
            description=f"Backup created: {_clip(filename)}",
            details={
                "filename": filename,
                "size_bytes": size_bytes,
            },
            is_user_action=True,
        )

    @staticmethod
    def snapshot_imported(month_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_IMPORTED,
            description=f"Backup restored with {month_count} month(s)",
            details={"month_count": month_count},
            is_user_action=True,
        )

    @staticmethod
    def import_rejected(error_message: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_REJECTED,
            severity=AuditSeverity.WARNING,
            description="Backup file rejected; ledger unchanged",
            error_message=error_message,
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        operation: str,
        issues: list[dict],
        month_key: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            month_key=month_key,
            description=f"{operation} rejected with {len(issues)} issue(s)",
            details={
                "operation": operation,
                "issues": issues,
            },
            is_user_action=True,
        )
