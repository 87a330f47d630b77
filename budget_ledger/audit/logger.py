"""
Audit Logger

DESIGN DECISION: Every significant action on the ledger is logged.
This provides:
1. Complete traceability
2. Debugging capability when storage fails
3. User can see history of their interactions

The audit logger:
- Writes a structured (JSON) local log through structlog
- Keeps a bounded history of recent events in memory
- Never raises into the ledger; a broken log must not block bookkeeping
"""

import logging
from collections import deque
from typing import Optional

import structlog

from budget_ledger.models.audit import AuditEvent, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Set the minimum level of everything logged under budget_ledger."""
    logging.getLogger("budget_ledger").setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. In-memory history (for the user to review)
    """

    def __init__(self, history_size: int = 200):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
        """
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger(__name__)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the local log write succeeded.
        """
        self._history.append(event)
        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Logging must never break a ledger operation
            logging.getLogger(__name__).warning("audit log write failed: %s", e)
            return False
        return True

    def recent_events(self, limit: Optional[int] = None) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(reversed(self._history))
        return events if limit is None else events[:limit]

    def clear(self) -> None:
        self._history.clear()
