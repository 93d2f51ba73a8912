"""
Audit Logger

DESIGN DECISION: Every ledger mutation is logged.
This provides:
1. Traceability of budget changes
2. Visibility into silent recoveries (corrupt stored data, failed saves)

The audit logger:
- Is synchronous, like the rest of the ledger
- Gracefully handles failures (doesn't break the ledger if logging fails)
- Supports correlation IDs to trace one session's events
"""

import logging
from collections import deque
from typing import Optional
from uuid import UUID, uuid4

import structlog

from trip_budget.models.audit import AuditEvent, AuditSeverity


DEFAULT_HISTORY_SIZE = 200


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
    """Route structlog's stdlib output to stderr at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


class AuditLogger:
    """
    Central audit logging service.

    Emits every event through structlog at the level matching its severity,
    tagged with the session's correlation ID. Keeps the most recent events
    in memory for inspection.
    """

    def __init__(
        self,
        correlation_id: Optional[UUID] = None,
        history_size: int = DEFAULT_HISTORY_SIZE,
    ):
        """
        Initialize audit logger.

        Args:
            correlation_id: Attached to every event that has none.
            history_size: How many recent events `history` keeps (0 keeps none).
        """
        self._correlation_id = correlation_id or create_correlation_id()
        self._logger = structlog.get_logger("trip_budget.audit")
        self.history: deque[AuditEvent] = deque(maxlen=max(history_size, 0))

    @property
    def correlation_id(self) -> UUID:
        return self._correlation_id

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if emitting failed; never raises.
        """
        if event.correlation_id is None:
            event = event.model_copy(update={"correlation_id": self._correlation_id})

        if self.history.maxlen:
            self.history.append(event)

        log_dict = event.to_log_dict()
        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Logging must never break a ledger operation
            logging.getLogger(__name__).warning("audit logging failed: %s", e)
            return False

        return True


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use one per ledger session.
    """
    return uuid4()
