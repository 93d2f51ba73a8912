"""Audit logging package."""

from trip_budget.audit.logger import (
    DEFAULT_HISTORY_SIZE,
    AuditLogger,
    configure_logging,
    create_correlation_id,
)

__all__ = ["DEFAULT_HISTORY_SIZE", "AuditLogger", "configure_logging", "create_correlation_id"]
