"""
Audit Models for the Trip Budget Ledger

Every mutation of the ledger, and every recovery from bad persisted data,
is recorded as an audit event. This provides:
1. Traceability of what the user did to their budget
2. Debugging information when stored data turns out to be malformed
3. A record of save failures, which are otherwise invisible to the user

DESIGN DECISION: Audit events are emitted, never edited.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


MAX_DESCRIPTION_LENGTH = 500


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every ledger operation has its own event type.
    """
    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_ADD_IGNORED = "expense_add_ignored"
    EXPENSE_EDITED = "expense_edited"
    EXPENSE_EDIT_REJECTED = "expense_edit_rejected"
    EXPENSE_DELETED = "expense_deleted"

    # Categories
    CATEGORY_ADDED = "category_added"
    CATEGORY_RENAMED = "category_renamed"
    CATEGORY_REMOVED = "category_removed"
    CATEGORY_BUDGET_SET = "category_budget_set"

    # Trip
    TRIP_DETAILS_UPDATED = "trip_details_updated"

    # Reset
    RESET_REQUESTED = "reset_requested"
    RESET_CANCELLED = "reset_cancelled"
    LEDGER_RESET = "ledger_reset"

    # Persistence
    SNAPSHOT_LOADED = "snapshot_loaded"
    SNAPSHOT_LOAD_FAILED = "snapshot_load_failed"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant ledger action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'category', 'ledger')"
    )
    entity_ref: Optional[str] = Field(
        default=None,
        description="Position or name of the entity this event relates to"
    )

    # Correlation - for tracking related events in one session
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one ledger session)"
    )

    description: str = Field(
        ...,
        max_length=MAX_DESCRIPTION_LENGTH,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    @field_validator("description", mode="before")
    @classmethod
    def shorten_description(cls, v: Any) -> Any:
        """Cut over-long descriptions instead of rejecting the event."""
        if isinstance(v, str) and len(v) > MAX_DESCRIPTION_LENGTH:
            return v[:MAX_DESCRIPTION_LENGTH - 3] + "..."
        return v

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_ref": self.entity_ref,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(index, expense_dict)
        event = AuditEventBuilder.ledger_reset(expense_count)
    """

    @staticmethod
    def expense_added(
        index: int,
        expense: dict,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_ref=str(index),
            correlation_id=correlation_id,
            description=f"Expense {index} added",
            details=expense,
            is_user_action=True,
        )

    @staticmethod
    def expense_add_ignored(
        missing_fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADD_IGNORED,
            severity=AuditSeverity.DEBUG,
            entity_type="expense",
            correlation_id=correlation_id,
            description="Incomplete expense ignored",
            details={"fields": missing_fields},
            is_user_action=True,
        )

    @staticmethod
    def expense_edited(
        index: int,
        expense: dict,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_EDITED,
            entity_type="expense",
            entity_ref=str(index),
            correlation_id=correlation_id,
            description=f"Expense {index} updated",
            details=expense,
            is_user_action=True,
        )

    @staticmethod
    def expense_edit_rejected(
        index: int,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_EDIT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            entity_ref=str(index),
            correlation_id=correlation_id,
            description=f"Edit of expense {index} rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        index: int,
        expense: dict,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_ref=str(index),
            correlation_id=correlation_id,
            description=f"Expense {index} deleted",
            details=expense,
            is_user_action=True,
        )

    @staticmethod
    def category_added(
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_ADDED,
            entity_type="category",
            entity_ref=name,
            correlation_id=correlation_id,
            description="Category added",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def category_renamed(
        old_name: str,
        new_name: str,
        expenses_updated: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_RENAMED,
            entity_type="category",
            entity_ref=new_name,
            correlation_id=correlation_id,
            description=f"Category renamed, {expenses_updated} expenses updated",
            details={
                "old_name": old_name,
                "new_name": new_name,
                "expenses_updated": expenses_updated,
            },
            is_user_action=True,
        )

    @staticmethod
    def category_removed(
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_REMOVED,
            entity_type="category",
            entity_ref=name,
            correlation_id=correlation_id,
            description="Category removed",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def category_budget_set(
        name: str,
        budget: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_BUDGET_SET,
            entity_type="category",
            entity_ref=name,
            correlation_id=correlation_id,
            description="Category budget set",
            details={"name": name, "budget": budget},
            is_user_action=True,
        )

    @staticmethod
    def trip_details_updated(
        changes: dict,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRIP_DETAILS_UPDATED,
            entity_type="trip",
            correlation_id=correlation_id,
            description=f"Trip details updated: {', '.join(sorted(changes))}",
            details=changes,
            is_user_action=True,
        )

    @staticmethod
    def reset_requested(correlation_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RESET_REQUESTED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description="Reset requested, awaiting confirmation",
            is_user_action=True,
        )

    @staticmethod
    def reset_cancelled(correlation_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RESET_CANCELLED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description="Reset cancelled",
            is_user_action=True,
        )

    @staticmethod
    def ledger_reset(
        expenses_cleared: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_RESET,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Ledger reset, {expenses_cleared} expenses cleared",
            details={"expenses_cleared": expenses_cleared},
            is_user_action=True,
        )

    @staticmethod
    def snapshot_loaded(
        category_count: int,
        expense_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Loaded {category_count} categories and {expense_count} expenses",
            details={
                "category_count": category_count,
                "expense_count": expense_count,
            },
        )

    @staticmethod
    def snapshot_load_failed(
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            correlation_id=correlation_id,
            description="Stored ledger unreadable, falling back to defaults",
            error_message=error_message,
        )

    @staticmethod
    def save_failed(
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="ledger",
            correlation_id=correlation_id,
            description="Saving the ledger snapshot failed",
            error_message=error_message,
        )
