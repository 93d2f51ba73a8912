"""
Data Models Package

This package contains all Pydantic models used by the trip budget ledger.
All data flowing through the system must conform to these schemas.
"""

from trip_budget.models.ledger import (
    BudgetMode,
    Category,
    CategorySummary,
    ChartSlice,
    Expense,
    ExpenseDraft,
    LedgerSnapshot,
    LedgerSummary,
    TripDetails,
    ValidationIssue,
    ValidationResult,
)
from trip_budget.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "BudgetMode",
    "Category",
    "CategorySummary",
    "ChartSlice",
    "Expense",
    "ExpenseDraft",
    "LedgerSnapshot",
    "LedgerSummary",
    "TripDetails",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
