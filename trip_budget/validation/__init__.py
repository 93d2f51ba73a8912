"""Expense validation package."""

from trip_budget.validation.validator import (
    EDIT_FAILURE_MESSAGE,
    ExpenseValidationError,
    ExpenseValidator,
    parse_number,
)

__all__ = [
    "EDIT_FAILURE_MESSAGE",
    "ExpenseValidationError",
    "ExpenseValidator",
    "parse_number",
]
