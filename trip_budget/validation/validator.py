"""
Expense Validation

Validation happens in two checks:

REQUIRED FIELDS:
- date, category and amount must be present (non-blank)

NUMERIC AMOUNT:
- amount must parse as a finite number
- skipped when the amount is missing, so each field reports one issue

An unknown category name is reported as a warning only. Expenses refer to
categories by name and that reference is not enforced.

IMPORTANT: Validation never fixes input. It reports issues and, for a valid
draft, builds the Expense with the amount coerced to float. Whether a
failure is shown to the user is the caller's decision.
"""

import math
from typing import Any, Iterable, Optional

from trip_budget.errors import LedgerError
from trip_budget.models.ledger import (
    Expense,
    ExpenseDraft,
    ValidationIssue,
    ValidationResult,
)


REQUIRED_FIELDS = ("date", "category", "amount")

EDIT_FAILURE_MESSAGE = "Please fill out all fields with valid values before saving."


class ExpenseValidationError(LedgerError):
    """
    An expense draft failed validation.

    The message is meant to be shown to the user as-is.
    """

    def __init__(self, issues: list[ValidationIssue], message: str = EDIT_FAILURE_MESSAGE):
        super().__init__(message)
        self.message = message
        self.issues = issues


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a raw numeric input.

    Returns None for blank, non-numeric and non-finite input.
    Surrounding whitespace is ignored ("  12.5 " -> 12.5).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class ExpenseValidator:
    """
    Validates expense drafts before they become expenses.

    The same checks apply to add and edit. The ledger store decides how
    loudly a failure is reported.
    """

    def __init__(self, known_categories: Optional[Iterable[str]] = None):
        """
        Args:
            known_categories: Category names to warn against.
                             If None, the category check is skipped.
        """
        self._known = set(known_categories) if known_categories is not None else None

    def _check_required(self, draft: ExpenseDraft) -> list[ValidationIssue]:
        issues = []
        for field in REQUIRED_FIELDS:
            if _is_blank(getattr(draft, field)):
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="missing",
                    message=f"{field.capitalize()} is required",
                ))
        return issues

    def _check_amount(self, draft: ExpenseDraft) -> list[ValidationIssue]:
        if _is_blank(draft.amount):
            return []
        if parse_number(draft.amount) is None:
            return [ValidationIssue(
                field="amount",
                issue_type="not_numeric",
                message=f"Amount must be a number, got {draft.amount!r}",
            )]
        return []

    def _check_category(self, draft: ExpenseDraft) -> list[ValidationIssue]:
        if self._known is None or _is_blank(draft.category):
            return []
        if draft.category not in self._known:
            return [ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=f"Category {draft.category!r} does not exist",
                severity="warning",
            )]
        return []

    def validate(self, draft: ExpenseDraft) -> ValidationResult:
        """
        Validate a draft and build the Expense if it passes.

        Warnings never block; only error-level issues do.
        """
        issues = (
            self._check_required(draft)
            + self._check_amount(draft)
            + self._check_category(draft)
        )

        if any(issue.severity == "error" for issue in issues):
            return ValidationResult(is_valid=False, issues=issues)

        expense = Expense(
            date=draft.date,
            category=draft.category,
            description=draft.description,
            amount=parse_number(draft.amount),
        )
        return ValidationResult(is_valid=True, issues=issues, expense=expense)
