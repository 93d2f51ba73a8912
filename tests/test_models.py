"""
Tests for Trip Budget models

Test strategy:
1. Unit tests for individual components (models, validator, aggregator)
2. Store tests against in-memory storage
3. Storage tests against temporary files (never real user data)
"""

import pytest

from trip_budget.models.ledger import (
    BudgetMode,
    Category,
    CategorySummary,
    Expense,
    ExpenseDraft,
    LedgerSnapshot,
    LedgerSummary,
    ValidationIssue,
    ValidationResult,
)
from trip_budget.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestLedgerModels:
    """Tests for ledger Pydantic models."""

    def test_category_creation(self):
        """Test Category model creation with default blank budget."""
        category = Category(name="Food")
        assert category.name == "Food"
        assert category.budget == ""

    def test_category_strips_whitespace(self):
        """Test that whitespace is stripped from category names."""
        category = Category(name="  Lodging  ")
        assert category.name == "Lodging"

    def test_category_rejects_blank_name(self):
        """Test that a category without a name is invalid."""
        with pytest.raises(ValueError):
            Category(name="   ")

    def test_category_name_has_no_length_limit(self):
        """Test that long category names are accepted."""
        category = Category(name="c" * 101)
        assert len(category.name) == 101

    def test_category_keeps_raw_budget(self):
        """Test that non-numeric budgets are stored as typed."""
        category = Category(name="Food", budget="lots")
        assert category.budget == "lots"

    def test_expense_creation(self):
        """Test Expense model creation."""
        expense = Expense(date="2024-01-01", category="Food", amount=40)
        assert expense.amount == 40.0
        assert expense.description == ""

    def test_expense_accepts_long_description(self):
        """Test that the description is unbounded free text."""
        expense = Expense(date="2024-01-01", category="Food", description="x" * 501, amount=1)
        assert len(expense.description) == 501

    def test_expense_requires_date(self):
        """Test that an expense without a date is invalid."""
        with pytest.raises(ValueError):
            Expense(date="", category="Food", amount=1)

    def test_expense_rejects_infinite_amount(self):
        """Test that non-finite amounts are rejected."""
        with pytest.raises(ValueError):
            Expense(date="2024-01-01", category="Food", amount=float("inf"))

    def test_draft_defaults_blank(self):
        """Test that an empty draft has every field blank."""
        draft = ExpenseDraft()
        assert draft.model_dump() == {"date": "", "category": "", "description": "", "amount": ""}

    def test_draft_treats_none_as_blank(self):
        """Test that None values become blank fields."""
        draft = ExpenseDraft.model_validate(
            {"date": None, "category": None, "description": None, "amount": None}
        )
        assert draft == ExpenseDraft()

    def test_draft_from_expense(self):
        """Test prefilling a draft from an existing expense."""
        expense = Expense(date="2024-01-02", category="Misc", description="Tip", amount=5.5)
        draft = ExpenseDraft.from_expense(expense)
        assert draft.category == "Misc"
        assert draft.amount == 5.5


class TestLedgerSnapshot:
    """Tests for snapshot parsing and the persisted blob layout."""

    def test_from_blob_per_category(self):
        """Test parsing a per-category blob."""
        snapshot = LedgerSnapshot.from_blob({
            "categories": [{"name": "Food", "budget": "100"}],
            "expenses": [{"date": "2024-01-01", "category": "Food", "description": "", "amount": 40}],
        })
        assert snapshot.categories[0].budget == "100"
        assert snapshot.expenses[0].amount == 40.0

    def test_from_blob_accepts_plain_category_names(self):
        """Test that trip-mode blobs with bare names are accepted."""
        snapshot = LedgerSnapshot.from_blob({
            "startDate": "2024-06-01",
            "endDate": "2024-06-10",
            "budget": 2000,
            "categories": ["Food", "Lodging"],
            "expenses": [],
        })
        assert [c.name for c in snapshot.categories] == ["Food", "Lodging"]
        assert snapshot.start_date == "2024-06-01"
        assert snapshot.trip.end_date == "2024-06-10"

    def test_from_blob_missing_categories_is_none(self):
        """Test that missing categories are distinguished from an empty list."""
        assert LedgerSnapshot.from_blob({"expenses": []}).categories is None
        assert LedgerSnapshot.from_blob({"categories": []}).categories == []

    def test_from_blob_null_expenses(self):
        """Test that null expenses load as an empty list."""
        assert LedgerSnapshot.from_blob({"expenses": None}).expenses == []

    def test_from_blob_rejects_duplicate_categories(self):
        """Test that duplicate category names are invalid."""
        with pytest.raises(ValueError, match="unique"):
            LedgerSnapshot.from_blob({"categories": ["Food", "Food"]})

    def test_from_blob_rejects_non_object(self):
        """Test that a non-object blob is invalid."""
        with pytest.raises(ValueError):
            LedgerSnapshot.from_blob(["Food"])

    def test_to_blob_per_category_layout(self):
        """Test the per-category blob has no trip fields."""
        snapshot = LedgerSnapshot(
            categories=[Category(name="Food", budget="100")],
            expenses=[Expense(date="2024-01-01", category="Food", amount=40)],
        )
        blob = snapshot.to_blob(BudgetMode.PER_CATEGORY)
        assert blob == {
            "categories": [{"name": "Food", "budget": "100"}],
            "expenses": [{"date": "2024-01-01", "category": "Food", "description": "", "amount": 40.0}],
        }

    def test_to_blob_trip_layout(self):
        """Test the trip blob stores plain names and the trip fields."""
        snapshot = LedgerSnapshot(
            categories=[Category(name="Food")],
            start_date="2024-06-01",
            budget="1500",
        )
        blob = snapshot.to_blob(BudgetMode.TRIP)
        assert blob["categories"] == ["Food"]
        assert blob["startDate"] == "2024-06-01"
        assert blob["endDate"] == ""
        assert blob["budget"] == "1500"


class TestDerivedModels:
    """Tests for summary and validation result models."""

    def test_category_summary_over_budget(self):
        """Test over_budget flag on a category line."""
        line = CategorySummary(name="Food", budget=10, spent=15, remaining=-5)
        assert line.over_budget is True

    def test_category_summary_without_remaining(self):
        """Test that trip-mode lines are never over budget."""
        line = CategorySummary(name="Food", budget=0, spent=15)
        assert line.over_budget is False

    def test_ledger_summary_over_budget(self):
        """Test negative remaining is flagged, not rejected."""
        summary = LedgerSummary(
            mode=BudgetMode.TRIP,
            total_budget=100,
            total_spent=150,
            remaining=-50,
        )
        assert summary.over_budget is True

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(field="amount", issue_type="missing", message="Amount is required"),
                ValidationIssue(
                    field="category",
                    issue_type="unknown_category",
                    message="Unknown",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1

    def test_validation_issue_rejects_bad_severity(self):
        """Test severity must be error, warning or info."""
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            description="Expense added",
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.expense_added(
            index=0,
            expense={"date": "2024-01-01", "category": "Food", "amount": 40.0},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "expense_added"
        assert log_dict["entity_ref"] == "0"
        assert log_dict["details"]["category"] == "Food"

    def test_audit_event_truncates_long_description(self):
        """Test that an over-long description is cut, not rejected."""
        event = AuditEvent(
            event_type=AuditEventType.CATEGORY_ADDED,
            description="d" * 600,
        )
        assert len(event.description) == 500
        assert event.description.endswith("...")

    def test_budget_set_keeps_raw_value_in_details(self):
        """Test that user input travels in details, not the description."""
        event = AuditEventBuilder.category_budget_set(name="n" * 300, budget="9" * 600)
        assert event.details == {"name": "n" * 300, "budget": "9" * 600}
        assert event.description == "Category budget set"

    def test_audit_event_builder_ledger_reset(self):
        """Test AuditEventBuilder.ledger_reset."""
        event = AuditEventBuilder.ledger_reset(expenses_cleared=3)
        assert event.event_type == AuditEventType.LEDGER_RESET
        assert event.severity == AuditSeverity.WARNING
        assert event.details["expenses_cleared"] == 3
        assert event.is_user_action is True

    def test_audit_event_builder_load_failed(self):
        """Test AuditEventBuilder.snapshot_load_failed is not a user action."""
        event = AuditEventBuilder.snapshot_load_failed(error_message="bad json")
        assert event.event_type == AuditEventType.SNAPSHOT_LOAD_FAILED
        assert event.error_message == "bad json"
        assert event.is_user_action is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
