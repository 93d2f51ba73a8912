"""
Ledger Store

The single source of truth for categories, expenses and trip details.

DESIGN DECISION: Every mutation REPLACES the affected list.
Callers only ever receive copies, so a snapshot handed out earlier never
changes underneath its reader.

Lifecycle:
1. Construct -> load the persisted snapshot once (fall back to defaults)
2. Mutate -> validate, replace state, save the new snapshot
3. Reset -> only after explicit confirmation; erases the stored snapshot

Mutate-then-save is not atomic. If a save fails the in-memory state has
already changed; the failure is audited and `last_save_failed` is set.
"""

from typing import Any, Optional, Union

from trip_budget.audit import AuditLogger
from trip_budget.config import LedgerSettings, get_settings
from trip_budget.errors import (
    CategoryError,
    CategoryInUseError,
    ResetNotConfirmedError,
    UnsupportedOperationError,
)
from trip_budget.ledger import aggregator
from trip_budget.models.audit import AuditEventBuilder
from trip_budget.models.ledger import (
    BudgetMode,
    Category,
    Expense,
    ExpenseDraft,
    LedgerSnapshot,
    LedgerSummary,
    TripDetails,
    ValidationIssue,
)
from trip_budget.services.storage import SnapshotStorageInterface, StorageError
from trip_budget.validation import ExpenseValidationError, ExpenseValidator


DraftInput = Union[ExpenseDraft, Expense, dict]


class LedgerStore:
    """
    Holds the ledger state and applies user intents to it.

    Budget mode and the custom-category capability come from
    LedgerSettings; operations outside the configured mode raise
    UnsupportedOperationError.
    """

    def __init__(
        self,
        storage: SnapshotStorageInterface,
        settings: Optional[LedgerSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._settings = settings or get_settings().ledger
        self._mode = BudgetMode(self._settings.budget_mode)
        self._audit = audit_logger or AuditLogger()

        self._categories: list[Category] = self._default_categories()
        self._expenses: list[Expense] = []
        self._trip = TripDetails()

        self.draft = ExpenseDraft()
        self._editing_index: Optional[int] = None
        self._editing_draft: Optional[ExpenseDraft] = None
        self._reset_pending = False
        self.last_save_failed = False

        self._load()

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def mode(self) -> BudgetMode:
        return self._mode

    @property
    def allow_custom_categories(self) -> bool:
        return self._settings.allow_custom_categories

    @property
    def categories(self) -> list[Category]:
        return [c.model_copy() for c in self._categories]

    @property
    def category_names(self) -> list[str]:
        return [c.name for c in self._categories]

    @property
    def expenses(self) -> list[Expense]:
        return [e.model_copy() for e in self._expenses]

    @property
    def trip(self) -> TripDetails:
        return self._trip.model_copy()

    @property
    def editing_index(self) -> Optional[int]:
        return self._editing_index

    @property
    def editing_draft(self) -> Optional[ExpenseDraft]:
        return self._editing_draft

    @property
    def reset_pending(self) -> bool:
        return self._reset_pending

    def snapshot(self) -> LedgerSnapshot:
        """Copy of the complete current state."""
        return LedgerSnapshot(
            categories=self.categories,
            expenses=self.expenses,
            start_date=self._trip.start_date,
            end_date=self._trip.end_date,
            budget=self._trip.budget,
        )

    def summary(self) -> LedgerSummary:
        """Aggregates over the current state, recomputed on every call."""
        return aggregator.summarize(self.snapshot(), self._mode)

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def update_draft(self, **changes: Any) -> ExpenseDraft:
        """Change fields of the add-expense draft."""
        self.draft = ExpenseDraft(**{**self.draft.model_dump(), **changes})
        return self.draft

    def add_expense(self, candidate: Optional[DraftInput] = None) -> bool:
        """
        Append an expense built from `candidate` (default: the current draft).

        Incomplete or non-numeric input is ignored silently: nothing
        changes and False is returned. On success the draft is cleared.
        """
        draft = self._as_draft(self.draft if candidate is None else candidate)
        result = self._validator().validate(draft)

        if not result.is_valid:
            self._audit.log(AuditEventBuilder.expense_add_ignored(
                missing_fields=[i.field for i in result.issues if i.severity == "error"],
            ))
            return False

        self._expenses = [*self._expenses, result.expense]
        self.draft = ExpenseDraft()
        self._audit.log(AuditEventBuilder.expense_added(
            index=len(self._expenses) - 1,
            expense=result.expense.model_dump(),
        ))
        self._persist()
        return True

    def start_edit(self, index: int) -> ExpenseDraft:
        """Enter edit mode for the expense at `index`."""
        self._check_index(self._expenses, index, "expense")
        self._editing_index = index
        self._editing_draft = ExpenseDraft.from_expense(self._expenses[index])
        return self._editing_draft

    def update_editing_draft(self, **changes: Any) -> ExpenseDraft:
        """Change fields of the draft being edited."""
        if self._editing_draft is None:
            raise UnsupportedOperationError("No expense is being edited")
        self._editing_draft = ExpenseDraft(**{**self._editing_draft.model_dump(), **changes})
        return self._editing_draft

    def cancel_edit(self) -> None:
        self._editing_index = None
        self._editing_draft = None

    def edit_expense(self, index: int, candidate: Optional[DraftInput] = None) -> Expense:
        """
        Replace the expense at `index` (default candidate: the editing draft).

        Raises:
            ExpenseValidationError: if date, category or amount is missing,
                or amount is not numeric. State is left unchanged.
            IndexError: if `index` is out of range
        """
        self._check_index(self._expenses, index, "expense")

        if candidate is None:
            candidate = self._editing_draft
        if candidate is None:
            issues = [ValidationIssue(
                field="expense",
                issue_type="missing",
                message="Nothing to save",
            )]
            self._audit.log(AuditEventBuilder.expense_edit_rejected(
                index=index,
                issues=[i.model_dump() for i in issues],
            ))
            raise ExpenseValidationError(issues)

        result = self._validator().validate(self._as_draft(candidate))
        if not result.is_valid:
            errors = [i for i in result.issues if i.severity == "error"]
            self._audit.log(AuditEventBuilder.expense_edit_rejected(
                index=index,
                issues=[i.model_dump() for i in errors],
            ))
            raise ExpenseValidationError(errors)

        updated = list(self._expenses)
        updated[index] = result.expense
        self._expenses = updated
        self.cancel_edit()
        self._audit.log(AuditEventBuilder.expense_edited(
            index=index,
            expense=result.expense.model_dump(),
        ))
        self._persist()
        return result.expense.model_copy()

    def delete_expense(self, index: int) -> Expense:
        """Remove the expense at `index`, keeping the order of the rest."""
        self._check_index(self._expenses, index, "expense")
        removed = self._expenses[index]
        self._expenses = [e for i, e in enumerate(self._expenses) if i != index]

        if self._editing_index is not None:
            if self._editing_index == index:
                self.cancel_edit()
            elif self._editing_index > index:
                self._editing_index -= 1

        self._audit.log(AuditEventBuilder.expense_deleted(
            index=index,
            expense=removed.model_dump(),
        ))
        self._persist()
        return removed

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def set_category_budget(self, index: int, value: Any) -> None:
        """
        Overwrite the raw budget of the category at `index`.

        Any input is accepted; invalid budgets count as 0 when summed.
        """
        self._require_mode(BudgetMode.PER_CATEGORY, "Per-category budgets")
        self._check_index(self._categories, index, "category")

        if value is None:
            value = ""
        elif isinstance(value, bool) or not isinstance(value, (str, int, float)):
            value = str(value)

        category = self._categories[index]
        updated = list(self._categories)
        updated[index] = Category(name=category.name, budget=value)
        event = AuditEventBuilder.category_budget_set(
            name=category.name,
            budget=str(value),
        )

        self._categories = updated
        self._audit.log(event)
        self._persist()

    def add_category(self, name: Optional[str]) -> bool:
        """
        Append a category.

        Blank names and exact duplicates are ignored silently (False).
        """
        self._require_custom_categories()
        name = (name or "").strip()
        if not name or name in self.category_names:
            return False

        self._categories = [*self._categories, Category(name=name)]
        self._audit.log(AuditEventBuilder.category_added(name=name))
        self._persist()
        return True

    def rename_category(self, index: int, new_name: str) -> int:
        """
        Rename a category and every expense that refers to it.

        Returns the number of expenses relabelled.

        Raises:
            CategoryError: if the new name is blank or already taken
        """
        self._require_custom_categories()
        self._check_index(self._categories, index, "category")

        old = self._categories[index]
        new_name = (new_name or "").strip()
        if not new_name:
            raise CategoryError("Category name cannot be blank")
        if new_name == old.name:
            return 0
        if new_name in self.category_names:
            raise CategoryError(f"Category {new_name!r} already exists")

        categories = list(self._categories)
        categories[index] = Category(name=new_name, budget=old.budget)
        self._categories = categories

        relabelled = 0
        expenses = []
        for expense in self._expenses:
            if expense.category == old.name:
                expense = expense.model_copy(update={"category": new_name})
                relabelled += 1
            expenses.append(expense)
        self._expenses = expenses

        if self.draft.category == old.name:
            self.update_draft(category=new_name)
        if self._editing_draft is not None and self._editing_draft.category == old.name:
            self.update_editing_draft(category=new_name)

        self._audit.log(AuditEventBuilder.category_renamed(
            old_name=old.name,
            new_name=new_name,
            expenses_updated=relabelled,
        ))
        self._persist()
        return relabelled

    def remove_category(self, index: int) -> Category:
        """
        Remove a category that no expense refers to.

        Raises:
            CategoryInUseError: if any expense still uses the category
        """
        self._require_custom_categories()
        self._check_index(self._categories, index, "category")

        category = self._categories[index]
        in_use = sum(1 for e in self._expenses if e.category == category.name)
        if in_use:
            raise CategoryInUseError(
                f"Category {category.name!r} is used by {in_use} expense(s)"
            )

        self._categories = [c for i, c in enumerate(self._categories) if i != index]
        self._audit.log(AuditEventBuilder.category_removed(name=category.name))
        self._persist()
        return category

    # -------------------------------------------------------------------------
    # Trip
    # -------------------------------------------------------------------------

    def set_trip_details(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        budget: Optional[Union[str, float]] = None,
    ) -> TripDetails:
        """Update the given trip-level fields. Dates are not checked."""
        self._require_mode(BudgetMode.TRIP, "Trip-wide budget")
        changes = {
            key: value
            for key, value in (
                ("start_date", start_date),
                ("end_date", end_date),
                ("budget", budget),
            )
            if value is not None
        }
        if not changes:
            return self.trip

        self._trip = TripDetails(**{**self._trip.model_dump(), **changes})
        self._audit.log(AuditEventBuilder.trip_details_updated(changes=changes))
        self._persist()
        return self.trip

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def confirm_reset(self) -> None:
        """Open the reset confirmation. Nothing changes yet."""
        self._reset_pending = True
        self._audit.log(AuditEventBuilder.reset_requested())

    def cancel_reset(self) -> None:
        """Close the reset confirmation, leaving all state untouched."""
        if self._reset_pending:
            self._reset_pending = False
            self._audit.log(AuditEventBuilder.reset_cancelled())

    def reset(self) -> None:
        """
        Restore defaults and erase the stored snapshot.

        Raises:
            ResetNotConfirmedError: unless confirm_reset() was called first
        """
        if not self._reset_pending:
            raise ResetNotConfirmedError("Reset must be confirmed first")

        cleared = len(self._expenses)
        self._categories = self._default_categories()
        self._expenses = []
        self._trip = TripDetails()
        self.draft = ExpenseDraft()
        self.cancel_edit()
        self._reset_pending = False

        try:
            self._storage.clear()
            self.last_save_failed = False
        except StorageError as e:
            self.last_save_failed = True
            self._audit.log(AuditEventBuilder.save_failed(error_message=str(e)))

        self._audit.log(AuditEventBuilder.ledger_reset(expenses_cleared=cleared))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _default_categories(self) -> list[Category]:
        return [Category(name=name) for name in self._settings.default_categories]

    def _validator(self) -> ExpenseValidator:
        return ExpenseValidator(known_categories=self.category_names)

    @staticmethod
    def _as_draft(candidate: DraftInput) -> ExpenseDraft:
        if isinstance(candidate, ExpenseDraft):
            return candidate
        if isinstance(candidate, Expense):
            return ExpenseDraft.from_expense(candidate)
        return ExpenseDraft.model_validate(candidate)

    @staticmethod
    def _check_index(items: list, index: int, what: str) -> None:
        if not 0 <= index < len(items):
            raise IndexError(f"No {what} at position {index}")

    def _require_mode(self, mode: BudgetMode, feature: str) -> None:
        if self._mode != mode:
            raise UnsupportedOperationError(
                f"{feature} not available in {self._mode.value} mode"
            )

    def _require_custom_categories(self) -> None:
        if not self._settings.allow_custom_categories:
            raise UnsupportedOperationError("Custom categories are disabled")

    def _load(self) -> None:
        """Load the stored snapshot; malformed data falls back to defaults."""
        try:
            loaded = self._storage.load()
        except StorageError as e:
            self._audit.log(AuditEventBuilder.snapshot_load_failed(error_message=str(e)))
            return

        if loaded is None:
            return

        if loaded.categories is not None:
            self._categories = list(loaded.categories)
        self._expenses = list(loaded.expenses)
        self._trip = loaded.trip
        self._audit.log(AuditEventBuilder.snapshot_loaded(
            category_count=len(self._categories),
            expense_count=len(self._expenses),
        ))

    def _persist(self) -> None:
        try:
            self._storage.save(self.snapshot())
            self.last_save_failed = False
        except StorageError as e:
            self.last_save_failed = True
            self._audit.log(AuditEventBuilder.save_failed(error_message=str(e)))
