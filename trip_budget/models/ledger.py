"""
Core Data Models for the Trip Budget Ledger

These models define the schemas for everything the ledger stores and derives.
They are designed to:
1. Reject structurally invalid records at the boundary
2. Keep raw user input (budgets) separate from validated records (expenses)
3. Serialize to the single persisted blob layout

DESIGN DECISION: Category budgets and the trip budget are kept RAW.
Whatever the user typed is stored as-is; numeric coercion happens only
when aggregates are computed, so an invalid budget simply counts as zero.
"""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# Raw numeric input as typed into a form: "", "12.5", or an already-parsed number.
RawAmount = Union[str, float]


# =============================================================================
# ENUMS
# =============================================================================

class BudgetMode(str, Enum):
    """
    How the total budget is planned.

    PER_CATEGORY: every category carries its own budget, total = sum.
    TRIP: one trip-wide budget, categories are plain labels.
    """
    PER_CATEGORY = "per_category"
    TRIP = "trip"


# =============================================================================
# LEDGER RECORDS
# =============================================================================

class Category(BaseModel):
    """
    A spending category.

    The name is the identity of the category; expenses refer to it by name.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Category name (unique within the ledger)"
    )
    budget: RawAmount = Field(
        default="",
        description="Raw budget as entered; blank or invalid counts as 0"
    )


class Expense(BaseModel):
    """
    A logged expense.

    Only validated expenses are stored. The amount is always a number
    once an expense exists, whatever form the input had.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    date: str = Field(
        ...,
        min_length=1,
        description="Calendar date of the expense (free-form)"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Name of the category this expense belongs to"
    )
    description: str = Field(
        default="",
        description="Optional free-text note"
    )
    amount: float = Field(
        ...,
        allow_inf_nan=False,
        description="Amount spent"
    )


class ExpenseDraft(BaseModel):
    """
    Unvalidated expense input, straight from a form.

    Every field may be blank. The validator decides whether a draft can
    become an Expense.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    date: str = ""
    category: str = ""
    description: str = ""
    amount: RawAmount = ""

    @model_validator(mode="before")
    @classmethod
    def blank_missing_values(cls, data: Any) -> Any:
        """Treat None in any field as a blank entry."""
        if isinstance(data, dict):
            return {key: ("" if value is None else value) for key, value in data.items()}
        return data

    @classmethod
    def from_expense(cls, expense: Expense) -> "ExpenseDraft":
        """Prefill a draft for editing an existing expense."""
        return cls(**expense.model_dump())


class TripDetails(BaseModel):
    """Trip-wide fields used in TRIP budget mode. Purely descriptive dates."""
    model_config = ConfigDict(str_strip_whitespace=True)

    start_date: str = ""
    end_date: str = ""
    budget: RawAmount = ""


# =============================================================================
# SNAPSHOT - the unit of persistence
# =============================================================================

class LedgerSnapshot(BaseModel):
    """
    Complete serializable state of the ledger at a point in time.

    `categories` is None when a stored blob had no categories at all;
    the store replaces that with the default set. An explicitly empty
    list is kept as-is.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    categories: Optional[list[Category]] = None
    expenses: list[Expense] = Field(default_factory=list)
    start_date: str = Field(default="", alias="startDate")
    end_date: str = Field(default="", alias="endDate")
    budget: RawAmount = ""

    @field_validator("categories", mode="before")
    @classmethod
    def accept_plain_names(cls, v: Any) -> Any:
        """Trip-mode blobs store categories as bare name strings."""
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v

    @field_validator("expenses", mode="before")
    @classmethod
    def default_missing_expenses(cls, v: Any) -> Any:
        return [] if v is None else v

    @model_validator(mode="after")
    def validate_unique_categories(self) -> "LedgerSnapshot":
        """Category names must be unique."""
        if self.categories:
            names = [c.name for c in self.categories]
            if len(names) != len(set(names)):
                raise ValueError("Category names must be unique")
        return self

    @property
    def trip(self) -> TripDetails:
        return TripDetails(
            start_date=self.start_date,
            end_date=self.end_date,
            budget=self.budget,
        )

    def to_blob(self, mode: BudgetMode) -> dict:
        """
        Convert to the persisted blob layout.

        PER_CATEGORY: {categories: [{name, budget}], expenses}
        TRIP: {startDate, endDate, budget, categories: [name], expenses}
        """
        categories = self.categories or []
        expenses = [expense.model_dump() for expense in self.expenses]

        if mode == BudgetMode.TRIP:
            return {
                "startDate": self.start_date,
                "endDate": self.end_date,
                "budget": self.budget,
                "categories": [c.name for c in categories],
                "expenses": expenses,
            }

        return {
            "categories": [c.model_dump() for c in categories],
            "expenses": expenses,
        }

    @classmethod
    def from_blob(cls, blob: Any) -> "LedgerSnapshot":
        """
        Parse a persisted blob.

        Raises:
            ValueError: if the blob is not an object or fails validation
        """
        if not isinstance(blob, dict):
            raise ValueError(f"Snapshot must be a JSON object, got {type(blob).__name__}")
        return cls.model_validate(blob)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in an expense draft."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_numeric')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
    )


class ValidationResult(BaseModel):
    """Outcome of validating one expense draft."""

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    # Set only when the draft is valid
    expense: Optional[Expense] = None

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")


# =============================================================================
# DERIVED VIEW MODELS - computed on every read, never stored
# =============================================================================

class ChartSlice(BaseModel):
    """One slice of the spending-breakdown chart."""

    name: str
    value: float


class CategorySummary(BaseModel):
    """Per-category line of the textual breakdown."""

    name: str
    budget: float
    spent: float
    # Only meaningful in PER_CATEGORY mode
    remaining: Optional[float] = None

    @property
    def over_budget(self) -> bool:
        return self.remaining is not None and self.remaining < 0


class LedgerSummary(BaseModel):
    """Everything the presentation layer needs to render the ledger."""

    mode: BudgetMode
    total_budget: float
    total_spent: float
    remaining: float
    categories: list[CategorySummary] = Field(default_factory=list)
    chart: list[ChartSlice] = Field(default_factory=list)

    @property
    def over_budget(self) -> bool:
        """Negative remaining is flagged for display, never an error."""
        return self.remaining < 0
