"""
Ledger Aggregation

DESIGN DECISION: Aggregates are DERIVED, never stored.
Every function here is pure and recomputes from the snapshot it is given.
There is no cache to invalidate; a single trip's data is small.

Raw budget values are coerced here and only here. Blank or unparseable
budgets contribute 0 to every sum, never an error.
"""

from typing import Any

from trip_budget.models.ledger import (
    BudgetMode,
    Category,
    CategorySummary,
    ChartSlice,
    LedgerSnapshot,
    LedgerSummary,
)
from trip_budget.validation.validator import parse_number


def parse_amount(value: Any) -> float:
    """Coerce a raw amount, treating blank or invalid input as 0."""
    number = parse_number(value)
    return 0.0 if number is None else number


def total_budget(snapshot: LedgerSnapshot, mode: BudgetMode) -> float:
    """
    Overall budget.

    PER_CATEGORY: sum of every category budget.
    TRIP: the single trip budget.
    """
    if mode == BudgetMode.TRIP:
        return parse_amount(snapshot.budget)
    return sum(parse_amount(c.budget) for c in snapshot.categories or [])


def total_spent(snapshot: LedgerSnapshot) -> float:
    """Sum of all expense amounts, whatever their category."""
    return sum(e.amount for e in snapshot.expenses)


def remaining(snapshot: LedgerSnapshot, mode: BudgetMode) -> float:
    """Budget left. Negative when over budget."""
    return total_budget(snapshot, mode) - total_spent(snapshot)


def per_category_spent(snapshot: LedgerSnapshot, name: str) -> float:
    """Sum of expenses whose category matches `name` exactly."""
    return sum(e.amount for e in snapshot.expenses if e.category == name)


def category_remaining(snapshot: LedgerSnapshot, category: Category) -> float:
    """Category budget minus what was spent in it (PER_CATEGORY mode)."""
    return parse_amount(category.budget) - per_category_spent(snapshot, category.name)


def chart_series(snapshot: LedgerSnapshot) -> list[ChartSlice]:
    """
    Pie chart data: one slice per category with positive spending.

    Zero-spend categories are left out here but still appear in
    category_breakdown().
    """
    slices = []
    for category in snapshot.categories or []:
        value = per_category_spent(snapshot, category.name)
        if value > 0:
            slices.append(ChartSlice(name=category.name, value=value))
    return slices


def category_breakdown(snapshot: LedgerSnapshot, mode: BudgetMode) -> list[CategorySummary]:
    """Per-category lines for every category, in category order."""
    breakdown = []
    for category in snapshot.categories or []:
        spent = per_category_spent(snapshot, category.name)
        if mode == BudgetMode.PER_CATEGORY:
            budget = parse_amount(category.budget)
            breakdown.append(CategorySummary(
                name=category.name,
                budget=budget,
                spent=spent,
                remaining=budget - spent,
            ))
        else:
            breakdown.append(CategorySummary(name=category.name, budget=0.0, spent=spent))
    return breakdown


def summarize(snapshot: LedgerSnapshot, mode: BudgetMode) -> LedgerSummary:
    """Compute every aggregate the presentation layer shows."""
    budget = total_budget(snapshot, mode)
    spent = total_spent(snapshot)
    return LedgerSummary(
        mode=mode,
        total_budget=budget,
        total_spent=spent,
        remaining=budget - spent,
        categories=category_breakdown(snapshot, mode),
        chart=chart_series(snapshot),
    )
