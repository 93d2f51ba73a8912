"""
Streamlit Frontend for the Trip Budget Ledger

A thin page over the ledger store. It renders forms, lists, a pie chart
and the reset confirmation, and forwards every user intent to the store.

DESIGN PRINCIPLES:
1. The page holds no ledger state of its own; the store does
2. Aggregates are read fresh from the store on every rerun
3. Reset always goes through an explicit confirmation
"""

import pandas as pd
import plotly.express as px
import streamlit as st

from trip_budget.audit import configure_logging
from trip_budget.config import get_settings
from trip_budget.errors import CategoryError
from trip_budget.models.ledger import BudgetMode, ExpenseDraft
from trip_budget.orchestrator import create_app_components
from trip_budget.validation import ExpenseValidationError


# Page configuration
st.set_page_config(
    page_title="Vacation Budget Tracker",
    page_icon="🧳",
    layout="centered",
)

st.markdown("""
<style>
    .over-budget {
        color: #dc3545;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)


def get_store():
    """Get or create this session's ledger store."""
    if "store" not in st.session_state:
        configure_logging(get_settings().app.log_level)
        # Unreadable stored data is handled by the store, which starts from defaults
        store, _, _ = create_app_components(use_storage=True)
        st.session_state.store = store
    return st.session_state.store


def widget_key(name: str) -> str:
    """
    Session key for an input mirroring ledger state.

    The generation changes on reset, so inputs start over from the
    restored defaults instead of their last typed values.
    """
    generation = st.session_state.setdefault("widget_generation", 0)
    return f"{name}_{generation}"


def money(amount: float) -> str:
    symbol = get_settings().app.currency_symbol
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def expense_inputs(prefix: str, draft: ExpenseDraft, category_names: list[str]) -> ExpenseDraft:
    """Render the four expense fields and return what the user entered."""
    col1, col2 = st.columns(2)
    with col1:
        date = st.text_input("Date", value=draft.date, placeholder="YYYY-MM-DD", key=f"{prefix}_date")
        options = [""] + category_names
        if draft.category and draft.category not in options:
            options.append(draft.category)
        category = st.selectbox(
            "Category",
            options=options,
            index=options.index(draft.category),
            format_func=lambda x: "Select Category" if x == "" else x,
            key=f"{prefix}_category",
        )
    with col2:
        description = st.text_input("Description", value=draft.description, key=f"{prefix}_description")
        amount = st.text_input("Amount", value=str(draft.amount), key=f"{prefix}_amount")
    return ExpenseDraft(date=date, category=category, description=description, amount=amount)


def update_trip_field(store, field: str, key: str):
    store.set_trip_details(**{field: st.session_state[key]})


def render_trip_details(store):
    """Sidebar inputs for the trip-wide budget mode."""
    st.sidebar.markdown("### Trip")
    trip = store.trip
    for label, field, value in (
        ("Start date", "start_date", trip.start_date),
        ("End date", "end_date", trip.end_date),
        ("Trip budget", "budget", str(trip.budget)),
    ):
        key = widget_key(f"trip_{field}")
        st.sidebar.text_input(
            label,
            value=value,
            key=key,
            on_change=update_trip_field,
            args=(store, field, key),
        )


def render_add_expense(store):
    st.header("Add Expense")
    with st.form("add_expense", clear_on_submit=True):
        draft = expense_inputs("new", store.draft, store.category_names)
        if st.form_submit_button("Add"):
            # Incomplete input is ignored without a notice
            store.add_expense(draft)


def render_expenses(store):
    st.header("Expenses")
    expenses = store.expenses
    if not expenses:
        st.caption("No expenses yet.")

    for i, expense in enumerate(expenses):
        if store.editing_index == i:
            with st.form(f"edit_expense_{i}"):
                draft = expense_inputs(f"edit_{i}", store.editing_draft, store.category_names)
                save_col, cancel_col = st.columns(2)
                save = save_col.form_submit_button("Save")
                cancel = cancel_col.form_submit_button("Cancel")
            if save:
                try:
                    store.edit_expense(i, draft)
                    st.rerun()
                except ExpenseValidationError as e:
                    st.error(e.message)
            elif cancel:
                store.cancel_edit()
                st.rerun()
            continue

        text_col, edit_col, delete_col = st.columns([6, 1, 1])
        text_col.write(
            f"{expense.date} | {expense.category} | {expense.description} - {money(expense.amount)}"
        )
        if edit_col.button("Edit", key=f"edit_{i}"):
            store.start_edit(i)
            st.rerun()
        if delete_col.button("Delete", key=f"delete_{i}"):
            store.delete_expense(i)
            st.rerun()


def render_summary(store):
    summary = store.summary()

    st.header("Summary")
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Budget", money(summary.total_budget))
    col2.metric("Spent", money(summary.total_spent))
    col3.metric("Remaining", money(summary.remaining))
    if summary.over_budget:
        st.warning("You are over budget.")

    st.header("Spending Breakdown")
    if not summary.chart:
        st.info("No spending yet.")
    else:
        df = pd.DataFrame([s.model_dump() for s in summary.chart])
        fig = px.pie(df, values="value", names="name")
        fig.update_layout(height=350)
        st.plotly_chart(fig, use_container_width=True)

    st.header("Category Spending")
    for line in summary.categories:
        if summary.mode == BudgetMode.PER_CATEGORY:
            css = "over-budget" if line.over_budget else ""
            st.markdown(
                f"**{line.name}**: Spent: {money(line.spent)} | Budget: {money(line.budget)} "
                f"| Remaining: <span class='{css}'>{money(line.remaining)}</span>",
                unsafe_allow_html=True,
            )
        else:
            st.markdown(f"**{line.name}**: Spent: {money(line.spent)}")


def update_budget(store, index: int, key: str):
    store.set_category_budget(index, st.session_state[key])


def render_category_budgets(store):
    st.header("Set Category Budgets")
    for i, category in enumerate(store.categories):
        name_col, budget_col = st.columns([2, 1])
        name_col.markdown(f"**{category.name}**")
        key = widget_key(f"budget_{category.name}")
        budget_col.text_input(
            "Budget",
            value=str(category.budget),
            key=key,
            on_change=update_budget,
            args=(store, i, key),
            label_visibility="collapsed",
            placeholder="Budget",
        )


def render_manage_categories(store):
    st.header("Categories")
    with st.form("add_category", clear_on_submit=True):
        name = st.text_input("New category")
        if st.form_submit_button("Add Category"):
            # Blank and duplicate names are ignored
            store.add_category(name)
            st.rerun()

    with st.expander("Rename or remove"):
        names = store.category_names
        if not names:
            return
        index = st.selectbox(
            "Category",
            options=range(len(names)),
            format_func=lambda i: names[i],
            key=widget_key("manage_category"),
        )
        new_name = st.text_input("New name", key="rename_to")
        rename_col, remove_col = st.columns(2)
        if rename_col.button("Rename"):
            try:
                store.rename_category(index, new_name)
                st.rerun()
            except CategoryError as e:
                st.error(str(e))
        if remove_col.button("Remove"):
            try:
                store.remove_category(index)
                st.rerun()
            except CategoryError as e:
                st.error(str(e))


def render_reset(store):
    st.markdown("---")
    if not store.reset_pending:
        if st.button("Reset", key="reset"):
            store.confirm_reset()
            st.rerun()
        return

    st.warning(
        "**Are you sure you want to reset?**\n\n"
        "This will delete all your vacation data from this device."
    )
    yes_col, cancel_col = st.columns(2)
    if yes_col.button("Yes, Reset", type="primary", key="confirm_reset"):
        store.reset()
        st.session_state.widget_generation = st.session_state.get("widget_generation", 0) + 1
        st.rerun()
    if cancel_col.button("Cancel", key="cancel_reset"):
        store.cancel_reset()
        st.rerun()


def main():
    """Main application entry point."""
    store = get_store()

    st.title("Vacation Budget Tracker")

    if store.mode == BudgetMode.TRIP:
        render_trip_details(store)

    render_add_expense(store)
    render_expenses(store)
    render_summary(store)

    if store.mode == BudgetMode.PER_CATEGORY:
        render_category_budgets(store)
    if store.allow_custom_categories:
        render_manage_categories(store)

    render_reset(store)

    if store.last_save_failed:
        st.warning("Your changes could not be saved on this device.")


if __name__ == "__main__":
    main()
