"""
Streamlit Frontend for Expense Tracker

One page per menu action:
add, view all, filter by category, category totals, filter by date,
delete, top N.

The UI is the only place user input is parsed. Everything handed to
the store has already passed ExpenseInput validation.
"""

from datetime import date

import streamlit as st
from pydantic import ValidationError

from expense_tracker.audit import create_correlation_id
from expense_tracker.config import get_settings
from expense_tracker.models.expense import ExpenseInput, QueryResult, QueryType, StructuredQuery, TotalsPolicy
from expense_tracker.orchestrator import ExpenseFlow, QueryFlow, create_app_components
from expense_tracker.store import ExpenseStore


st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)


PAGES = [
    "➕ Add Expense",
    "📋 View Expenses",
    "🏷️ Filter by Category",
    "📊 Category Totals",
    "📅 Filter by Date",
    "🗑️ Delete Expense",
    "🏆 Top Expenses",
]


@st.cache_resource
def get_components():
    """Get or create application components (cached for the process)."""
    return create_app_components()


def main():
    """Main application entry point."""
    expense_flow, query_flow, store = get_components()

    st.sidebar.title("💸 Expense Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio("Navigate to:", PAGES, index=0)

    st.sidebar.markdown("---")
    st.sidebar.caption(
        f"{store.visible_count()} visible / {len(store)} recorded expenses"
    )

    if page == PAGES[0]:
        render_add_page(expense_flow)
    elif page == PAGES[1]:
        render_records_page(query_flow, StructuredQuery(query_type=QueryType.LIST), "📋 All Expenses")
    elif page == PAGES[2]:
        render_category_page(query_flow, store)
    elif page == PAGES[3]:
        render_totals_page(query_flow, store)
    elif page == PAGES[4]:
        render_date_page(query_flow)
    elif page == PAGES[5]:
        render_delete_page(expense_flow)
    elif page == PAGES[6]:
        render_top_page(query_flow)


def render_add_page(expense_flow: ExpenseFlow):
    """Render the add expense form."""
    st.title("➕ Add Expense")

    with st.form("add_expense", clear_on_submit=True):
        amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f")
        category = st.text_input("Category", placeholder="e.g., food")
        expense_date = st.date_input("Date", value=date.today())
        submitted = st.form_submit_button("Save", type="primary")

    if submitted:
        try:
            expense_input = ExpenseInput(
                amount=amount,
                category=category,
                date=expense_date.isoformat(),
            )
        except ValidationError as e:
            for error in e.errors():
                st.error(f"{error['loc'][0]}: {error['msg']}")
            return

        expense = expense_flow.add_expense(
            expense_input,
            correlation_id=create_correlation_id(),
        )
        st.success(
            f"Saved expense #{expense.index}: ${expense.amount:,.2f} | "
            f"{expense.category} | {expense.date}"
        )


def render_records_page(query_flow: QueryFlow, query: StructuredQuery, title: str):
    """Run a record query and render it as a table."""
    st.title(title)
    result = query_flow.run(query, correlation_id=create_correlation_id())
    render_records(result, empty_message="No expenses recorded yet.")


def render_category_page(query_flow: QueryFlow, store: ExpenseStore):
    """Render the category filter."""
    st.title("🏷️ Filter by Category")
    category = st.text_input("Category")

    if not category.strip():
        return

    result = query_flow.run(
        StructuredQuery(query_type=QueryType.CATEGORY, category=category),
        correlation_id=create_correlation_id(),
    )

    # The store does not distinguish "never seen" from "all deleted".
    if category.strip() not in store.category_totals():
        st.info("No expenses found for this category.")
        return

    render_records(result, empty_message="All expenses in this category were deleted.")


def render_totals_page(query_flow: QueryFlow, store: ExpenseStore):
    """Render running totals per category."""
    st.title("📊 Total Expenses by Category")

    result = query_flow.run(
        StructuredQuery(query_type=QueryType.TOTALS),
        correlation_id=create_correlation_id(),
    )

    if not result.data_found:
        st.info("No expenses recorded yet.")
        return

    totals = result.aggregation_result["totals"]
    st.table(
        [{"Category": category, "Total": f"${total:,.2f}"} for category, total in totals.items()]
    )
    st.metric("Grand total", f"${result.aggregation_result['grand_total']:,.2f}")

    if store.totals_policy == TotalsPolicy.CUMULATIVE:
        st.caption("Totals include deleted expenses.")


def render_date_page(query_flow: QueryFlow):
    """Render the date filter."""
    st.title("📅 Filter by Date")
    target = st.date_input("Date", value=date.today())

    result = query_flow.run(
        StructuredQuery(query_type=QueryType.DATE, date=target.isoformat()),
        correlation_id=create_correlation_id(),
    )
    render_records(result, empty_message=f"No expenses found for date: {target.isoformat()}")


def render_delete_page(expense_flow: ExpenseFlow):
    """Render the delete form."""
    st.title("🗑️ Delete Expense")

    index = st.number_input("Index to delete", min_value=0, step=1, value=0)

    if st.button("Delete", type="primary"):
        success, message = expense_flow.delete_expense(
            int(index),
            correlation_id=create_correlation_id(),
        )
        if success:
            st.success(message)
        else:
            st.error(message)


def render_top_page(query_flow: QueryFlow):
    """Render the top N view."""
    st.title("🏆 Top Expenses")

    n = st.number_input(
        "N",
        min_value=0,
        max_value=100,
        step=1,
        value=get_settings().tracker.default_top_n,
    )

    result = query_flow.run(
        StructuredQuery(query_type=QueryType.TOP, limit=int(n)),
        correlation_id=create_correlation_id(),
    )
    render_records(result, empty_message="No expenses to rank.")


def render_records(result: QueryResult, empty_message: str):
    """Render record results as a table, or a message when empty."""
    if not result.success:
        st.error(result.error_message)
        return

    if not result.data_found:
        st.info(empty_message)
        return

    st.table(
        [
            {
                "Index": row["index"],
                "Amount": f"${row['amount']:,.2f}",
                "Category": row["category"],
                "Date": row["date"],
            }
            for row in result.results
        ]
    )
    st.caption(result.query_description)


if __name__ == "__main__":
    main()
