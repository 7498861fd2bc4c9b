"""Streamlit app for the expense tracker.

The sidebar switches between four screens: adding an expense, browsing
the list, the seven-day report and exporting.  All data access goes
through a single :class:`~expense_tracker.service.ExpenseService` kept
in ``st.session_state``; the screens only read its state and call its
actions, and show ``service.state.error`` when an action fails.

To run the dashboard from the command line::

    streamlit run expense_tracker/dashboard.py

or use ``run_dashboard.py`` in the project root.
"""

from __future__ import annotations

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import streamlit as st

# Conditional imports to support execution both as part of a package
# and directly through ``streamlit run expense_tracker/dashboard.py``.
if __package__:
    from . import aggregation as agg
    from . import visualization as viz
    from .categories import ExpenseCategory
    from .config import ensure_data_directories
    from .db import ExpenseStore
    from .formatting import format_currency, format_display_date, format_percentage
    from .service import ExpenseService
    from .validation import NOTES_MAX_LENGTH, build_expense
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from expense_tracker import aggregation as agg  # type: ignore
    from expense_tracker import visualization as viz  # type: ignore
    from expense_tracker.categories import ExpenseCategory  # type: ignore
    from expense_tracker.config import ensure_data_directories  # type: ignore
    from expense_tracker.db import ExpenseStore  # type: ignore
    from expense_tracker.formatting import format_currency, format_display_date, format_percentage  # type: ignore
    from expense_tracker.service import ExpenseService  # type: ignore
    from expense_tracker.validation import NOTES_MAX_LENGTH, build_expense  # type: ignore

SERVICE_KEY = 'expense_service'
PAGES = ["Add Expense", "Expenses", "Report", "Export"]


def _get_service(db_path: Union[str, Path, None] = None) -> ExpenseService:
    """Return the session's service, creating the store on first use."""
    if SERVICE_KEY not in st.session_state:
        if db_path is None:
            ensure_data_directories()
        store = ExpenseStore(db_path)
        store.init_db()
        st.session_state[SERVICE_KEY] = ExpenseService(store)
    return st.session_state[SERVICE_KEY]


def _category_label(category: Optional[ExpenseCategory]) -> str:
    if category is None:
        return "Select a category"
    return f"{viz.category_icon(category.name)} {category.display_name}"


def _show_error(service: ExpenseService) -> None:
    if service.state.error:
        st.error(service.state.error)
        service.clear_error()


def render_entry_form(service: ExpenseService) -> None:
    st.subheader("Add Expense")
    with st.form("expense_entry", clear_on_submit=False):
        title = st.text_input("Title")
        amount_text = st.text_input("Amount")
        category = st.selectbox(
            "Category",
            options=[None] + ExpenseCategory.all_categories(),
            format_func=_category_label,
        )
        notes = st.text_area("Notes (optional)", max_chars=NOTES_MAX_LENGTH)
        col1, col2 = st.columns(2)
        day = col1.date_input("Date", value=datetime.now().date())
        time_of_day = col2.time_input("Time", value=datetime.now().time())
        submitted = st.form_submit_button("Save Expense")

    if not submitted:
        return

    result = service.validate(title, amount_text, category, notes)
    if not result.is_valid:
        for message in result.errors:
            st.error(message)
        return

    record = build_expense(
        title,
        amount_text,
        category,
        notes=notes,
        date=datetime.combine(day, time_of_day),
    )
    if service.add_record(record):
        st.success("Expense saved")
        service.reset_expense_added_state()
    _show_error(service)


def render_expense_list(service: ExpenseService) -> None:
    st.subheader("Expenses")
    col1, col2 = st.columns([3, 1])
    selected = col1.selectbox(
        "Filter by category",
        options=[None] + ExpenseCategory.all_categories(),
        format_func=lambda c: "All categories" if c is None else _category_label(c),
    )
    group_by_category = col2.checkbox("Group by category")
    service.filter_by_category(selected)

    expenses = service.visible_expenses(group_by_category)
    st.metric("Total", format_currency(sum(record.amount for record in expenses)))

    if not expenses:
        st.info("No expenses found. Try a different category or clear the filter.")
        return

    for record in expenses:
        cols = st.columns([1, 4, 2, 2, 1])
        cols[0].markdown(viz.category_icon(record.category))
        cols[1].markdown(f"**{record.title}**  \n{record.notes or ''}")
        cols[2].write(format_display_date(record.date))
        cols[3].write(format_currency(record.amount))
        if cols[4].button("Delete", key=f"delete_{record.id}"):
            service.delete_expense(record)
            st.rerun()
    _show_error(service)


def render_report(service: ExpenseService) -> None:
    st.subheader("Expense Report (last 7 days)")
    summary = service.weekly_summary()

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Spent", format_currency(summary['total']))
    col2.metric("Daily Average", format_currency(summary['daily_average']))
    col3.metric("Expenses", summary['count'])
    st.caption(f"Today: {format_currency(summary['today_total'])}")

    st.plotly_chart(viz.create_daily_totals_chart(summary['daily_totals']), use_container_width=True)

    breakdown = summary['category_breakdown']
    col1, col2 = st.columns(2)
    col1.plotly_chart(viz.create_category_pie_chart(breakdown), use_container_width=True)
    col2.plotly_chart(viz.create_category_bar_chart(breakdown), use_container_width=True)
    for entry, percentage in agg.category_percentages(breakdown):
        st.write(
            f"{viz.category_icon(entry.category)} {ExpenseCategory.from_string(entry.category).display_name}: "
            f"{format_currency(entry.total_amount)} ({format_percentage(percentage)})"
        )


def render_export(service: ExpenseService) -> None:
    st.subheader("Export")
    st.write(f"{service.total_count} expenses will be exported.")
    col1, col2 = st.columns(2)

    if col1.button("Export CSV"):
        result = service.export_csv()
        if result is not None:
            col1.download_button(
                label="📥 Download CSV",
                data=result.path.read_bytes(),
                file_name=result.path.name,
                mime=result.mime_type,
            )

    if col2.button("Export PDF"):
        result = service.export_pdf()
        if result is not None:
            col2.download_button(
                label="📥 Download PDF",
                data=result.path.read_bytes(),
                file_name=result.path.name,
                mime=result.mime_type,
            )
    _show_error(service)


def main() -> None:
    """Entry point for the Streamlit app."""
    st.set_page_config(page_title="Expense Tracker", layout="wide")
    st.title("Expense Tracker")
    service = _get_service()

    st.sidebar.metric("Today", format_currency(service.today_total))
    page = st.sidebar.radio("Go to", PAGES)

    if page == "Add Expense":
        render_entry_form(service)
    elif page == "Expenses":
        render_expense_list(service)
    elif page == "Report":
        render_report(service)
    else:
        render_export(service)


if __name__ == "__main__":
    main()
