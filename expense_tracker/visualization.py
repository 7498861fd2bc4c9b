"""Plotly visualisation helpers for the expense report.

Each function accepts the output of a function in :mod:`aggregation`
and returns a `plotly.graph_objects.Figure` that Streamlit renders via
``st.plotly_chart``.  Empty inputs produce an empty figure titled
"No data to display" rather than raising.

Category colours and icons are a presentation concern and are kept in
the lookup tables below, keyed by category token.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .categories import ExpenseCategory, display_name_for
from .models import CategoryTotal

CATEGORY_COLORS = {
    ExpenseCategory.STAFF.name: "#4CAF50",
    ExpenseCategory.TRAVEL.name: "#2196F3",
    ExpenseCategory.FOOD.name: "#FF9800",
    ExpenseCategory.UTILITY.name: "#9C27B0",
}

CATEGORY_ICONS = {
    ExpenseCategory.STAFF.name: "👤",
    ExpenseCategory.TRAVEL.name: "🚗",
    ExpenseCategory.FOOD.name: "🍽️",
    ExpenseCategory.UTILITY.name: "⚡",
}


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def category_color(token: str) -> str:
    return CATEGORY_COLORS.get(ExpenseCategory.from_string(token).name)


def category_icon(token: str) -> str:
    return CATEGORY_ICONS.get(ExpenseCategory.from_string(token).name)


def breakdown_to_series(breakdown: Sequence[CategoryTotal]) -> pd.Series:
    """Return totals indexed by category display name."""
    series = pd.Series(
        [entry.total_amount for entry in breakdown],
        index=[display_name_for(entry.category) for entry in breakdown],
        dtype=float,
    )
    series.index.name = "Category"
    return series


def create_daily_totals_chart(daily: Sequence[Tuple[str, float]], title: str | None = None) -> go.Figure:
    """Generate a bar chart of per-day totals.

    Parameters
    ----------
    daily : sequence of (str, float)
        ``(label, total)`` pairs, oldest day first, as returned by
        :func:`aggregation.daily_totals`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bar chart with one bar per day, in input order.
    """
    if not daily:
        return _empty_figure()
    df = pd.DataFrame(list(daily), columns=["Day", "Amount"])
    fig = px.bar(df, x="Day", y="Amount")
    fig.update_layout(
        title=title or "Daily expenses",
        xaxis_title="Day",
        yaxis_title="Amount",
    )
    fig.update_xaxes(categoryorder="array", categoryarray=df["Day"].tolist())
    return fig


def create_category_pie_chart(breakdown: Sequence[CategoryTotal], title: str | None = None) -> go.Figure:
    """Generate a pie chart showing each category's share of spending.

    Parameters
    ----------
    breakdown : sequence of CategoryTotal
        Per-category totals from :func:`aggregation.category_breakdown`.
    title : str, optional
        Title for the chart.

    Returns
    -------
    plotly.graph_objects.Figure
        Pie chart with percentage labels, coloured per category.
    """
    if not breakdown:
        return _empty_figure()
    df = pd.DataFrame({
        "Category": [display_name_for(entry.category) for entry in breakdown],
        "Amount": [entry.total_amount for entry in breakdown],
    })
    color_map = {
        display_name_for(entry.category): category_color(entry.category)
        for entry in breakdown
    }
    fig = px.pie(df, names="Category", values="Amount", color="Category", color_discrete_map=color_map)
    fig.update_traces(textinfo="percent+label")
    fig.update_layout(title=title or "Category breakdown")
    return fig


def create_category_bar_chart(breakdown: Sequence[CategoryTotal], title: str | None = None) -> go.Figure:
    """Generate a bar chart of totals per category."""
    series = breakdown_to_series(breakdown)
    if series.empty:
        return _empty_figure()
    df = series.reset_index()
    df.columns = ["Category", "Amount"]
    fig = px.bar(df, x="Category", y="Amount")
    fig.update_layout(
        title=title or "Spending by category",
        xaxis_title="Category",
        yaxis_title="Amount",
    )
    return fig
