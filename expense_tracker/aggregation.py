"""Aggregation and reporting helpers for expense records.

Every function here is pure: it takes an in-memory sequence of
:class:`~expense_tracker.models.ExpenseRecord` (already loaded by the
store) and returns a derived value without touching storage.  Callers
re-run them on each new store snapshot rather than updating results
incrementally.

Amounts pass through arithmetically.  A NaN amount makes the affected
totals NaN and negative amounts are summed like any other value; the
functions never raise on odd data.

Date windows are inclusive on both ends and use naive local datetimes.
Day boundaries run from ``00:00:00.000`` to ``23:59:59.999``.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from .categories import ExpenseCategory
from .models import CategoryTotal, ExpenseRecord, records_to_frame

DAY_LABEL_FORMAT = "%b %d"


# ---------------------------------------------------------------------------
# Day boundaries
# ---------------------------------------------------------------------------


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999000)


def trailing_window(now: datetime, days: int = 7) -> Tuple[datetime, datetime]:
    """Return the inclusive window covering ``days`` calendar days up to ``now``."""
    span = max(days, 1) - 1
    return start_of_day(now - timedelta(days=span)), end_of_day(now)


def _window_mask(dates: pd.Series, start: datetime, end: datetime) -> pd.Series:
    # Both boundary instants are matched explicitly on top of the open range.
    start_ts = pd.Timestamp(start)
    end_ts = pd.Timestamp(end)
    return ((dates > start_ts) & (dates < end_ts)) | (dates == start_ts) | (dates == end_ts)


def _sum_amounts(amounts: pd.Series) -> float:
    if amounts.empty:
        return 0.0
    return float(amounts.sum(skipna=False))


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------


def total_for_range(records: Sequence[ExpenseRecord], start: datetime, end: datetime) -> float:
    """Sum the amounts of records dated within ``[start, end]``."""
    frame = records_to_frame(records)
    if frame.empty:
        return 0.0
    mask = _window_mask(frame['date'], start, end)
    return _sum_amounts(frame.loc[mask, 'amount'])


def total_for_today(records: Sequence[ExpenseRecord], now: datetime) -> float:
    return total_for_range(records, start_of_day(now), end_of_day(now))


def category_breakdown(
    records: Sequence[ExpenseRecord],
    start: datetime,
    end: datetime,
) -> List[CategoryTotal]:
    """Group records in the window by raw category token and sum each group.

    Entries are sorted by category token so results are deterministic.
    """
    frame = records_to_frame(records)
    if frame.empty:
        return []
    window = frame.loc[_window_mask(frame['date'], start, end)]
    if window.empty:
        return []
    grouped = window.groupby('category', sort=True, dropna=False)['amount'].agg(_sum_amounts)
    return [
        CategoryTotal(category=str(category), total_amount=float(total))
        for category, total in grouped.items()
    ]


def daily_totals(
    records: Sequence[ExpenseRecord],
    days: int,
    reference_date: datetime,
) -> List[Tuple[str, float]]:
    """Bucket the trailing ``days`` calendar days ending at ``reference_date``.

    Returns ``(label, total)`` pairs, oldest day first.  Labels look like
    ``"Jan 05"``.
    """
    if days <= 0:
        return []
    frame = records_to_frame(records)
    buckets: List[Tuple[str, float]] = []
    for offset in range(days):
        day = reference_date - timedelta(days=offset)
        if frame.empty:
            total = 0.0
        else:
            mask = _window_mask(frame['date'], start_of_day(day), end_of_day(day))
            total = _sum_amounts(frame.loc[mask, 'amount'])
        buckets.append((day.strftime(DAY_LABEL_FORMAT), total))
    buckets.reverse()
    return buckets


def expense_count(records: Sequence[ExpenseRecord]) -> int:
    return len(records)


def percentage_of(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return part / whole * 100


def daily_average(total: float, days: int = 7) -> float:
    if days <= 0:
        return 0.0
    return total / days


def category_percentages(breakdown: Sequence[CategoryTotal]) -> List[Tuple[CategoryTotal, float]]:
    """Pair each category total with its share of the breakdown total."""
    whole = sum(entry.total_amount for entry in breakdown)
    return [(entry, percentage_of(entry.total_amount, whole)) for entry in breakdown]


# ---------------------------------------------------------------------------
# List views
# ---------------------------------------------------------------------------


def filter_by_category(
    records: Sequence[ExpenseRecord],
    category: Optional[ExpenseCategory],
) -> List[ExpenseRecord]:
    if category is None:
        return list(records)
    return [record for record in records if record.category == category.name]


def sort_for_display(records: Sequence[ExpenseRecord], group_by_category: bool = False) -> List[ExpenseRecord]:
    """Order records for the list screen: by category token, or newest first."""
    if group_by_category:
        return sorted(records, key=lambda record: record.category)
    return sorted(records, key=lambda record: record.date, reverse=True)


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


def weekly_summary(records: Sequence[ExpenseRecord], now: datetime, days: int = 7) -> Dict[str, Any]:
    """Collect the figures shown on the report screen for the trailing window.

    Keys: ``total``, ``daily_average``, ``count``, ``daily_totals``,
    ``category_breakdown`` and ``today_total``.  ``count`` covers only the
    records inside the window.
    """
    start, end = trailing_window(now, days)
    frame = records_to_frame(records)
    if frame.empty:
        in_window: List[ExpenseRecord] = []
    else:
        mask = _window_mask(frame['date'], start, end).tolist()
        in_window = [record for record, keep in zip(records, mask) if keep]

    total = total_for_range(in_window, start, end)
    return {
        'total': total,
        'daily_average': daily_average(total, days),
        'count': expense_count(in_window),
        'daily_totals': daily_totals(in_window, days, now),
        'category_breakdown': category_breakdown(in_window, start, end),
        'today_total': total_for_today(records, now),
    }
