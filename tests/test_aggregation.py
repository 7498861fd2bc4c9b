"""Unit tests for expense_tracker.aggregation."""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from expense_tracker import aggregation as agg
from expense_tracker.categories import ExpenseCategory
from expense_tracker.models import ExpenseRecord


def _record(amount, when, category="FOOD", title="Item"):
    return ExpenseRecord(title=title, amount=amount, category=category, date=when)


def test_total_for_range_over_full_span_equals_sum(sample_records) -> None:
    dates = [record.date for record in sample_records]
    total = agg.total_for_range(sample_records, min(dates), max(dates))
    assert abs(total - sum(record.amount for record in sample_records)) < 1e-9


def test_total_for_range_includes_both_boundaries() -> None:
    start = datetime(2024, 1, 10, 0, 0)
    end = datetime(2024, 1, 11, 0, 0)
    records = [
        _record(1.0, start),
        _record(2.0, end),
        _record(4.0, start - timedelta(microseconds=1000)),
        _record(8.0, end + timedelta(microseconds=1000)),
    ]
    assert agg.total_for_range(records, start, end) == 3.0


def test_total_for_range_empty_and_no_match() -> None:
    start = datetime(2024, 1, 1)
    end = datetime(2024, 1, 2)
    assert agg.total_for_range([], start, end) == 0
    assert agg.total_for_range([_record(5.0, datetime(2023, 6, 1))], start, end) == 0


def test_total_for_range_passes_nan_and_negative_through() -> None:
    when = datetime(2024, 1, 1, 12)
    assert agg.total_for_range([_record(-5.0, when), _record(2.0, when)], when, when) == -3.0
    assert math.isnan(agg.total_for_range([_record(float("nan"), when), _record(2.0, when)], when, when))


def test_total_for_today_uses_calendar_day(now) -> None:
    records = [
        _record(1.0, datetime(2024, 1, 15, 0, 0, 0)),
        _record(2.0, datetime(2024, 1, 15, 23, 59, 59, 999000)),
        _record(4.0, datetime(2024, 1, 14, 23, 59, 59, 999000)),
        _record(8.0, datetime(2024, 1, 16, 0, 0, 0)),
    ]
    assert agg.total_for_today(records, now) == 3.0


def test_category_breakdown_sorted_and_consistent(sample_records) -> None:
    start = datetime(2024, 1, 1)
    end = datetime(2024, 1, 31)
    breakdown = agg.category_breakdown(sample_records, start, end)
    assert [entry.category for entry in breakdown] == ["FOOD", "STAFF", "TRAVEL", "UTILITY"]
    assert breakdown[0].total_amount == 42.5
    total = agg.total_for_range(sample_records, start, end)
    assert abs(sum(entry.total_amount for entry in breakdown) - total) < 1e-9


def test_category_breakdown_only_counts_window(sample_records) -> None:
    breakdown = agg.category_breakdown(sample_records, datetime(2024, 1, 14), datetime(2024, 1, 15, 23, 59))
    assert [(entry.category, entry.total_amount) for entry in breakdown] == [("FOOD", 12.5), ("TRAVEL", 20.0)]
    assert agg.category_breakdown([], datetime(2024, 1, 1), datetime(2024, 1, 2)) == []


def test_daily_totals_seven_buckets_oldest_first(sample_records, now) -> None:
    buckets = agg.daily_totals(sample_records, 7, now)
    assert len(buckets) == 7
    assert buckets[0][0] == "Jan 09"
    assert buckets[-1][0] == "Jan 15"
    for offset, (_, total) in enumerate(reversed(buckets)):
        day = now - timedelta(days=offset)
        expected = agg.total_for_range(sample_records, agg.start_of_day(day), agg.end_of_day(day))
        assert total == expected
    assert buckets[0][1] == 55.25
    assert buckets[-1][1] == 12.5


def test_daily_totals_empty_input(now) -> None:
    buckets = agg.daily_totals([], 3, now)
    assert [total for _, total in buckets] == [0.0, 0.0, 0.0]
    assert agg.daily_totals([], 0, now) == []


def test_expense_count_and_percentage() -> None:
    assert agg.expense_count([]) == 0
    assert agg.expense_count([_record(1.0, datetime(2024, 1, 1))] * 3) == 3
    assert agg.percentage_of(10, 0) == 0
    assert agg.percentage_of(10, -5) == 0
    assert agg.percentage_of(50, 200) == 25


def test_daily_average_and_category_percentages() -> None:
    assert agg.daily_average(70.0) == 10.0
    assert agg.daily_average(70.0, 0) == 0.0
    breakdown = agg.category_breakdown(
        [_record(30.0, datetime(2024, 1, 1)), _record(10.0, datetime(2024, 1, 1), category="TRAVEL")],
        datetime(2024, 1, 1),
        datetime(2024, 1, 1),
    )
    shares = [share for _, share in agg.category_percentages(breakdown)]
    assert shares == [75.0, 25.0]


def test_filter_and_sort_for_display(sample_records) -> None:
    food = agg.filter_by_category(sample_records, ExpenseCategory.FOOD)
    assert [record.title for record in food] == ["Lunch", "Dinner"]
    assert len(agg.filter_by_category(sample_records, None)) == len(sample_records)

    newest_first = agg.sort_for_display(list(reversed(sample_records)))
    assert [record.title for record in newest_first][0] == "Lunch"
    grouped = agg.sort_for_display(sample_records, group_by_category=True)
    assert [record.category for record in grouped] == ["FOOD", "FOOD", "STAFF", "TRAVEL", "UTILITY"]


def test_trailing_window_matches_daily_buckets(sample_records, now) -> None:
    start, end = agg.trailing_window(now, 7)
    assert start == datetime(2024, 1, 9, 0, 0)
    assert end == datetime(2024, 1, 15, 23, 59, 59, 999000)
    buckets = agg.daily_totals(sample_records, 7, now)
    assert abs(sum(total for _, total in buckets) - agg.total_for_range(sample_records, start, end)) < 1e-9


def test_weekly_summary(sample_records, now) -> None:
    summary = agg.weekly_summary(sample_records, now)
    assert summary['total'] == 117.75
    assert summary['count'] == 4
    assert abs(summary['daily_average'] - 117.75 / 7) < 1e-9
    assert summary['today_total'] == 12.5
    assert len(summary['daily_totals']) == 7
    assert "STAFF" not in [entry.category for entry in summary['category_breakdown']]
