"""Unit tests for expense_tracker.validation."""

from __future__ import annotations

from datetime import datetime

import pytest

from expense_tracker.categories import ExpenseCategory
from expense_tracker.validation import build_expense, validate_expense_input


def test_all_fields_missing_reports_three_errors() -> None:
    result = validate_expense_input("", "", None)
    assert not result.is_valid
    assert result.errors == [
        "Title cannot be empty",
        "Amount cannot be empty",
        "Please select a category",
    ]


def test_valid_input() -> None:
    result = validate_expense_input("Coffee", "5.50", ExpenseCategory.FOOD)
    assert result.is_valid
    assert result.errors == []


def test_negative_amount() -> None:
    result = validate_expense_input("Taxi", "-3", ExpenseCategory.TRAVEL)
    assert not result.is_valid
    assert result.errors == ["Amount must be greater than 0"]


@pytest.mark.parametrize("amount_text, expected", [
    ("abc", "Invalid amount format"),
    ("12,50", "Invalid amount format"),
    ("0", "Amount must be greater than 0"),
    ("   ", "Amount cannot be empty"),
    ("nan", "Invalid amount format"),
    ("inf", "Invalid amount format"),
    ("-Infinity", "Invalid amount format"),
    ("1_000", "Invalid amount format"),
])
def test_amount_rules(amount_text, expected) -> None:
    result = validate_expense_input("Taxi", amount_text, ExpenseCategory.TRAVEL)
    assert result.errors == [expected]


def test_whitespace_title_is_blank() -> None:
    result = validate_expense_input("   ", "3", ExpenseCategory.STAFF)
    assert result.errors == ["Title cannot be empty"]


def test_notes_length_limit() -> None:
    assert validate_expense_input("Taxi", "3", ExpenseCategory.TRAVEL, notes="x" * 100).is_valid
    result = validate_expense_input("Taxi", "3", ExpenseCategory.TRAVEL, notes="x" * 101)
    assert result.errors == ["Notes cannot exceed 100 characters"]


def test_build_expense_trims_and_converts() -> None:
    when = datetime(2024, 1, 15, 9, 30)
    record = build_expense("  Lunch ", "12.5", ExpenseCategory.FOOD, notes="  team  ", date=when)
    assert record.title == "Lunch"
    assert record.amount == 12.5
    assert record.category == "FOOD"
    assert record.notes == "team"
    assert record.date == when
    assert record.id == 0


def test_build_expense_blank_notes_become_none() -> None:
    record = build_expense("Lunch", "1", ExpenseCategory.FOOD, notes="   ")
    assert record.notes is None


def test_build_expense_rejects_invalid_input() -> None:
    with pytest.raises(ValueError):
        build_expense("", "1", ExpenseCategory.FOOD)


def test_build_expense_rejects_non_finite_amount() -> None:
    with pytest.raises(ValueError):
        build_expense("Taxi", "nan", ExpenseCategory.TRAVEL)
