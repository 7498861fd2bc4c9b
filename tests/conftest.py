"""Shared pytest fixtures: a store on a temporary database and sample records."""

from __future__ import annotations

from datetime import datetime

import pytest

from expense_tracker.db import ExpenseStore
from expense_tracker.models import ExpenseRecord

REFERENCE_NOW = datetime(2024, 1, 15, 12, 0, 0)


@pytest.fixture()
def store(tmp_path):
    expense_store = ExpenseStore(tmp_path / "expenses.db")
    expense_store.init_db()
    return expense_store


@pytest.fixture()
def now():
    return REFERENCE_NOW


@pytest.fixture()
def sample_records():
    return [
        ExpenseRecord(title="Lunch", amount=12.5, category="FOOD", date=datetime(2024, 1, 15, 13, 30), notes="a,b"),
        ExpenseRecord(title="Taxi", amount=20.0, category="TRAVEL", date=datetime(2024, 1, 14, 9, 0)),
        ExpenseRecord(title="Dinner", amount=30.0, category="FOOD", date=datetime(2024, 1, 12, 20, 15)),
        ExpenseRecord(title="Electricity", amount=55.25, category="UTILITY", date=datetime(2024, 1, 9, 0, 0)),
        ExpenseRecord(title="Wages", amount=100.0, category="STAFF", date=datetime(2024, 1, 2, 10, 0)),
    ]
