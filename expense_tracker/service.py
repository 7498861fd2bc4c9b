"""UI-facing state holder for the expense tracker.

:class:`ExpenseService` sits between the store and the dashboard.  It
subscribes to the store, re-runs the aggregations on every snapshot and
turns any failure from a write or an export into a message on
:class:`ExpenseUiState` so the presentation never sees an exception.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from . import aggregation as agg
from . import export
from .categories import ExpenseCategory
from .config import EXPORT_DIR, REPORT_WINDOW_DAYS
from .db import ExpenseStore
from .models import CategoryTotal, ExpenseRecord
from .validation import ValidationResult, validate_expense_input

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error occurred"
ADD_FAILED = "Failed to add expense"
UPDATE_FAILED = "Failed to update expense"
DELETE_FAILED = "Failed to delete expense"
DELETE_ALL_FAILED = "Failed to delete expenses"
CSV_EXPORT_FAILED = "Failed to export CSV"
PDF_EXPORT_FAILED = "Failed to export PDF"


@dataclass
class ExpenseUiState:
    is_loading: bool = False
    error: Optional[str] = None
    is_expense_added: bool = False
    selected_category: Optional[ExpenseCategory] = None


@dataclass
class ExportResult:
    path: Path
    mime_type: str
    title: str


class ExpenseService:
    """Reactive view of the store plus guarded write and export actions."""

    def __init__(
        self,
        store: ExpenseStore,
        clock: Callable[[], datetime] = datetime.now,
        export_dir: Union[str, Path, None] = None,
    ):
        self.store = store
        self.clock = clock
        self.export_dir = Path(export_dir) if export_dir is not None else EXPORT_DIR
        self.state = ExpenseUiState()
        self.expenses: List[ExpenseRecord] = []
        self.today_total = 0.0
        self.category_expenses: List[CategoryTotal] = []
        self.total_count = 0
        self._unsubscribe = store.subscribe(self._on_snapshot)

    def _on_snapshot(self, records: List[ExpenseRecord]) -> None:
        now = self.clock()
        start, end = agg.trailing_window(now, REPORT_WINDOW_DAYS)
        self.expenses = records
        self.today_total = agg.total_for_today(records, now)
        self.category_expenses = agg.category_breakdown(records, start, end)
        self.total_count = agg.expense_count(records)

    def close(self) -> None:
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _run_write(self, action: Callable[[], Any], failure_message: str) -> bool:
        try:
            action()
        except sqlite3.Error:
            logger.exception(failure_message)
            self.state = replace(self.state, error=failure_message)
            return False
        except Exception:
            logger.exception("Unexpected error during store write")
            self.state = replace(self.state, error=UNKNOWN_ERROR)
            return False
        return True

    def add_expense(
        self,
        title: str,
        amount: float,
        category: ExpenseCategory,
        notes: Optional[str] = None,
        date: Optional[datetime] = None,
        receipt_image_path: Optional[str] = None,
    ) -> bool:
        record = ExpenseRecord(
            title=title,
            amount=amount,
            category=category.name,
            notes=notes,
            date=date or self.clock(),
            receipt_image_path=receipt_image_path,
        )
        return self.add_record(record)

    def add_record(self, record: ExpenseRecord) -> bool:
        if self._run_write(lambda: self.store.insert(record), ADD_FAILED):
            self.state = replace(self.state, is_expense_added=True, error=None)
            return True
        return False

    def update_expense(self, record: ExpenseRecord) -> bool:
        if self._run_write(lambda: self.store.update(record), UPDATE_FAILED):
            self.state = replace(self.state, error=None)
            return True
        return False

    def delete_expense(self, record: ExpenseRecord) -> bool:
        if self._run_write(lambda: self.store.delete(record), DELETE_FAILED):
            self.state = replace(self.state, error=None)
            return True
        return False

    def delete_all_expenses(self) -> bool:
        if self._run_write(self.store.delete_all, DELETE_ALL_FAILED):
            self.state = replace(self.state, error=None)
            return True
        return False

    # ------------------------------------------------------------------
    # Form and list state
    # ------------------------------------------------------------------

    def validate(
        self,
        title: str,
        amount_text: str,
        category: Optional[ExpenseCategory],
        notes: Optional[str] = None,
    ) -> ValidationResult:
        return validate_expense_input(title, amount_text, category, notes)

    def filter_by_category(self, category: Optional[ExpenseCategory]) -> None:
        self.state = replace(self.state, selected_category=category)

    def visible_expenses(self, group_by_category: bool = False) -> List[ExpenseRecord]:
        filtered = agg.filter_by_category(self.expenses, self.state.selected_category)
        return agg.sort_for_display(filtered, group_by_category)

    def clear_error(self) -> None:
        self.state = replace(self.state, error=None)

    def reset_expense_added_state(self) -> None:
        self.state = replace(self.state, is_expense_added=False)

    def weekly_summary(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        return agg.weekly_summary(self.expenses, now or self.clock(), REPORT_WINDOW_DAYS)

    # ------------------------------------------------------------------
    # Exports
    # ------------------------------------------------------------------

    def _run_export(
        self,
        writer: Callable[..., Optional[Path]],
        records: Optional[Sequence[ExpenseRecord]],
        kind: str,
        failure_message: str,
    ) -> Optional[ExportResult]:
        self.state = replace(self.state, is_loading=True)
        try:
            path = writer(self.expenses if records is None else records, self.export_dir, self.clock())
        except Exception:
            logger.exception("Unexpected error during %s export", kind)
            self.state = replace(self.state, error=UNKNOWN_ERROR, is_loading=False)
            return None
        if path is None:
            self.state = replace(self.state, error=failure_message, is_loading=False)
            return None
        self.state = replace(self.state, is_loading=False)
        return ExportResult(
            path=path,
            mime_type=export.EXPORT_MIME_TYPES[kind],
            title=f"Expense Report ({kind.upper()})",
        )

    def export_csv(self, records: Optional[Sequence[ExpenseRecord]] = None) -> Optional[ExportResult]:
        return self._run_export(export.export_csv, records, 'csv', CSV_EXPORT_FAILED)

    def export_pdf(self, records: Optional[Sequence[ExpenseRecord]] = None) -> Optional[ExportResult]:
        return self._run_export(export.export_pdf, records, 'pdf', PDF_EXPORT_FAILED)
