"""Expense record types and their DataFrame form."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Iterable, List, Optional

import pandas as pd

from .categories import ExpenseCategory

FRAME_COLUMNS = ['id', 'title', 'amount', 'category', 'notes', 'date', 'receipt_image_path']


@dataclass(frozen=True)
class ExpenseRecord:
    """One user-entered spending transaction.

    ``id`` is 0 until the store assigns one on insert.  ``category`` holds
    the raw stored token; use :attr:`category_enum` for the parsed value.
    """

    title: str
    amount: float
    category: str
    date: datetime
    notes: Optional[str] = None
    receipt_image_path: Optional[str] = None
    id: int = 0

    @property
    def category_enum(self) -> ExpenseCategory:
        return ExpenseCategory.from_string(self.category)


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total_amount: float


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    return str(value)


def _to_datetime(value: Any) -> datetime:
    if hasattr(value, 'to_pydatetime'):
        return value.to_pydatetime()
    if isinstance(value, datetime):
        return value
    return pd.to_datetime(value).to_pydatetime()


def records_to_frame(records: Iterable[ExpenseRecord]) -> pd.DataFrame:
    """Build a DataFrame with one row per record, in input order."""
    rows = [asdict(record) for record in records]
    if not rows:
        frame = pd.DataFrame(columns=FRAME_COLUMNS)
        frame['amount'] = frame['amount'].astype(float)
        frame['date'] = pd.to_datetime(frame['date'])
        return frame
    frame = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    frame['amount'] = frame['amount'].astype(float)
    frame['date'] = pd.to_datetime(frame['date'])
    return frame


def records_from_frame(frame: pd.DataFrame) -> List[ExpenseRecord]:
    """Convert rows shaped like :data:`FRAME_COLUMNS` back into records."""
    if frame is None or frame.empty:
        return []
    records: List[ExpenseRecord] = []
    for row in frame.to_dict('records'):
        records.append(ExpenseRecord(
            id=int(row.get('id') or 0),
            title=row.get('title') or '',
            amount=float(row.get('amount')),
            category=row.get('category') or '',
            date=_to_datetime(row.get('date')),
            notes=_optional_text(row.get('notes')),
            receipt_image_path=_optional_text(row.get('receipt_image_path')),
        ))
    return records
