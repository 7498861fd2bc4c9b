"""SQLite-backed expense store.

The store owns a single ``expenses`` table and hands out records in
date-descending order.  Instead of live queries it keeps a list of
subscribers and pushes a fresh snapshot of all records to each of them
after every successful write, so callers simply re-run their
aggregations on the new list.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterator, List, Optional, Union

import pandas as pd

from .categories import ExpenseCategory
from .config import DB_PATH
from .models import CategoryTotal, ExpenseRecord, FRAME_COLUMNS, records_from_frame

logger = logging.getLogger(__name__)

DATE_STORAGE_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    amount REAL NOT NULL,
    category TEXT NOT NULL,
    notes TEXT,
    date TEXT NOT NULL,
    receipt_image_path TEXT
);

CREATE INDEX IF NOT EXISTS ix_expenses_date ON expenses (date);
CREATE INDEX IF NOT EXISTS ix_expenses_category ON expenses (category);
"""

SELECT_SQL = "SELECT id, title, amount, category, notes, date, receipt_image_path FROM expenses"

Subscriber = Callable[[List[ExpenseRecord]], None]


def _to_db_date(value: datetime) -> str:
    if hasattr(value, 'to_pydatetime'):
        value = value.to_pydatetime()
    return value.strftime(DATE_STORAGE_FORMAT)


def _category_token(category: Union[ExpenseCategory, str]) -> str:
    if isinstance(category, ExpenseCategory):
        return category.name
    return category


class ExpenseStore:
    """Durable keyed collection of expense records."""

    def __init__(self, db_path: Union[str, Path, None] = None):
        self.db_path = Path(db_path) if db_path is not None else DB_PATH
        self._subscribers: List[Subscriber] = []

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path))
        try:
            yield conn
        finally:
            conn.close()

    def init_db(self) -> None:
        with self.connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_frame(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        category: Union[ExpenseCategory, str, None] = None,
    ) -> pd.DataFrame:
        where: List[str] = []
        params: List[Any] = []

        if start is not None:
            where.append("date >= ?")
            params.append(_to_db_date(start))
        if end is not None:
            where.append("date <= ?")
            params.append(_to_db_date(end))
        if category is not None:
            where.append("category = ?")
            params.append(_category_token(category))

        sql = SELECT_SQL
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY date DESC, id DESC"

        with self.connect() as conn:
            df = pd.read_sql_query(sql, conn, params=params)
        if df.empty:
            return pd.DataFrame(columns=FRAME_COLUMNS)
        df['date'] = pd.to_datetime(df['date'], format=DATE_STORAGE_FORMAT)
        return df

    def list_expenses(self) -> List[ExpenseRecord]:
        return records_from_frame(self.fetch_frame())

    def list_by_date_range(self, start: datetime, end: datetime) -> List[ExpenseRecord]:
        return records_from_frame(self.fetch_frame(start=start, end=end))

    def list_by_category(self, category: Union[ExpenseCategory, str]) -> List[ExpenseRecord]:
        return records_from_frame(self.fetch_frame(category=category))

    def sum_amount(self, start: datetime, end: datetime) -> Optional[float]:
        """Return the summed amount in the window, or ``None`` if it is empty."""
        with self.connect() as conn:
            row = conn.execute(
                "SELECT SUM(amount) FROM expenses WHERE date BETWEEN ? AND ?",
                (_to_db_date(start), _to_db_date(end)),
            ).fetchone()
        return None if row[0] is None else float(row[0])

    def category_sums(self, start: datetime, end: datetime) -> List[CategoryTotal]:
        sql = (
            "SELECT category, SUM(amount) AS total_amount FROM expenses "
            "WHERE date >= ? AND date <= ? GROUP BY category ORDER BY category"
        )
        with self.connect() as conn:
            rows = conn.execute(sql, (_to_db_date(start), _to_db_date(end))).fetchall()
        return [CategoryTotal(category=row[0], total_amount=float(row[1])) for row in rows]

    def count(self) -> int:
        with self.connect() as conn:
            row = conn.execute("SELECT COUNT(*) FROM expenses").fetchone()
        return int(row[0])

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, record: ExpenseRecord) -> int:
        """Insert ``record`` and return the id assigned by the database.

        Any ``id`` already set on the record is ignored.
        """
        with self.connect() as conn:
            cursor = conn.execute(
                "INSERT INTO expenses (title, amount, category, notes, date, receipt_image_path) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    record.title,
                    record.amount,
                    record.category,
                    record.notes,
                    _to_db_date(record.date),
                    record.receipt_image_path,
                ),
            )
            conn.commit()
            new_id = int(cursor.lastrowid)
        logger.info("Inserted expense %s (%s)", new_id, record.category)
        self._notify()
        return new_id

    def update(self, record: ExpenseRecord) -> bool:
        """Replace every field of the stored record with the same id."""
        with self.connect() as conn:
            cursor = conn.execute(
                "UPDATE expenses SET title = ?, amount = ?, category = ?, notes = ?, "
                "date = ?, receipt_image_path = ? WHERE id = ?",
                (
                    record.title,
                    record.amount,
                    record.category,
                    record.notes,
                    _to_db_date(record.date),
                    record.receipt_image_path,
                    record.id,
                ),
            )
            conn.commit()
            updated = cursor.rowcount > 0
        if updated:
            logger.info("Updated expense %s", record.id)
            self._notify()
        return updated

    def delete(self, record: ExpenseRecord) -> bool:
        with self.connect() as conn:
            cursor = conn.execute("DELETE FROM expenses WHERE id = ?", (record.id,))
            conn.commit()
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("Deleted expense %s", record.id)
            self._notify()
        return deleted

    def delete_all(self) -> int:
        with self.connect() as conn:
            cursor = conn.execute("DELETE FROM expenses")
            conn.commit()
            removed = cursor.rowcount
        logger.info("Deleted all expenses (%s rows)", removed)
        self._notify()
        return removed

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` and send it the current snapshot right away.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)
        callback(self.list_expenses())

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        if not self._subscribers:
            return
        # The write is committed here; subscribers keep their last snapshot if the re-read fails.
        try:
            snapshot = self.list_expenses()
        except (sqlite3.Error, pd.errors.DatabaseError):
            logger.exception("Could not refresh expense snapshot after write")
            return
        for callback in list(self._subscribers):
            callback(snapshot)
