#!/usr/bin/env python3
"""Export stored expenses to CSV or PDF and print a short weekly summary."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from expense_tracker import aggregation as agg
from expense_tracker import config, export
from expense_tracker.db import ExpenseStore
from expense_tracker.formatting import format_currency

logger = logging.getLogger(__name__)


def main(fmt: str = 'csv', output_dir: Path = config.EXPORT_DIR, db_path: Path = config.DB_PATH) -> int:
    config.ensure_data_directories()
    store = ExpenseStore(db_path)
    store.init_db()
    records = store.list_expenses()

    summary = agg.weekly_summary(records, datetime.now())
    print(f"Total expenses stored: {len(records)}")
    print(f"Last 7 days: {format_currency(summary['total'])} "
          f"(daily average {format_currency(summary['daily_average'])})")
    for label, total in summary['daily_totals']:
        print(f"  {label}: {format_currency(total)}")

    writer = export.export_pdf if fmt == 'pdf' else export.export_csv
    path = writer(records, output_dir)
    if path is None:
        print(f"Failed to export {fmt.upper()}")
        return 1
    print(f"Wrote {path}")
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Export stored expenses.')
    parser.add_argument('--format', choices=['csv', 'pdf'], default='csv', help='Export file format')
    parser.add_argument('--output-dir', type=Path, default=config.EXPORT_DIR, help='Directory for the export file')
    parser.add_argument('--db', type=Path, default=config.DB_PATH, help='Path to the expense database')
    parser.add_argument('--log-level', default=None, help='Logging level (defaults to EXPENSE_TRACKER_LOG_LEVEL)')
    args = parser.parse_args()
    config.configure_logging(args.log_level)
    sys.exit(main(fmt=args.format, output_dir=args.output_dir, db_path=args.db))
