"""Configuration management for the expense tracker.

This module centralizes all configuration values including paths,
display defaults, and environment variable overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

# Base project root - assumes this file is in expense_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("EXPENSE_TRACKER_DATA_DIR", _PROJECT_ROOT / "data"))
EXPORT_DIR = Path(os.getenv("EXPENSE_TRACKER_EXPORT_DIR", DATA_DIR / "exports"))

# Database
DB_PATH = Path(
    os.getenv("EXPENSE_TRACKER_DB_PATH", DATA_DIR / "expenses.db")
).resolve()

# Display
CURRENCY_SYMBOL = os.getenv("EXPENSE_TRACKER_CURRENCY", "Rs.")
LOG_LEVEL = os.getenv("EXPENSE_TRACKER_LOG_LEVEL", "INFO")

# Window used by the report screen and the "last 7 days" category totals
REPORT_WINDOW_DAYS = 7

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, EXPORT_DIR, DB_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the root logging configuration for command-line entry points."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
