"""Validation rules for the expense entry form."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .categories import ExpenseCategory
from .models import ExpenseRecord

NOTES_MAX_LENGTH = 100

TITLE_EMPTY = "Title cannot be empty"
AMOUNT_EMPTY = "Amount cannot be empty"
AMOUNT_INVALID = "Invalid amount format"
AMOUNT_NOT_POSITIVE = "Amount must be greater than 0"
CATEGORY_MISSING = "Please select a category"
NOTES_TOO_LONG = f"Notes cannot exceed {NOTES_MAX_LENGTH} characters"


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def _parse_amount(text: str) -> Optional[float]:
    """Parse a plain decimal amount; ``None`` for anything else.

    Underscore digit groups and non-finite values (``nan``, ``inf``) are
    rejected even though ``float`` accepts them.
    """
    if '_' in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def validate_expense_input(
    title: str,
    amount_text: str,
    category: Optional[ExpenseCategory],
    notes: Optional[str] = None,
) -> ValidationResult:
    """Check an entry before it is saved.

    Every rule runs, so one call reports all problems at once.  Nothing
    is stored and nothing is raised.
    """
    errors: List[str] = []

    if not (title or '').strip():
        errors.append(TITLE_EMPTY)

    if not (amount_text or '').strip():
        errors.append(AMOUNT_EMPTY)
    else:
        amount = _parse_amount(amount_text)
        if amount is None:
            errors.append(AMOUNT_INVALID)
        elif amount <= 0:
            errors.append(AMOUNT_NOT_POSITIVE)

    if category is None:
        errors.append(CATEGORY_MISSING)

    if notes is not None and len(notes) > NOTES_MAX_LENGTH:
        errors.append(NOTES_TOO_LONG)

    return ValidationResult(is_valid=not errors, errors=errors)


def build_expense(
    title: str,
    amount_text: str,
    category: Optional[ExpenseCategory],
    notes: Optional[str] = None,
    date: Optional[datetime] = None,
    receipt_image_path: Optional[str] = None,
) -> ExpenseRecord:
    """Turn validated form input into a record ready for insertion.

    Raises:
        ValueError: If the input does not pass :func:`validate_expense_input`.
    """
    result = validate_expense_input(title, amount_text, category, notes)
    if not result.is_valid:
        raise ValueError("; ".join(result.errors))
    cleaned_notes = notes.strip() if notes and notes.strip() else None
    return ExpenseRecord(
        title=title.strip(),
        amount=float(amount_text),
        category=category.name,
        date=date or datetime.now(),
        notes=cleaned_notes,
        receipt_image_path=receipt_image_path,
    )
