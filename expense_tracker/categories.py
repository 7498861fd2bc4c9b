"""The closed set of expense categories.

Categories are stored as their token (``"FOOD"``) and shown by their
display name (``"Food"``).  Icons and colours are a presentation concern
and live in :mod:`expense_tracker.visualization`.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional


class ExpenseCategory(Enum):
    STAFF = "Staff"
    TRAVEL = "Travel"
    FOOD = "Food"
    UTILITY = "Utility"

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, value: Optional[str]) -> "ExpenseCategory":
        """Parse a stored category token, falling back to ``STAFF``.

        Matching is exact on the token, so ``"food"`` and ``"Food"`` are
        unknown values and resolve to the fallback like any other.
        """
        for category in cls:
            if category.name == value:
                return category
        return cls.STAFF

    @classmethod
    def all_categories(cls) -> List["ExpenseCategory"]:
        return list(cls)


def display_name_for(token: Optional[str]) -> str:
    return ExpenseCategory.from_string(token).display_name
