"""Formatting utilities for currency, percentage and date display."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from .config import CURRENCY_SYMBOL

EXPORT_DATE_FORMAT = "%d/%m/%Y"
DISPLAY_DATE_FORMAT = "%d %b %Y, %H:%M"


def format_currency(
    amount: Union[float, int],
    include_sign: bool = True,
    symbol: Optional[str] = None,
) -> str:
    """Format a currency amount with two decimals.

    Args:
        amount: The amount to format
        include_sign: Whether to prefix the currency symbol
        symbol: Symbol to use instead of the configured one

    Returns:
        Formatted currency string (e.g., "Rs.1,234.56" or "1,234.56")

    Example:
        >>> format_currency(1234.56, symbol="$")
        '$1,234.56'
        >>> format_currency(1234.56, include_sign=False)
        '1,234.56'
    """
    formatted = f"{amount:,.2f}"
    if not include_sign:
        return formatted
    return f"{symbol if symbol is not None else CURRENCY_SYMBOL}{formatted}"


def format_amount_plain(amount: Union[float, int], symbol: Optional[str] = None) -> str:
    """Format an amount without thousands separators, as the PDF export prints it."""
    return f"{symbol if symbol is not None else CURRENCY_SYMBOL}{amount:.2f}"


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


def format_export_date(moment: datetime) -> str:
    return moment.strftime(EXPORT_DATE_FORMAT)


def format_display_date(moment: datetime) -> str:
    return moment.strftime(DISPLAY_DATE_FORMAT)
