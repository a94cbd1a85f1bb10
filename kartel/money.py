"""Display formatting for money amounts kept as text."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

ZERO = Decimal('0')


def to_decimal(amount: str | None) -> Decimal:
    """Parse amount text such as ``"1,234.5"``; anything unparseable is zero."""
    if not amount:
        return ZERO
    try:
        value = Decimal(amount.strip().replace(',', ''))
    except InvalidOperation:
        return ZERO
    return value if value.is_finite() else ZERO


def format_money(code: str, amount: str | None, places: int = 2) -> str:
    """Format as ``"<CODE> 1,234.50"``."""
    value = to_decimal(amount)
    return f"{code} {value:,.{places}f}"
