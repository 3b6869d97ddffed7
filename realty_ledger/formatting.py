"""Display formatting for amounts, percentages and dates."""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from realty_ledger.models.sales.records import coerce_amount, parse_date

DEFAULT_CURRENCY = "KES"


def format_price(price: Any, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount with thousands separators and no decimals.

    Malformed amounts render as zero.
    """
    amount = coerce_amount(price).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency} {abs(amount):,.0f}"


def format_price_range(low: Any, high: Any, currency: str = DEFAULT_CURRENCY) -> str:
    return f"{format_price(low, currency)} - {format_price(high, currency)}"


def format_compact_price(price: Any, currency: str = DEFAULT_CURRENCY) -> str:
    """Format large amounts compactly: ``KES 1.2M``, ``KES 850K``."""
    amount = coerce_amount(price)
    if amount >= 1_000:
        thousands = (amount / 1_000).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        if thousands < 1_000:
            return f"{currency} {thousands}K"
        millions = (amount / 1_000_000).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        return f"{currency} {millions}M"
    return format_price(amount, currency)


def format_percentage(value: Any, decimals: int = 1) -> str:
    amount = coerce_amount(value)
    if not amount:
        return "0%"
    return f"{amount:.{decimals}f}%"


def format_date(value: date | datetime | str | None, short: bool = False) -> str:
    """Format a date as ``July 6, 2025`` (or ``Jul 6, 2025`` when short)."""
    parsed = parse_date(value)
    if parsed is None:
        return ""
    month = parsed.strftime("%b" if short else "%B")
    return f"{month} {parsed.day}, {parsed.year}"
