"""
Helpers for turning amounts and dates into display strings.

Used for notification messages, activity feed entries and portal views.
"""

import re
from datetime import date, datetime, timezone
from typing import Optional, Union

CURRENCY_SYMBOL = "₱"


def format_currency(amount: float) -> str:
    """Compact peso amount: ₱950, ₱12.5k, ₱1.2M, ₱3.0B."""
    abs_amount = abs(amount)

    if abs_amount >= 1_000_000_000:
        formatted = f"{CURRENCY_SYMBOL}{abs_amount / 1_000_000_000:.1f}B"
    elif abs_amount >= 1_000_000:
        formatted = f"{CURRENCY_SYMBOL}{abs_amount / 1_000_000:.1f}M"
    elif abs_amount >= 1000:
        formatted = f"{CURRENCY_SYMBOL}{abs_amount / 1000:.1f}k"
    else:
        formatted = f"{CURRENCY_SYMBOL}{abs_amount:.0f}"

    return f"-{formatted}" if amount < 0 else formatted


def format_currency_full(amount: float) -> str:
    """Exact peso amount with thousands separators, e.g. ₱10,000.00."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(amount):,.2f}"


def _as_datetime(value: Union[str, date, datetime]) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def format_date(value: Union[str, date, datetime]) -> str:
    """Oct 19, 2026"""
    dt = _as_datetime(value)
    return f"{dt:%b} {dt.day}, {dt.year}"


def format_datetime(value: Union[str, date, datetime]) -> str:
    """Oct 19, 2026, 02:15 PM"""
    dt = _as_datetime(value)
    return f"{format_date(dt)}, {dt:%I:%M %p}"


def format_relative_time(value: Union[str, date, datetime], now: Optional[datetime] = None) -> str:
    dt = _as_datetime(value)
    now = _as_datetime(now) if now is not None else datetime.now(timezone.utc)
    diff_in_minutes = int((now - dt).total_seconds() // 60)

    if diff_in_minutes < 1:
        return "Just now"
    if diff_in_minutes < 60:
        return f"{diff_in_minutes} min ago"

    diff_in_hours = diff_in_minutes // 60
    if diff_in_hours < 24:
        return f"{diff_in_hours} hour{'s' if diff_in_hours > 1 else ''} ago"

    diff_in_days = diff_in_hours // 24
    if diff_in_days < 7:
        return f"{diff_in_days} day{'s' if diff_in_days > 1 else ''} ago"

    return format_date(dt)


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length].rstrip() + "..."


def parse_budget(budget: Union[str, float, int]) -> float:
    """Accepts form input such as "₱10,000" or "$2,500.50"."""
    if isinstance(budget, (int, float)):
        return float(budget)
    cleaned = re.sub(r"[^0-9.\-]+", "", budget)
    if not cleaned:
        raise ValueError(f"Invalid budget value: {budget}")
    return float(cleaned)
