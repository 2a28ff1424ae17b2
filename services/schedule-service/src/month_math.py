"""Calendar helpers for "YYYY-MM" month keys and "YYYY-MM-DD" schedule dates."""

from __future__ import annotations

import calendar
from datetime import date
from typing import Optional, Tuple


def month_key(value: date) -> str:
    return f"{value.year}-{value.month:02d}"


def parse_month_key(key: str | None) -> Optional[Tuple[int, int]]:
    """
    Split a month key into (year, month).

    Only the first two dash-separated parts are read, so full ISO dates work too.
    Returns None when either part is missing, non-numeric, or zero. Month values
    outside 1..12 are returned as-is; `add_months` normalizes them.
    """

    if not key:
        return None
    parts = key.split("-")
    if len(parts) < 2:
        return None
    try:
        year = int(parts[0])
        month = int(parts[1])
    except ValueError:
        return None
    if not year or not month:
        return None
    return year, month


def _roll(year: int, month_index: int) -> Tuple[int, int]:
    """Normalize a (year, zero-based month) pair that may overflow in either direction."""
    carry, month_index = divmod(month_index, 12)
    return year + carry, month_index


def add_months(key: str, offset: int) -> str:
    """Shift a month key by `offset` months; malformed keys come back unchanged."""
    parsed = parse_month_key(key)
    if parsed is None:
        return key
    year, month = parsed
    year, month_index = _roll(year, month - 1 + offset)
    return f"{year}-{month_index + 1:02d}"


def days_in_month(year: int, month_index: int) -> int:
    year, month_index = _roll(year, month_index)
    return calendar.monthrange(year, month_index + 1)[1]


def clamp_day(year: int, month_index: int, requested_day: int) -> int:
    return max(1, min(requested_day, days_in_month(year, month_index)))


def build_period_date(key: str, day: int) -> str:
    """Return the date for `day` inside the month key, clamped to the month's last day."""
    parsed = parse_month_key(key)
    if parsed is None:
        return ""
    year, month = parsed
    clamped = clamp_day(year, month - 1, day)
    return f"{year}-{month:02d}-{clamped:02d}"


def shift_date(value: str | None, offset: int = 1) -> str:
    """
    Move an ISO date by whole months, keeping the day inside the target month.

    Empty input yields "", and values that are not ISO dates are returned unchanged.
    """

    if not value:
        return ""
    try:
        parsed = date.fromisoformat(value[:10])
    except ValueError:
        return value
    year, month_index = _roll(parsed.year, parsed.month - 1 + offset)
    day = clamp_day(year, month_index, parsed.day)
    return date(year, month_index + 1, day).isoformat()
