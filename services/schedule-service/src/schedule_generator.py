from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, List, Optional
from uuid import uuid4

from month_math import add_months, build_period_date, parse_month_key
from schedule_model import ScheduleDraft, ScheduleKind

logger = logging.getLogger(__name__)

MIN_MONTHS = 1
MAX_MONTHS = 60


def create_local_id(kind: ScheduleKind) -> str:
    """Return a random, session-scoped row identifier such as `plan-1f0c9a2e4b7d`."""
    return f"{kind.local_id_prefix}-{uuid4().hex[:12]}"


def clamp_months(months: Any) -> int:
    """
    Normalize the requested schedule length into [MIN_MONTHS, MAX_MONTHS].

    Non-numeric or NaN values fall back to the minimum; fractional values are floored.
    """

    try:
        value = float(months)
    except (TypeError, ValueError):
        return MIN_MONTHS
    if math.isnan(value) or value < MIN_MONTHS:
        return MIN_MONTHS
    if value > MAX_MONTHS:
        return MAX_MONTHS
    return math.floor(value)


def _coerce_day(target_day: Any) -> int:
    try:
        value = float(target_day)
    except (TypeError, ValueError):
        return 1
    if math.isnan(value):
        return 1
    if math.isinf(value):
        return 31 if value > 0 else 1
    return math.floor(value)


def to_cents(amount: float) -> int:
    """Convert a currency amount to integer cents, rounding halves up."""
    return math.floor(amount * 100 + 0.5)


def generate_even_schedule(
    kind: ScheduleKind,
    start_month: str,
    months: Any,
    total_amount: float,
    target_day: Any,
    default_status: Optional[Enum | str] = None,
) -> List[ScheduleDraft]:
    """
    Spread `total_amount` evenly over consecutive months starting at `start_month`.

    Args:
        kind: Schedule flavour supplying the status enum and local id prefix.
        start_month: First month as "YYYY-MM".
        months: Requested number of installments; clamped into [1, 60].
        total_amount: Amount to distribute; must be positive.
        target_day: Day of month for each row, clamped into each month.
        default_status: Status for every generated row (defaults to the kind's default).
    Returns:
        Chronological drafts whose amounts add up to `total_amount` to the cent.
        Indivisible cents go to the earliest months, one cent each. An empty list is
        returned when the start month or amount is unusable.
    """

    if parse_month_key(start_month) is None:
        return []
    try:
        total = float(total_amount)
    except (TypeError, ValueError):
        return []
    if not math.isfinite(total) or total <= 0:
        return []
    if not math.isfinite(total * 100):
        return []

    month_count = clamp_months(months)
    day = _coerce_day(target_day)
    status = kind.parse_status(default_status)

    total_cents = to_cents(total)
    base = total_cents // month_count
    remainder = total_cents - base * month_count

    drafts: List[ScheduleDraft] = []
    for index in range(month_count):
        key = add_months(start_month, index)
        cents = base + (1 if index < remainder else 0)
        drafts.append(
            ScheduleDraft(
                local_id=create_local_id(kind),
                period_month=key,
                period_date=build_period_date(key, day),
                amount=round(cents / 100, 2),
                status=status,
                notes="",
            )
        )

    logger.debug(
        {
            "event": "schedule_generated",
            "kind": kind.name,
            "months": month_count,
            "total_cents": total_cents,
            "remainder_cents": remainder,
        }
    )
    return drafts
