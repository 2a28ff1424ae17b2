"""Billing (revenue recognition) schedule helpers bound to the BILLING kind."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from schedule_generator import generate_even_schedule
from schedule_model import BILLING, BillingStatus, ScheduleDraft
from schedule_serialization import (
    ScheduleContext,
    deserialize_schedules,
    drafts_to_payload,
    period_month_to_date,
    to_month_input_value,
)
from schedule_totals import sum_schedule_amounts

BILLING_SCHEDULE_STATUSES: List[BillingStatus] = list(BillingStatus)


def generate_billing_schedule(
    start_month: str,
    months: Any,
    total_amount: float,
    billing_day: Any,
    default_status: Optional[BillingStatus | str] = None,
) -> List[ScheduleDraft]:
    return generate_even_schedule(BILLING, start_month, months, total_amount, billing_day, default_status)


def billing_month_to_date(month_key: str | None) -> Optional[str]:
    return period_month_to_date(month_key)


def deserialize_billing_schedules(rows: Iterable[Mapping[str, Any]]) -> List[ScheduleDraft]:
    return deserialize_schedules(BILLING, rows)


def billing_drafts_to_payload(context: ScheduleContext, drafts: Iterable[ScheduleDraft]) -> List[Dict[str, Any]]:
    return drafts_to_payload(BILLING, context, drafts)


def sum_billing_amounts(drafts: Iterable[ScheduleDraft]) -> float:
    return sum_schedule_amounts(drafts)


__all__ = [
    "BILLING_SCHEDULE_STATUSES",
    "billing_drafts_to_payload",
    "billing_month_to_date",
    "deserialize_billing_schedules",
    "generate_billing_schedule",
    "sum_billing_amounts",
    "to_month_input_value",
]
