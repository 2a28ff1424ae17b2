"""Cost (purchase recognition) schedule helpers bound to the COST kind."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from schedule_generator import generate_even_schedule
from schedule_model import COST, CostStatus, ScheduleDraft
from schedule_serialization import (
    ScheduleContext,
    deserialize_schedules,
    drafts_to_payload,
    period_month_to_date,
    to_month_input_value,
)
from schedule_totals import sum_schedule_amounts

COST_SCHEDULE_STATUSES: List[CostStatus] = list(CostStatus)


def generate_cost_schedule(
    start_month: str,
    months: Any,
    total_amount: float,
    cost_day: Any,
    default_status: Optional[CostStatus | str] = None,
) -> List[ScheduleDraft]:
    return generate_even_schedule(COST, start_month, months, total_amount, cost_day, default_status)


def cost_month_to_date(month_key: str | None) -> Optional[str]:
    return period_month_to_date(month_key)


def deserialize_cost_schedules(rows: Iterable[Mapping[str, Any]]) -> List[ScheduleDraft]:
    return deserialize_schedules(COST, rows)


def cost_drafts_to_payload(context: ScheduleContext, drafts: Iterable[ScheduleDraft]) -> List[Dict[str, Any]]:
    """Rows may link to both the originating quote and the purchase order."""
    return drafts_to_payload(COST, context, drafts)


def sum_cost_amounts(drafts: Iterable[ScheduleDraft]) -> float:
    return sum_schedule_amounts(drafts)


__all__ = [
    "COST_SCHEDULE_STATUSES",
    "cost_drafts_to_payload",
    "cost_month_to_date",
    "deserialize_cost_schedules",
    "generate_cost_schedule",
    "sum_cost_amounts",
    "to_month_input_value",
]
