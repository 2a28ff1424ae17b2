from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from schedule_model import ScheduleDraft, ScheduleKind
from schedule_serialization import to_month_input_value


@dataclass
class PlanSummary:
    planned_total: float
    difference: Optional[float] = None


@dataclass
class StatusSummary:
    total: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)


def _finite_amount(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value) if math.isfinite(value) else 0.0


def sum_schedule_amounts(drafts: Iterable[ScheduleDraft]) -> float:
    """
    Add up draft amounts, counting NaN, infinities, and non-numbers as zero.

    Args:
        drafts: Drafts in any state of editing.
    Returns:
        Running total of every usable amount, so one broken row cannot poison the sum.
    """
    return sum((_finite_amount(draft.amount) for draft in drafts), 0.0)


def summarize_plan(drafts: Iterable[ScheduleDraft], expected_amount: Optional[float] = None) -> PlanSummary:
    """
    Compare the planned total with the amount the project is expected to bring in.

    Args:
        drafts: Current planner rows.
        expected_amount: Expected order value; None or zero means "unknown".
    Returns:
        PlanSummary whose difference is planned minus expected, or None when nothing is expected.
    """
    planned_total = sum_schedule_amounts(drafts)
    if not expected_amount:
        return PlanSummary(planned_total=planned_total)
    return PlanSummary(planned_total=planned_total, difference=planned_total - expected_amount)


def count_statuses(kind: ScheduleKind, rows: Iterable[Mapping[str, Any]]) -> StatusSummary:
    """Count persisted rows per status; every status of the kind is present in the result."""
    summary = StatusSummary(by_status={status.value: 0 for status in kind.statuses})
    for row in rows:
        status = kind.parse_status(row.get("status"))
        summary.total += 1
        summary.by_status[status.value] += 1
    return summary


def rows_in_month(kind: ScheduleKind, rows: Iterable[Mapping[str, Any]], month: str) -> List[Mapping[str, Any]]:
    """Return the rows scheduled in `month` ("YYYY-MM"), ordered by date; undated rows go last."""
    selected = [row for row in rows if to_month_input_value(row.get(kind.month_field)) == month]
    return sorted(selected, key=lambda row: (not row.get(kind.date_field), str(row.get(kind.date_field) or "")))
