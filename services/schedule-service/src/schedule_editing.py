"""In-memory planner edits. Every helper returns a new list and leaves its input untouched."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, List, Sequence

from month_math import add_months, parse_month_key, shift_date
from schedule_generator import create_local_id, generate_even_schedule
from schedule_model import ScheduleDraft, ScheduleKind, ScheduleWorkflowError


def update_draft(drafts: Sequence[ScheduleDraft], local_id: str, **changes: Any) -> List[ScheduleDraft]:
    if "local_id" in changes:
        raise ScheduleWorkflowError("local_id cannot be edited")
    return [replace(draft, **changes) if draft.local_id == local_id else draft for draft in drafts]


def remove_draft(drafts: Sequence[ScheduleDraft], local_id: str) -> List[ScheduleDraft]:
    return [draft for draft in drafts if draft.local_id != local_id]


def append_next_draft(
    kind: ScheduleKind,
    drafts: Sequence[ScheduleDraft],
    *,
    start_month: str,
    total_amount: float,
    target_day: int,
) -> List[ScheduleDraft]:
    """
    Add one row after the last draft.

    An empty planner is seeded with a single generated row for `start_month`.
    Otherwise the last row is copied one month later with a fresh local id.
    """

    if not drafts:
        if not start_month:
            raise ScheduleWorkflowError("Set a start month before adding rows")
        seeds = generate_even_schedule(kind, start_month, 1, total_amount, target_day)
        if not seeds:
            raise ScheduleWorkflowError("Could not add a row; check the start month and amount")
        return seeds

    last = drafts[-1]
    if parse_month_key(last.period_month) is not None:
        next_month = add_months(last.period_month, 1)
    else:
        next_month = start_month
    if not next_month:
        raise ScheduleWorkflowError("Set a start month before adding rows")

    next_row = replace(
        last,
        local_id=create_local_id(kind),
        period_month=next_month,
        period_date=shift_date(last.period_date),
    )
    return [*drafts, next_row]
