"""
Status transitions for persisted schedule rows.

Each helper validates the transition and returns only the column updates; the
caller applies them to its store. Planned and postponed rows can be confirmed,
confirmed rows can be completed, and anything not yet completed can be postponed.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional

from month_math import add_months, parse_month_key
from schedule_model import ScheduleKind, ScheduleWorkflowError
from schedule_serialization import period_month_to_date, to_month_input_value


def _timestamp(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def _require_status(kind: ScheduleKind, row: Mapping[str, Any], action: str, allowed: Iterable[str]) -> None:
    current = kind.parse_status(row.get("status"))
    permitted = [kind.status_enum(value) for value in allowed]
    if current not in permitted:
        expected = " or ".join(status.value for status in permitted)
        raise ScheduleWorkflowError(
            f"Cannot {action} a {kind.name} schedule that is {current.value}; expected {expected}"
        )


def _ensure_open(kind: ScheduleKind, row: Mapping[str, Any], action: str) -> None:
    if kind.parse_status(row.get("status")) is kind.completed_status:
        raise ScheduleWorkflowError(
            f"Cannot {action} a {kind.name} schedule that is already {kind.completed_status.value}"
        )


def confirm_schedule(
    kind: ScheduleKind,
    row: Mapping[str, Any],
    actor_id: Optional[str],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Confirm a planned or postponed row as going ahead in its month."""
    _require_status(kind, row, "confirm", ("planned", "postponed"))
    return {
        "status": kind.status_enum("confirmed").value,
        "confirmed_by": actor_id,
        "confirmed_at": _timestamp(now).isoformat(),
    }


def default_postpone_month(kind: ScheduleKind, row: Mapping[str, Any]) -> str:
    """Suggest the month after the row's current month, or "" when it has none."""
    current = to_month_input_value(row.get(kind.month_field))
    if parse_month_key(current) is None:
        return ""
    return add_months(current, 1)


def postpone_schedule(
    kind: ScheduleKind,
    row: Mapping[str, Any],
    new_month: str,
    actor_id: Optional[str],
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Move a row to `new_month` and flag it as postponed.

    The reason, when given, replaces the row's notes; otherwise the notes are kept.
    """
    _ensure_open(kind, row, "postpone")
    month_date = period_month_to_date(new_month)
    if month_date is None:
        raise ScheduleWorkflowError("A postponed schedule needs a target month")
    return {
        kind.month_field: month_date,
        "status": kind.status_enum("postponed").value,
        "notes": reason or row.get("notes"),
        "confirmed_by": actor_id,
        "confirmed_at": _timestamp(now).isoformat(),
    }


def complete_schedule(
    kind: ScheduleKind,
    row: Mapping[str, Any],
    actor_id: Optional[str],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Mark a confirmed row billed (billing) or recorded (cost).

    Only confirmed rows can be completed. Undated rows take today's date.
    """
    _require_status(kind, row, "complete", ("confirmed",))
    timestamp = _timestamp(now)
    row_date = row.get(kind.date_field)
    if isinstance(row_date, date):
        row_date = row_date.isoformat()
    return {
        "status": kind.completed_status.value,
        kind.completed_by_field: actor_id,
        kind.completed_at_field: timestamp.isoformat(),
        kind.date_field: row_date or timestamp.date().isoformat(),
    }
