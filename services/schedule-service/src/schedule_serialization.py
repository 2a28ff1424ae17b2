"""
Conversions between editable schedule drafts and persisted schedule rows.

Persisted rows are plain dicts keyed by the kind's column names, ready for
whichever store the caller uses.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional

from schedule_generator import create_local_id
from schedule_model import ScheduleContextError, ScheduleDraft, ScheduleKind

logger = logging.getLogger(__name__)

_LINK_FIELDS = ("quote_id", "purchase_order_id")


@dataclass(frozen=True, slots=True)
class ScheduleContext:
    """Identifiers stamped onto every persisted row during a save."""

    project_id: str
    quote_id: Optional[str] = None
    purchase_order_id: Optional[str] = None


def period_month_to_date(key: str | None) -> Optional[str]:
    """
    Turn "YYYY-MM" into the first-of-month date "YYYY-MM-01".

    The parts are not range-checked: "2025-99" becomes "2025-99-01".
    """

    if not key:
        return None
    parts = key.split("-")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None
    return f"{parts[0]}-{parts[1]}-01"


def to_month_input_value(value: str | date | None) -> str:
    if not value:
        return ""
    if isinstance(value, date):
        value = value.isoformat()
    return value[:7]


def _date_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _coerce_amount(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _is_persistable_amount(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def deserialize_schedules(kind: ScheduleKind, rows: Iterable[Mapping[str, Any]]) -> List[ScheduleDraft]:
    """Build fresh drafts (with new local ids) from rows loaded out of storage."""
    return [
        ScheduleDraft(
            local_id=create_local_id(kind),
            period_month=to_month_input_value(row.get(kind.month_field)),
            period_date=_date_text(row.get(kind.date_field)),
            amount=_coerce_amount(row.get("amount")),
            status=kind.parse_status(row.get("status")),
            notes=row.get("notes") or "",
        )
        for row in rows
    ]


def _link_values(kind: ScheduleKind, context: ScheduleContext) -> Dict[str, Optional[str]]:
    if not context.project_id:
        raise ScheduleContextError("A project id is required to save schedule rows")

    links: Dict[str, Optional[str]] = {}
    for field_name in _LINK_FIELDS:
        value = getattr(context, field_name) or None
        if field_name in kind.link_fields:
            links[field_name] = value
        elif value is not None:
            raise ScheduleContextError(f"{kind.name} schedules cannot be linked via {field_name}")
    return links


def drafts_to_payload(
    kind: ScheduleKind,
    context: ScheduleContext,
    drafts: Iterable[ScheduleDraft],
) -> List[Dict[str, Any]]:
    """
    Map drafts onto the kind's persisted row shape.

    Drafts without a month or with a non-finite amount are left out so that
    unfinished scratch rows never block saving the rest.
    """

    links = _link_values(kind, context)
    payload: List[Dict[str, Any]] = []
    dropped = 0
    for draft in drafts:
        if not draft.period_month or not _is_persistable_amount(draft.amount):
            dropped += 1
            continue
        payload.append(
            {
                "project_id": context.project_id,
                **links,
                kind.month_field: period_month_to_date(draft.period_month),
                kind.date_field: draft.period_date or None,
                "amount": draft.amount,
                "status": kind.parse_status(draft.status).value,
                "notes": draft.notes or None,
            }
        )

    if dropped:
        logger.debug({"event": "schedule_drafts_dropped", "kind": kind.name, "dropped": dropped})
    return payload
