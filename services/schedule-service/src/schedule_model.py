from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ScheduleError(ValueError):
    """Base class for caller errors raised by the schedule helpers."""


class ScheduleStatusError(ScheduleError):
    """Raised when a status label does not belong to the schedule kind."""


class ScheduleContextError(ScheduleError):
    """Raised when a save context cannot be stamped onto persisted rows."""


class UnknownScheduleKindError(ScheduleError):
    """Raised when a schedule kind name is not registered."""


class ScheduleWorkflowError(ScheduleError):
    """Raised when a planner edit or status transition is not allowed."""


class BillingStatus(str, Enum):
    """Lifecycle of a billing (revenue recognition) schedule row."""

    PLANNED = "planned"
    CONFIRMED = "confirmed"
    POSTPONED = "postponed"
    BILLED = "billed"


class CostStatus(str, Enum):
    """Lifecycle of a cost (purchase recognition) schedule row."""

    PLANNED = "planned"
    CONFIRMED = "confirmed"
    POSTPONED = "postponed"
    RECORDED = "recorded"


# Labels written by the previous application; rows loaded from old tables still carry them.
_LEGACY_STATUS_LABELS: dict[str, str] = {
    "予定": "planned",
    "確認済": "confirmed",
    "確定": "confirmed",
    "延期": "postponed",
}


@dataclass
class ScheduleDraft:
    """
    Editable, in-memory schedule row.

    `local_id` only identifies the row within one editing session; reloading
    persisted rows always produces new ids.
    """

    local_id: str
    period_month: str
    period_date: str
    amount: float
    status: Enum
    notes: str = ""


@dataclass(frozen=True, slots=True)
class ScheduleKind:
    """Describes how one schedule flavour names its statuses and columns."""

    name: str
    status_enum: type[Enum]
    default_status: Enum
    completed_status: Enum
    completed_legacy_labels: tuple[str, ...]
    local_id_prefix: str
    month_field: str
    date_field: str
    link_fields: tuple[str, ...]
    completed_by_field: str
    completed_at_field: str

    @property
    def statuses(self) -> list[Enum]:
        return list(self.status_enum)

    def parse_status(self, value: Any) -> Enum:
        """
        Coerce enum members, enum values, or legacy labels into this kind's status enum.

        `None` (or an empty string) maps to the kind's default status.
        """

        if value is None or value == "":
            return self.default_status
        if isinstance(value, self.status_enum):
            return value
        if isinstance(value, Enum):
            value = value.value
        if not isinstance(value, str):
            raise ScheduleStatusError(f"Unsupported {self.name} status {value!r}")

        candidate = value.strip()
        if candidate in self.completed_legacy_labels:
            return self.completed_status
        candidate = _LEGACY_STATUS_LABELS.get(candidate, candidate.lower())
        try:
            return self.status_enum(candidate)
        except ValueError as exc:
            allowed = ", ".join(status.value for status in self.status_enum)
            raise ScheduleStatusError(
                f"Unsupported {self.name} status '{value}' (expected one of: {allowed})"
            ) from exc


BILLING = ScheduleKind(
    name="billing",
    status_enum=BillingStatus,
    default_status=BillingStatus.PLANNED,
    completed_status=BillingStatus.BILLED,
    completed_legacy_labels=("計上済", "請求済"),
    local_id_prefix="plan",
    month_field="billing_month",
    date_field="billing_date",
    link_fields=("quote_id",),
    completed_by_field="billed_by",
    completed_at_field="billed_at",
)

COST = ScheduleKind(
    name="cost",
    status_enum=CostStatus,
    default_status=CostStatus.PLANNED,
    completed_status=CostStatus.RECORDED,
    completed_legacy_labels=("計上済",),
    local_id_prefix="cost",
    month_field="cost_month",
    date_field="cost_date",
    link_fields=("quote_id", "purchase_order_id"),
    completed_by_field="recorded_by",
    completed_at_field="recorded_at",
)

SCHEDULE_KINDS: dict[str, ScheduleKind] = {kind.name: kind for kind in (BILLING, COST)}


def get_schedule_kind(name: str) -> ScheduleKind:
    candidate = (name or "").strip().lower()
    try:
        return SCHEDULE_KINDS[candidate]
    except KeyError as exc:
        raise UnknownScheduleKindError(f"Unknown schedule kind '{name}'") from exc
