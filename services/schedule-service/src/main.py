"""
Schedule Service generates evenly distributed billing and cost schedules, converts
planner drafts to and from persisted rows, and computes the status updates for the
schedule board. It never stores anything itself.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

SRC_DIR = Path(__file__).resolve().parent
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

SERVICES_ROOT = SRC_DIR.parents[1]
if str(SERVICES_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICES_ROOT))

from schedule_generator import generate_even_schedule  # noqa: E402
from schedule_model import (  # noqa: E402
    ScheduleContextError,
    ScheduleDraft,
    ScheduleError,
    ScheduleKind,
    ScheduleStatusError,
    ScheduleWorkflowError,
    UnknownScheduleKindError,
    get_schedule_kind,
)
from schedule_serialization import ScheduleContext, deserialize_schedules, drafts_to_payload  # noqa: E402
from schedule_totals import count_statuses, rows_in_month, summarize_plan, sum_schedule_amounts  # noqa: E402
from schedule_workflow import (  # noqa: E402
    complete_schedule,
    confirm_schedule,
    default_postpone_month,
    postpone_schedule,
)
from shared.observability import (  # noqa: E402
    current_request_id,
    hash_payload,
    install_request_context,
    redact_fields,
    setup_telemetry,
)
from shared.schedule_settings import ScheduleSettings, ScheduleSettingsError, load_schedule_settings  # noqa: E402

logger = logging.getLogger(__name__)

app = FastAPI(title="Schedule Service")
setup_telemetry(app, service_name="schedule-service")
install_request_context(app)

EMPTY_PREVIEW_MESSAGE = "Could not generate a schedule preview. Check the start month and total amount."
LOGGED_ROW_FIELDS = ("status", "amount")

try:
    SCHEDULE_SETTINGS: ScheduleSettings = load_schedule_settings()
except ScheduleSettingsError as exc:
    logger.error("Failed to load schedule settings: %s", exc)
    raise


def reload_schedule_settings_for_tests() -> None:
    """Refresh planner defaults after tests mutate environment variables."""

    global SCHEDULE_SETTINGS
    SCHEDULE_SETTINGS = load_schedule_settings()


class DraftModel(BaseModel):
    local_id: Optional[str] = None
    period_month: str = ""
    period_date: str = ""
    amount: Optional[float] = None
    status: Optional[str] = None
    notes: str = ""


class GenerateRequest(BaseModel):
    start_month: str = ""
    months: Optional[float] = None
    total_amount: float = 0.0
    target_day: Optional[int] = None
    default_status: Optional[str] = None


class ContextModel(BaseModel):
    project_id: str
    quote_id: Optional[str] = None
    purchase_order_id: Optional[str] = None


class PayloadRequest(BaseModel):
    context: ContextModel
    drafts: List[DraftModel]


class RowsRequest(BaseModel):
    rows: List[Dict[str, Any]]


class SummaryRequest(BaseModel):
    drafts: List[DraftModel]
    expected_amount: Optional[float] = None


class BoardRequest(BaseModel):
    rows: List[Dict[str, Any]]
    month: Optional[str] = None
    status: Optional[str] = None


class TransitionRequest(BaseModel):
    row: Dict[str, Any]
    actor_id: Optional[str] = None
    month: Optional[str] = None
    reason: Optional[str] = None


_ERROR_CODES = {
    UnknownScheduleKindError: (404, "unknown_schedule_kind"),
    ScheduleStatusError: (422, "invalid_status"),
    ScheduleContextError: (422, "invalid_context"),
    ScheduleWorkflowError: (422, "invalid_transition"),
}


def error_response(status_code: int, error_code: str, details: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error_code, "details": details},
    )


@app.exception_handler(ScheduleError)
async def schedule_error_handler(request: Request, exc: ScheduleError) -> JSONResponse:
    status_code, error_code = _ERROR_CODES.get(type(exc), (400, "invalid_schedule_request"))
    logger.warning(
        {
            "event": "schedule_request_rejected",
            "path": request.url.path,
            "error": error_code,
            "details": str(exc),
            "request_id": current_request_id(),
        }
    )
    return error_response(status_code, error_code, str(exc))


def _draft_from_model(kind: ScheduleKind, model: DraftModel) -> ScheduleDraft:
    return ScheduleDraft(
        local_id=model.local_id or "",
        period_month=model.period_month,
        period_date=model.period_date,
        amount=float("nan") if model.amount is None else model.amount,
        status=kind.parse_status(model.status),
        notes=model.notes,
    )


def _serialize_draft(draft: ScheduleDraft) -> Dict[str, Any]:
    return {
        "local_id": draft.local_id,
        "period_month": draft.period_month,
        "period_date": draft.period_date,
        "amount": draft.amount,
        "status": draft.status.value,
        "notes": draft.notes,
    }


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok", "service": "schedule-service"}


@app.post("/schedules/{kind_name}/generate")
def generate_schedule(kind_name: str, payload: GenerateRequest) -> Dict[str, Any]:
    kind = get_schedule_kind(kind_name)
    months = payload.months if payload.months is not None else SCHEDULE_SETTINGS.default_months
    target_day = payload.target_day if payload.target_day is not None else SCHEDULE_SETTINGS.default_day

    drafts = generate_even_schedule(
        kind,
        payload.start_month,
        months,
        payload.total_amount,
        target_day,
        payload.default_status,
    )
    logger.info(
        {
            "event": "generate_schedule",
            "kind": kind.name,
            "start_month": payload.start_month,
            "requested_months": months,
            "generated_rows": len(drafts),
        }
    )
    return {
        "drafts": [_serialize_draft(draft) for draft in drafts],
        "total": sum_schedule_amounts(drafts),
        "message": None if drafts else EMPTY_PREVIEW_MESSAGE,
    }


@app.post("/schedules/{kind_name}/payload")
def build_payload(kind_name: str, payload: PayloadRequest) -> Dict[str, Any]:
    kind = get_schedule_kind(kind_name)
    context = ScheduleContext(
        project_id=payload.context.project_id,
        quote_id=payload.context.quote_id,
        purchase_order_id=payload.context.purchase_order_id,
    )
    drafts = [_draft_from_model(kind, model) for model in payload.drafts]
    rows = drafts_to_payload(kind, context, drafts)
    dropped = len(drafts) - len(rows)

    logger.info(
        {
            "event": "build_schedule_payload",
            "kind": kind.name,
            "project": hash_payload(context.project_id)[:16],
            "rows": len(rows),
            "dropped": dropped,
        }
    )
    return {"rows": rows, "dropped": dropped}


@app.post("/schedules/{kind_name}/drafts")
def load_drafts(kind_name: str, payload: RowsRequest) -> Dict[str, Any]:
    kind = get_schedule_kind(kind_name)
    drafts = deserialize_schedules(kind, payload.rows)
    return {"drafts": [_serialize_draft(draft) for draft in drafts]}


@app.post("/schedules/{kind_name}/summary")
def plan_summary(kind_name: str, payload: SummaryRequest) -> Dict[str, Any]:
    kind = get_schedule_kind(kind_name)
    drafts = [_draft_from_model(kind, model) for model in payload.drafts]
    summary = summarize_plan(drafts, payload.expected_amount)
    return {"planned_total": summary.planned_total, "difference": summary.difference}


@app.post("/schedules/{kind_name}/board")
def schedule_board(kind_name: str, payload: BoardRequest) -> Dict[str, Any]:
    kind = get_schedule_kind(kind_name)
    rows: List[Dict[str, Any]] = list(payload.rows)
    if payload.month:
        rows = rows_in_month(kind, rows, payload.month)
    if payload.status:
        wanted = kind.parse_status(payload.status)
        rows = [row for row in rows if kind.parse_status(row.get("status")) is wanted]

    summary = count_statuses(kind, rows)
    return {"rows": rows, "total": summary.total, "by_status": summary.by_status}


@app.post("/schedules/{kind_name}/transitions/{action}")
def transition_schedule(kind_name: str, action: str, payload: TransitionRequest) -> Any:
    kind = get_schedule_kind(kind_name)
    row = payload.row

    if action == "confirm":
        updates = confirm_schedule(kind, row, payload.actor_id)
    elif action == "postpone":
        month = payload.month or default_postpone_month(kind, row)
        updates = postpone_schedule(kind, row, month, payload.actor_id, reason=payload.reason)
    elif action == "complete":
        updates = complete_schedule(kind, row, payload.actor_id)
    else:
        return error_response(404, "unknown_transition", f"Unsupported schedule transition '{action}'")

    logger.info(
        {
            "event": "schedule_transition",
            "kind": kind.name,
            "action": action,
            "row": redact_fields(row, allowed_keys=LOGGED_ROW_FIELDS),
        }
    )
    return {"updates": updates}
