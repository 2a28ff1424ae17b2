from datetime import datetime, timezone

import pytest
from schedule_model import BILLING, COST, ScheduleWorkflowError
from schedule_workflow import complete_schedule, confirm_schedule, default_postpone_month, postpone_schedule

NOW = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


def billing_row(**overrides):
    row = {
        "id": "row-1",
        "project_id": "proj1",
        "billing_month": "2025-03-01",
        "billing_date": "2025-03-25",
        "amount": 100000,
        "status": "planned",
        "notes": "initial",
    }
    row.update(overrides)
    return row


def test_confirm_stamps_actor_and_time():
    updates = confirm_schedule(BILLING, billing_row(), "user-7", now=NOW)

    assert updates == {
        "status": "confirmed",
        "confirmed_by": "user-7",
        "confirmed_at": NOW.isoformat(),
    }


def test_confirm_without_explicit_time_uses_current_utc():
    updates = confirm_schedule(COST, {"cost_month": "2025-03-01", "status": "planned"}, None)

    assert updates["confirmed_by"] is None
    assert updates["confirmed_at"].endswith("+00:00")


class TestPostpone:
    def test_moves_month_and_replaces_notes_with_reason(self):
        updates = postpone_schedule(BILLING, billing_row(), "2025-05", "user-7", reason="customer delay", now=NOW)

        assert updates == {
            "billing_month": "2025-05-01",
            "status": "postponed",
            "notes": "customer delay",
            "confirmed_by": "user-7",
            "confirmed_at": NOW.isoformat(),
        }

    def test_keeps_notes_without_reason(self):
        updates = postpone_schedule(BILLING, billing_row(), "2025-04", "user-7", now=NOW)
        assert updates["notes"] == "initial"

    def test_cost_rows_use_cost_month(self):
        row = {"cost_month": "2025-12-01", "status": "confirmed"}

        updates = postpone_schedule(COST, row, default_postpone_month(COST, row), "user-2", now=NOW)

        assert updates["cost_month"] == "2026-01-01"

    def test_requires_target_month(self):
        with pytest.raises(ScheduleWorkflowError):
            postpone_schedule(BILLING, billing_row(), "", "user-7")

    def test_completed_rows_cannot_be_postponed(self):
        with pytest.raises(ScheduleWorkflowError):
            postpone_schedule(BILLING, billing_row(status="billed"), "2025-05", "user-7")


def test_default_postpone_month():
    assert default_postpone_month(BILLING, billing_row()) == "2025-04"
    assert default_postpone_month(BILLING, billing_row(billing_month=None)) == ""


def test_completed_rows_cannot_be_confirmed():
    with pytest.raises(ScheduleWorkflowError):
        confirm_schedule(COST, {"cost_month": "2025-01-01", "status": "recorded"}, "user-1")


class TestComplete:
    def test_billing_rows_become_billed(self):
        updates = complete_schedule(BILLING, billing_row(status="confirmed"), "user-9", now=NOW)

        assert updates == {
            "status": "billed",
            "billed_by": "user-9",
            "billed_at": NOW.isoformat(),
            "billing_date": "2025-03-25",
        }

    def test_cost_rows_become_recorded_with_todays_date_when_undated(self):
        row = {"cost_month": "2025-03-01", "cost_date": None, "status": "confirmed"}

        updates = complete_schedule(COST, row, "user-9", now=NOW)

        assert updates["status"] == "recorded"
        assert updates["recorded_by"] == "user-9"
        assert updates["recorded_at"] == NOW.isoformat()
        assert updates["cost_date"] == "2025-03-14"

    @pytest.mark.parametrize("status", ["planned", "postponed", "billed"])
    def test_only_confirmed_rows_can_be_completed(self, status):
        with pytest.raises(ScheduleWorkflowError):
            complete_schedule(BILLING, billing_row(status=status), "user-9", now=NOW)

    def test_legacy_confirmed_label_can_be_completed(self):
        updates = complete_schedule(COST, {"cost_date": "2025-03-05", "status": "確認済"}, "user-9", now=NOW)
        assert updates["status"] == "recorded"


class TestConfirmGuards:
    def test_postponed_rows_can_be_confirmed(self):
        updates = confirm_schedule(BILLING, billing_row(status="postponed"), "user-7", now=NOW)
        assert updates["status"] == "confirmed"

    def test_confirmed_rows_cannot_be_confirmed_again(self):
        with pytest.raises(ScheduleWorkflowError):
            confirm_schedule(BILLING, billing_row(status="confirmed"), "user-7")
