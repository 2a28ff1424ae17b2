from datetime import date

import pytest
from month_math import (
    add_months,
    build_period_date,
    clamp_day,
    days_in_month,
    month_key,
    parse_month_key,
    shift_date,
)


def test_month_key_zero_pads_month():
    assert month_key(date(2025, 3, 9)) == "2025-03"
    assert month_key(date(2025, 11, 30)) == "2025-11"


@pytest.mark.parametrize(
    "key, expected",
    [
        ("2025-01", (2025, 1)),
        ("2025-01-15", (2025, 1)),
        ("2025-13", (2025, 13)),
        ("2025", None),
        ("", None),
        (None, None),
        ("invalid", None),
        ("2025-xx", None),
        ("2025-00", None),
    ],
)
def test_parse_month_key(key, expected):
    assert parse_month_key(key) == expected


class TestAddMonths:
    def test_moves_forward_within_year(self):
        assert add_months("2025-01", 2) == "2025-03"

    def test_rolls_over_year_end(self):
        assert add_months("2025-11", 1) == "2025-12"
        assert add_months("2025-11", 2) == "2026-01"
        assert add_months("2025-12", 14) == "2027-02"

    def test_rolls_back_across_year_start(self):
        assert add_months("2025-01", -1) == "2024-12"
        assert add_months("2025-03", -15) == "2023-12"

    def test_zero_offset_normalizes_padding(self):
        assert add_months("2025-1", 0) == "2025-01"

    def test_malformed_key_is_returned_unchanged(self):
        assert add_months("invalid", 3) == "invalid"
        assert add_months("", 3) == ""


class TestDaysInMonth:
    def test_regular_months(self):
        assert days_in_month(2025, 0) == 31
        assert days_in_month(2025, 3) == 30
        assert days_in_month(2025, 11) == 31

    def test_february_leap_rules(self):
        assert days_in_month(2025, 1) == 28
        assert days_in_month(2024, 1) == 29
        assert days_in_month(1900, 1) == 28
        assert days_in_month(2000, 1) == 29

    def test_out_of_range_index_rolls_into_next_year(self):
        assert days_in_month(2023, 13) == 29  # February 2024


class TestClampDay:
    def test_day_past_month_end_clamps_down(self):
        assert clamp_day(2025, 1, 31) == 28
        assert clamp_day(2024, 1, 31) == 29
        assert clamp_day(2025, 3, 31) == 30

    def test_non_positive_day_clamps_up(self):
        assert clamp_day(2025, 0, 0) == 1
        assert clamp_day(2025, 0, -5) == 1

    def test_valid_day_is_kept(self):
        assert clamp_day(2025, 0, 15) == 15


def test_build_period_date_clamps_and_pads():
    assert build_period_date("2025-02", 31) == "2025-02-28"
    assert build_period_date("2025-06", 5) == "2025-06-05"
    assert build_period_date("invalid", 5) == ""


class TestShiftDate:
    def test_moves_one_month(self):
        assert shift_date("2025-01-25") == "2025-02-25"

    def test_clamps_to_end_of_shorter_month(self):
        assert shift_date("2025-01-31") == "2025-02-28"

    def test_crosses_year_boundary(self):
        assert shift_date("2025-12-15") == "2026-01-15"

    def test_empty_and_invalid_values(self):
        assert shift_date("") == ""
        assert shift_date(None) == ""
        assert shift_date("not-a-date") == "not-a-date"
