from __future__ import annotations

"""
Shared helpers for loading schedule planner defaults from the environment.

The planner API and any batch tooling need the same fallbacks for how many
months a new schedule spans and which day of the month rows land on. Parsing
and validating those values in one place keeps every caller consistent.
"""

import os
from dataclasses import dataclass
from typing import Optional

MONTHS_ENV_VAR = "SCHEDULE_DEFAULT_MONTHS"
DAY_ENV_VAR = "SCHEDULE_DEFAULT_DAY"

DEFAULT_MONTHS = 12
DEFAULT_DAY = 25
MONTHS_RANGE = (1, 60)
DAY_RANGE = (1, 31)


class ScheduleSettingsError(RuntimeError):
    """Raised when schedule settings cannot be constructed."""


@dataclass(frozen=True, slots=True)
class ScheduleSettings:
    default_months: int
    default_day: int


def load_schedule_settings(
    *,
    months_env: str = MONTHS_ENV_VAR,
    day_env: str = DAY_ENV_VAR,
    default_months: int = DEFAULT_MONTHS,
    default_day: int = DEFAULT_DAY,
) -> ScheduleSettings:
    """
    Construct ScheduleSettings from environment variables.

    Args:
        months_env: Env var overriding the default schedule length.
        day_env: Env var overriding the default day of month.
        default_*: Fallback values when the env var is unset/empty.
    """

    months = _parse_int(os.getenv(months_env), default_months, months_env)
    day = _parse_int(os.getenv(day_env), default_day, day_env)

    _check_range(months, MONTHS_RANGE, months_env)
    _check_range(day, DAY_RANGE, day_env)

    return ScheduleSettings(default_months=months, default_day=day)


def _parse_int(raw_value: Optional[str], default: int, env_key: str) -> int:
    if raw_value is None or raw_value.strip() == "":
        return default

    try:
        return int(raw_value)
    except ValueError as exc:
        raise ScheduleSettingsError(f"{env_key} must be an integer (received '{raw_value}')") from exc


def _check_range(value: int, bounds: tuple[int, int], env_key: str) -> None:
    low, high = bounds
    if not low <= value <= high:
        raise ScheduleSettingsError(f"{env_key} must be between {low} and {high} (received {value})")
