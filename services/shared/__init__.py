"""
Shared utilities for the schedule planner services.

This package contains code shared across services:
- schedule_settings: Environment-driven planner defaults
- observability: Telemetry, logging, and privacy utilities
"""

from .schedule_settings import (
    DAY_ENV_VAR,
    MONTHS_ENV_VAR,
    ScheduleSettings,
    ScheduleSettingsError,
    load_schedule_settings,
)

__all__ = [
    "DAY_ENV_VAR",
    "MONTHS_ENV_VAR",
    "ScheduleSettings",
    "ScheduleSettingsError",
    "load_schedule_settings",
]
