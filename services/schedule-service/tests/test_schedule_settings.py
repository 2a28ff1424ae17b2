import pytest
from shared.schedule_settings import (
    DAY_ENV_VAR,
    MONTHS_ENV_VAR,
    ScheduleSettings,
    ScheduleSettingsError,
    load_schedule_settings,
)


@pytest.fixture(autouse=True)
def clear_schedule_env(monkeypatch):
    monkeypatch.delenv(MONTHS_ENV_VAR, raising=False)
    monkeypatch.delenv(DAY_ENV_VAR, raising=False)


def test_defaults_when_env_is_unset():
    assert load_schedule_settings() == ScheduleSettings(default_months=12, default_day=25)


def test_env_overrides(monkeypatch):
    monkeypatch.setenv(MONTHS_ENV_VAR, "24")
    monkeypatch.setenv(DAY_ENV_VAR, " 31 ")

    settings = load_schedule_settings()

    assert settings.default_months == 24
    assert settings.default_day == 31


def test_blank_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv(MONTHS_ENV_VAR, "  ")

    assert load_schedule_settings(default_months=6).default_months == 6


def test_non_integer_value_is_rejected(monkeypatch):
    monkeypatch.setenv(MONTHS_ENV_VAR, "twelve")

    with pytest.raises(ScheduleSettingsError, match=MONTHS_ENV_VAR):
        load_schedule_settings()


@pytest.mark.parametrize("env_key, raw", [(MONTHS_ENV_VAR, "0"), (MONTHS_ENV_VAR, "61"), (DAY_ENV_VAR, "32")])
def test_out_of_range_values_are_rejected(monkeypatch, env_key, raw):
    monkeypatch.setenv(env_key, raw)

    with pytest.raises(ScheduleSettingsError, match="between"):
        load_schedule_settings()
