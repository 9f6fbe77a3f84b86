"""Tests for settings and policy configuration."""

import pytest
from pydantic import ValidationError

from shiftplan.config.settings import Settings
from shiftplan.plans.policy import PlanPolicy, RestDayPolicy


def test_defaults(monkeypatch):
    for name in (
        "SHIFTPLAN_LOG_LEVEL",
        "SHIFTPLAN_STRENGTH_SLOT_OFFSETS",
        "SHIFTPLAN_REST_DAY_POLICY",
        "SHIFTPLAN_ALLOW_WORKDAY_RUN_FALLBACK",
        "SHIFTPLAN_DEFAULT_VO2MAX",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.log_level == "INFO"
    assert settings.strength_slot_offsets == [2, 4]
    assert settings.rest_day_policy == "first_workday"
    assert settings.allow_workday_run_fallback is False
    assert settings.default_vo2max is None


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv("SHIFTPLAN_LOG_LEVEL", "debug")
    monkeypatch.setenv("SHIFTPLAN_STRENGTH_SLOT_OFFSETS", "[4, 1, 4]")
    monkeypatch.setenv("SHIFTPLAN_REST_DAY_POLICY", "WEEK_START")
    monkeypatch.setenv("SHIFTPLAN_ALLOW_WORKDAY_RUN_FALLBACK", "true")
    monkeypatch.setenv("SHIFTPLAN_DEFAULT_VO2MAX", "48.5")

    settings = Settings(_env_file=None)

    assert settings.log_level == "DEBUG"
    assert settings.strength_slot_offsets == [1, 4]
    assert settings.rest_day_policy == "week_start"
    assert settings.allow_workday_run_fallback is True
    assert settings.default_vo2max == 48.5


def test_invalid_log_level_falls_back_to_info():
    assert Settings(_env_file=None, log_level="LOUD").log_level == "INFO"


def test_invalid_rest_policy_falls_back():
    assert Settings(_env_file=None, rest_day_policy="sometimes").rest_day_policy == "first_workday"


def test_out_of_range_strength_offset_raises():
    with pytest.raises(ValidationError, match="within 0-6"):
        Settings(_env_file=None, strength_slot_offsets=[2, 7])


def test_policy_from_settings():
    settings = Settings(
        _env_file=None,
        strength_slot_offsets=[3],
        rest_day_policy="week_start",
        allow_workday_run_fallback=True,
    )
    policy = PlanPolicy.from_settings(settings)

    assert policy.strength_slot_offsets == frozenset({3})
    assert policy.rest_day_policy == RestDayPolicy.WEEK_START
    assert policy.allow_workday_run_fallback is True


def test_policy_is_frozen():
    policy = PlanPolicy()
    with pytest.raises(ValidationError):
        policy.allow_workday_run_fallback = True
