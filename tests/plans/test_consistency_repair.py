"""Tests for the consistency repair pass.

Plans are assembled by hand so each repair step sees a violation the forward
pass would never produce on its own.
"""

from datetime import date, timedelta

import pytest

from shiftplan.plans.context import PlanContext
from shiftplan.plans.invariants import TRAILING_WINDOW_DAYS
from shiftplan.plans.phase import get_phase, phase_quality_cap
from shiftplan.plans.repair.consistency_repair import (
    cap_workout_runs,
    dedupe_long_efforts,
    enforce_consistency,
    enforce_quality_cap,
    protect_taper,
)
from shiftplan.plans.types import PlanDay, WorkoutType
from shiftplan.plans.workouts import (
    build_cross_train_day,
    build_easy_run,
    build_long_run,
    build_workout_run,
)

START = date(2026, 3, 1)
GOAL = date(2026, 3, 30)


@pytest.fixture
def context() -> PlanContext:
    return PlanContext(start_date=START, goal_date=GOAL, event_distance=8.0, starting_load=25, peak_load=55)


def _easy_plan(days: int = 30) -> list[PlanDay]:
    plan = []
    for offset in range(days):
        day = START + timedelta(days=offset)
        plan.append(build_easy_run(day, get_phase(day, START, GOAL), False, 3.0, None))
    return plan


def _put(plan: list[PlanDay], index: int, kind: WorkoutType, miles: float = 0.0) -> None:
    day = plan[index]
    if kind == WorkoutType.RUN_QUALITY_LONG:
        plan[index] = build_long_run(day.date, day.phase, False, miles, None)
    elif kind in (WorkoutType.RUN_QUALITY_T, WorkoutType.RUN_QUALITY_I):
        plan[index] = build_workout_run(day.date, day.phase, False, kind, miles, None)
    elif kind == WorkoutType.RUN_EASY:
        plan[index] = build_easy_run(day.date, day.phase, False, miles, None)
    else:
        plan[index] = build_cross_train_day(day.date, day.phase, True, kind)


def test_duplicate_long_efforts_keep_earliest(context):
    """Test that the later long effort is demoted and the window capped to the kept one."""
    plan = _easy_plan()
    _put(plan, 2, WorkoutType.RUN_QUALITY_LONG, 6.0)
    _put(plan, 4, WorkoutType.RUN_EASY, 7.0)
    _put(plan, 5, WorkoutType.RUN_QUALITY_LONG, 8.0)

    assert dedupe_long_efforts(plan, context) > 0

    assert plan[2].is_long_effort
    assert plan[2].run_distance == 6.0
    assert not plan[5].is_long_effort
    assert plan[5].workout_type == WorkoutType.RUN_EASY
    assert plan[5].run_distance <= 6.0
    assert plan[4].run_distance == 6.0


def test_taper_protection_demotes_goal_week_long(context):
    plan = _easy_plan()
    _put(plan, 26, WorkoutType.RUN_QUALITY_LONG, 10.0)
    _put(plan, 29, WorkoutType.RUN_QUALITY_LONG, 8.0)

    assert protect_taper(plan, context) == 1

    assert not plan[26].is_long_effort
    assert plan[29].is_long_effort
    assert plan[29].run_distance == 8.0


def test_workout_run_capped_by_nearest_long(context):
    """Test the 60% cap against the nearest long effort, ties going to the earliest."""
    plan = _easy_plan()
    _put(plan, 12, WorkoutType.RUN_QUALITY_LONG, 10.0)
    _put(plan, 20, WorkoutType.RUN_QUALITY_LONG, 5.0)
    _put(plan, 16, WorkoutType.RUN_QUALITY_T, 9.0)

    cap_workout_runs(plan, context)

    assert plan[16].workout_type == WorkoutType.RUN_QUALITY_T
    assert plan[16].run_distance == pytest.approx(6.0)


def test_workout_run_without_any_long_is_demoted(context):
    plan = _easy_plan()
    _put(plan, 16, WorkoutType.RUN_QUALITY_I, 7.0)

    cap_workout_runs(plan, context)

    assert plan[16].workout_type == WorkoutType.RUN_EASY
    assert not plan[16].is_quality_day


def test_quality_cap_demotes_lowest_priority_first(context):
    """Test BASE windows (cap 1): cross quality goes first, then intervals, then thresholds."""
    plan = _easy_plan()
    _put(plan, 1, WorkoutType.CROSS_QUALITY_T)
    _put(plan, 3, WorkoutType.RUN_QUALITY_I, 6.0)
    _put(plan, 5, WorkoutType.RUN_QUALITY_T, 6.0)

    demoted, anomalies = enforce_quality_cap(plan, context)

    assert demoted == 2
    assert anomalies == []
    assert plan[1].workout_type == WorkoutType.CROSS_EASY
    assert plan[3].workout_type == WorkoutType.RUN_EASY
    assert plan[5].workout_type == WorkoutType.RUN_QUALITY_T


def test_quality_cap_protects_long_effort(context):
    plan = _easy_plan()
    _put(plan, 2, WorkoutType.RUN_QUALITY_T, 6.0)
    _put(plan, 4, WorkoutType.RUN_QUALITY_LONG, 7.0)

    enforce_quality_cap(plan, context)

    assert plan[2].workout_type == WorkoutType.RUN_EASY
    assert plan[4].is_long_effort


def test_repair_brings_every_window_under_cap(context):
    """Test that an all-quality plan ends with every trailing window within its cap."""
    plan = _easy_plan()
    for index in range(len(plan)):
        _put(plan, index, WorkoutType.CROSS_QUALITY_I)

    anomalies = enforce_consistency(plan, context)

    assert anomalies == []
    for end in range(len(plan)):
        window = plan[max(0, end - TRAILING_WINDOW_DAYS):end + 1]
        assert sum(1 for day in window if day.is_quality_day) <= phase_quality_cap(plan[end].phase)


def test_repair_never_changes_plan_length(context):
    plan = _easy_plan()
    _put(plan, 3, WorkoutType.RUN_QUALITY_LONG, 9.0)
    _put(plan, 4, WorkoutType.RUN_QUALITY_LONG, 9.0)

    enforce_consistency(plan, context)

    assert len(plan) == 30
    assert [day.date for day in plan] == [START + timedelta(days=i) for i in range(30)]
