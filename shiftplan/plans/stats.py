"""Plan statistics.

Pure derivations over a finished plan for reporting and tests: daily
load-equivalents, the trailing 10-day rolling load, per-type counts,
run-on-workday count, the longest run streak and phase date ranges.
"""

from datetime import date

from pydantic import BaseModel, Field

from shiftplan.plans.invariants import ROLLING_LOAD_WINDOW_DAYS
from shiftplan.plans.types import CROSS_TRAIN_LOAD_EQ, PHASE_ORDER, PlanDay, WorkoutType
from shiftplan.utils.numbers import safe_num


class PhaseRange(BaseModel):
    """First and last plan date of a phase."""

    start: date
    end: date


class PlanStatistics(BaseModel):
    """Derived plan metrics.

    Attributes:
        daily_load_eq: Run distance plus cross-training load-equivalent, per day
        rolling_10_day_load: Trailing 10-day load sum per day, seeded with
            ghost days of ``starting_load / 10`` before the plan start
        counts: Number of days per workout type (every type present, zero included)
        run_on_workday_count: Run days that fall on a workday
        max_run_streak: Longest run of consecutive run days
        phase_ranges: First/last date per phase present in the plan
    """

    daily_load_eq: list[float] = Field(default_factory=list)
    rolling_10_day_load: list[float] = Field(default_factory=list)
    counts: dict[str, int] = Field(default_factory=dict)
    run_on_workday_count: int = 0
    max_run_streak: int = 0
    phase_ranges: dict[str, PhaseRange] = Field(default_factory=dict)


def daily_load_equivalent(day: PlanDay) -> float:
    return round(safe_num(day.run_distance) + CROSS_TRAIN_LOAD_EQ.get(day.workout_type, 0.0), 1)


def rolling_loads(daily: list[float], starting_load: float) -> list[float]:
    """Trailing 10-day sums; indices before the start count ``starting_load / 10`` each."""
    ghost = max(0.0, safe_num(starting_load)) / ROLLING_LOAD_WINDOW_DAYS
    rolling: list[float] = []
    for index in range(len(daily)):
        first = index - ROLLING_LOAD_WINDOW_DAYS + 1
        ghost_days = max(0, -first)
        total = sum(daily[max(0, first):index + 1]) + ghost_days * ghost
        rolling.append(round(total, 1))
    return rolling


def max_run_streak(plan: list[PlanDay]) -> int:
    best = current = 0
    for day in plan:
        current = current + 1 if day.is_run else 0
        best = max(best, current)
    return best


def compute_plan_statistics(plan: list[PlanDay], starting_load: float = 0.0) -> PlanStatistics:
    """Compute reporting metrics for a finished plan.

    Args:
        plan: Generated plan (post-repair)
        starting_load: Rolling load before the plan, used for the ghost history

    Returns:
        PlanStatistics for the plan
    """
    daily = [daily_load_equivalent(day) for day in plan]

    counts = {str(workout_type): 0 for workout_type in WorkoutType}
    for day in plan:
        counts[str(day.workout_type)] += 1

    phase_ranges: dict[str, PhaseRange] = {}
    for phase in PHASE_ORDER:
        dates = [day.date for day in plan if day.phase == phase]
        if dates:
            phase_ranges[str(phase)] = PhaseRange(start=dates[0], end=dates[-1])

    return PlanStatistics(
        daily_load_eq=daily,
        rolling_10_day_load=rolling_loads(daily, starting_load),
        counts=counts,
        run_on_workday_count=sum(1 for day in plan if day.is_run and day.is_workday),
        max_run_streak=max_run_streak(plan),
        phase_ranges=phase_ranges,
    )
