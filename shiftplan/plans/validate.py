"""Plan invariant validator.

Checks a finished plan against the scheduling invariants and raises
PlanningInvariantError listing every failed check. Generation never calls
this on its own; callers that want a hard guarantee (tests, ``--strict``)
run it on the result.
"""

from shiftplan.plans.errors import PlanningInvariantError
from shiftplan.plans.invariants import TRAILING_WINDOW_DAYS
from shiftplan.plans.phase import phase_quality_cap, phase_rank
from shiftplan.plans.types import PlanDay, WorkoutCategory

LOAD_TOLERANCE = 1e-6


def validate_plan(plan: list[PlanDay], allow_workday_runs: bool = False) -> None:
    """Validate a plan against all scheduling invariants.

    Args:
        plan: Generated plan
        allow_workday_runs: Accept runs on workdays (fallback enabled)

    Raises:
        PlanningInvariantError: If any invariant is violated
    """
    errors: list[str] = []

    def fail(code: str) -> None:
        if code not in errors:
            errors.append(code)

    # ---- Per-day checks ----
    for index, day in enumerate(plan):
        if day.is_run and day.is_workday and not allow_workday_runs:
            fail("RUN_ON_WORKDAY")

        if min(day.run_distance, day.run_load, day.cross_train_load, day.total_load) < 0:
            fail("NEGATIVE_LOAD")

        if abs(day.total_load - (day.run_load + day.cross_train_load)) > LOAD_TOLERANCE:
            fail("LOAD_MISMATCH")

        if index > 0:
            previous = plan[index - 1]
            if day.is_quality_day and previous.is_quality_day:
                fail("CONSECUTIVE_QUALITY")
            if phase_rank(day.phase) < phase_rank(previous.phase):
                fail("PHASE_REGRESSION")

    # ---- 7-day window checks ----
    for end in range(len(plan)):
        window = plan[max(0, end - TRAILING_WINDOW_DAYS):end + 1]

        if sum(1 for d in window if d.is_long_effort) > 1:
            fail("MULTIPLE_LONG_EFFORTS")

        if sum(1 for d in window if d.is_quality_day) > phase_quality_cap(plan[end].phase):
            fail("QUALITY_CAP_EXCEEDED")

        if sum(1 for d in window if d.workout_category == WorkoutCategory.REST) > 1:
            fail("REST_SPACING")

    if errors:
        raise PlanningInvariantError("INVALID_PLAN", errors)
