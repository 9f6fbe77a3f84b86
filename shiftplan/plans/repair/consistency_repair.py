"""Consistency repair pass for generated plans.

This module runs once over a completed plan and fixes rule violations the
forward pass could not see at assignment time. It only demotes or shortens
days, in place, and never raises: a window it cannot bring under its cap is
reported as an anomaly instead.
"""

from loguru import logger

from shiftplan.plans.context import PlanContext
from shiftplan.plans.invariants import TRAILING_WINDOW_DAYS, WORKOUT_RUN_LONG_CAP_FRACTION
from shiftplan.plans.phase import phase_quality_cap
from shiftplan.plans.types import PlanAnomaly, PlanDay, WorkoutType
from shiftplan.plans.workouts import demote_to_easy, rescale_run
from shiftplan.utils.numbers import round_distance

# Lowest value is demoted first when a window is over its quality cap
DEMOTION_PRIORITY: dict[WorkoutType, int] = {
    WorkoutType.CROSS_QUALITY_T: 0,
    WorkoutType.CROSS_QUALITY_I: 0,
    WorkoutType.RUN_QUALITY_I: 1,
    WorkoutType.RUN_QUALITY_T: 2,
    WorkoutType.RUN_QUALITY_LONG: 3,
}


def _window(end: int) -> range:
    """Indices of the 7-day window ending at ``end`` (inclusive)."""
    return range(max(0, end - TRAILING_WINDOW_DAYS), end + 1)


def _demote(plan: list[PlanDay], index: int, context: PlanContext, reason: str) -> bool:
    day = plan[index]
    return demote_to_easy(day, context.easy_miles(day.date, day.phase), context.paces, reason=reason)


def protect_taper(plan: list[PlanDay], context: PlanContext) -> int:
    """Demote long efforts in the six days before the goal.

    Returns:
        Number of days demoted
    """
    demoted = 0
    for index, day in enumerate(plan):
        if day.is_long_effort and context.in_goal_week(day.date):
            if _demote(plan, index, context, reason="taper protection"):
                demoted += 1
    return demoted


def dedupe_long_efforts(plan: list[PlanDay], context: PlanContext) -> int:
    """Keep one long effort per 7-day window.

    The earliest long effort in a window is kept; later ones are demoted and
    every other run in the window is shortened to the kept distance.

    Returns:
        Number of days demoted or shortened
    """
    changed = 0
    for end in range(len(plan)):
        window = _window(end)
        longs = [i for i in window if plan[i].is_long_effort]
        if len(longs) < 2:
            continue

        keep = longs[0]
        for index in longs[1:]:
            if _demote(plan, index, context, reason="duplicate long effort"):
                changed += 1

        kept_distance = plan[keep].run_distance
        for index in window:
            if index != keep and rescale_run(plan[index], kept_distance):
                changed += 1
    return changed


def _nearest_long_index(plan: list[PlanDay], index: int) -> int | None:
    longs = [i for i, day in enumerate(plan) if day.is_long_effort]
    if not longs:
        return None
    return min(longs, key=lambda i: (abs(i - index), i))


def cap_workout_runs(plan: list[PlanDay], context: PlanContext) -> int:
    """Cap threshold/interval runs at a fraction of the nearest long effort.

    Without any long effort in the plan there is nothing to scale against,
    so the run is demoted to easy.

    Returns:
        Number of days demoted or shortened
    """
    changed = 0
    for index, day in enumerate(plan):
        if not day.is_workout_run:
            continue
        nearest = _nearest_long_index(plan, index)
        if nearest is None:
            if _demote(plan, index, context, reason="no long effort to scale against"):
                changed += 1
            continue
        limit = round_distance(plan[nearest].run_distance * WORKOUT_RUN_LONG_CAP_FRACTION)
        if rescale_run(day, limit):
            changed += 1
    return changed


def enforce_quality_cap(plan: list[PlanDay], context: PlanContext) -> tuple[int, list[PlanAnomaly]]:
    """Bring every trailing window under the quality cap of its last day's phase.

    Returns:
        Tuple of (days demoted, anomalies for windows left over cap)
    """
    demoted = 0
    anomalies: list[PlanAnomaly] = []

    for end in range(len(plan)):
        cap = phase_quality_cap(plan[end].phase)
        quality = [i for i in _window(end) if plan[i].is_quality_day]

        while len(quality) > cap:
            victim = min(quality, key=lambda i: (DEMOTION_PRIORITY.get(plan[i].workout_type, 0), i))
            if not _demote(plan, victim, context, reason="window quality cap"):
                anomalies.append(
                    PlanAnomaly(
                        code="QUALITY_CAP_UNRESOLVED",
                        date=plan[end].date,
                        detail=f"{len(quality)} quality days in window, cap {cap}",
                    )
                )
                logger.warning("Quality cap left unresolved", date=plan[end].date.isoformat(), count=len(quality), cap=cap)
                break
            demoted += 1
            quality.remove(victim)

    return demoted, anomalies


def enforce_consistency(plan: list[PlanDay], context: PlanContext) -> list[PlanAnomaly]:
    """Run every repair step over the plan, in place.

    Order: taper protection, duplicate long efforts, workout run caps,
    window quality caps.

    Args:
        plan: Completed plan from the assignment engine
        context: Sizing context used to size demoted runs

    Returns:
        Anomalies recorded while repairing (empty when everything resolved)
    """
    taper_demoted = protect_taper(plan, context)
    long_changes = dedupe_long_efforts(plan, context)
    workout_changes = cap_workout_runs(plan, context)
    quality_demoted, anomalies = enforce_quality_cap(plan, context)

    logger.info(
        "Plan consistency enforced",
        days=len(plan),
        taper_demoted=taper_demoted,
        long_changes=long_changes,
        workout_changes=workout_changes,
        quality_demoted=quality_demoted,
        anomalies=len(anomalies),
    )
    return anomalies
