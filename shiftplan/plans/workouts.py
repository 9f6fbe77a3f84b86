"""Workout construction and demotion.

Distance formulas, segment breakdowns and the day builders used by the
assignment engine, plus the demote-to-easy operation shared with the
consistency repair pass. Every builder returns a refreshed PlanDay so flags
and loads always agree with the workout type.
"""

from datetime import date

from loguru import logger

from shiftplan.plans.invariants import (
    BELOW_LONG_RUN_FRACTION,
    EASY_RUN_LONG_FRACTION,
    EASY_RUN_WEEKLY_FRACTION,
    GOAL_WEEK_EASY_EVENT_FRACTION,
    GOAL_WEEK_EASY_LONG_FRACTION,
    LONG_RUN_PHASE_FRACTIONS,
    MIN_EASY_RUN_MILES,
    MIN_LONG_RUN_MILES,
    MIN_QUALITY_RUN_MILES,
    QUALITY_RUN_WEEKLY_FRACTION,
)
from shiftplan.plans.pace import PaceKind, PaceSet
from shiftplan.plans.types import (
    CROSS_TRAIN_WORKOUT_TYPES,
    Phase,
    PlanDay,
    Segment,
    WorkoutCategory,
    WorkoutType,
)
from shiftplan.utils.numbers import round_distance, safe_num

# (label, share of total distance, pace kind)
THRESHOLD_SPLITS: tuple[tuple[str, float, PaceKind], ...] = (
    ("Warmup", 0.25, "easy"),
    ("Threshold", 0.55, "threshold"),
    ("Cooldown", 0.20, "easy"),
)

INTERVAL_SPLITS: tuple[tuple[str, float, PaceKind], ...] = (
    ("Warmup", 0.30, "easy"),
    ("Intervals", 0.45, "interval"),
    ("Cooldown", 0.25, "easy"),
)


# ---- Distance formulas ----


def derive_long_run_miles(
    phase: Phase,
    weekly_target: float,
    event_distance: float | None = None,
) -> float:
    """Long effort distance for a phase.

    Args:
        phase: Training phase of the day
        weekly_target: Weekly target load in miles
        event_distance: When given, the result is capped at it (goal week)

    Returns:
        ``max(5, weekly_target * fraction(phase))`` rounded to 0.1
    """
    miles = max(MIN_LONG_RUN_MILES, safe_num(weekly_target) * LONG_RUN_PHASE_FRACTIONS[phase])
    if event_distance is not None and event_distance > 0:
        miles = min(miles, event_distance)
    return round_distance(miles)


def cap_below_long(miles: float, long_target: float) -> float:
    """Keep a non-long run shorter than the long effort."""
    return round_distance(min(safe_num(miles), safe_num(long_target) * BELOW_LONG_RUN_FRACTION))


def quality_run_miles(weekly_target: float, long_target: float) -> float:
    return cap_below_long(max(MIN_QUALITY_RUN_MILES, safe_num(weekly_target) * QUALITY_RUN_WEEKLY_FRACTION), long_target)


def easy_run_miles(weekly_target: float, long_target: float) -> float:
    miles = min(
        EASY_RUN_LONG_FRACTION * safe_num(long_target),
        max(MIN_EASY_RUN_MILES, safe_num(weekly_target) * EASY_RUN_WEEKLY_FRACTION),
    )
    return cap_below_long(miles, long_target)


def goal_week_easy_miles(weekly_target: float, long_target: float, event_distance: float) -> float:
    """Easy run in the final six days: shorter than both the long target and the event."""
    return round_distance(
        min(
            easy_run_miles(weekly_target, long_target),
            safe_num(long_target) * GOAL_WEEK_EASY_LONG_FRACTION,
            safe_num(event_distance) * GOAL_WEEK_EASY_EVENT_FRACTION,
        )
    )


# ---- Segments ----


def _pace(paces: PaceSet | None, kind: PaceKind) -> str | None:
    return paces.for_kind(kind) if paces else None


def _segment(label: str, miles: float, paces: PaceSet | None, kind: PaceKind) -> Segment:
    return Segment(
        label=label,
        distance_miles=miles,
        pace=_pace(paces, kind),
        duration_min=paces.duration_minutes(kind, miles) if paces else None,
    )


def split_distance(total: float, shares: tuple[float, ...]) -> list[float]:
    """Split a total into rounded parts; the last part absorbs rounding drift."""
    total = round_distance(total)
    parts = [round_distance(total * share) for share in shares[:-1]]
    parts.append(round_distance(total - sum(parts)))
    return parts


def single_run_segments(label: str, miles: float, paces: PaceSet | None) -> list[Segment]:
    return [_segment(label, round_distance(miles), paces, "easy")]


def workout_run_segments(workout_type: WorkoutType, total: float, paces: PaceSet | None) -> list[Segment]:
    """Warmup / main set / cooldown breakdown for a threshold or interval run."""
    splits = THRESHOLD_SPLITS if workout_type == WorkoutType.RUN_QUALITY_T else INTERVAL_SPLITS
    distances = split_distance(total, tuple(share for _, share, _ in splits))
    return [
        _segment(label, miles, paces, kind)
        for (label, _, kind), miles in zip(splits, distances, strict=True)
    ]


def rescale_run(day: PlanDay, max_miles: float) -> bool:
    """Shrink a run's segments so its distance does not exceed ``max_miles``.

    Returns:
        True if the day changed
    """
    if not day.is_run or day.run_distance <= max_miles:
        return False
    current = [safe_num(s.distance_miles) for s in day.segments]
    total = sum(current)
    if total <= 0:
        return False
    distances = split_distance(max_miles, tuple(miles / total for miles in current))
    for segment, old, miles in zip(day.segments, current, distances, strict=True):
        if segment.duration_min is not None and old > 0:
            segment.duration_min = round(segment.duration_min * miles / old)
        segment.distance_miles = miles
    day.refresh()
    return True


# ---- Day builders ----


def build_rest_day(day: date, phase: Phase, is_workday: bool) -> PlanDay:
    return PlanDay(date=day, phase=phase, workout_type=WorkoutType.REST, is_workday=is_workday).refresh()


def build_strength_day(day: date, phase: Phase, is_workday: bool) -> PlanDay:
    return PlanDay(date=day, phase=phase, workout_type=WorkoutType.STRENGTH, is_workday=is_workday).refresh()


def build_cross_train_day(day: date, phase: Phase, is_workday: bool, workout_type: WorkoutType) -> PlanDay:
    if workout_type not in CROSS_TRAIN_WORKOUT_TYPES:
        raise ValueError(f"Not a cross-training workout type: {workout_type}")
    return PlanDay(date=day, phase=phase, workout_type=workout_type, is_workday=is_workday).refresh()


def build_easy_run(day: date, phase: Phase, is_workday: bool, miles: float, paces: PaceSet | None) -> PlanDay:
    return PlanDay(
        date=day,
        phase=phase,
        workout_type=WorkoutType.RUN_EASY,
        is_workday=is_workday,
        segments=single_run_segments("Easy run", miles, paces),
    ).refresh()


def build_long_run(
    day: date,
    phase: Phase,
    is_workday: bool,
    miles: float,
    paces: PaceSet | None,
    label: str = "Long run",
) -> PlanDay:
    return PlanDay(
        date=day,
        phase=phase,
        workout_type=WorkoutType.RUN_QUALITY_LONG,
        is_workday=is_workday,
        segments=single_run_segments(label, miles, paces),
    ).refresh()


def build_workout_run(
    day: date,
    phase: Phase,
    is_workday: bool,
    workout_type: WorkoutType,
    miles: float,
    paces: PaceSet | None,
) -> PlanDay:
    return PlanDay(
        date=day,
        phase=phase,
        workout_type=workout_type,
        is_workday=is_workday,
        segments=workout_run_segments(workout_type, miles, paces),
    ).refresh()


# ---- Demotion ----


def demote_to_easy(day: PlanDay, easy_miles: float, paces: PaceSet | None, reason: str = "") -> bool:
    """Downgrade a quality day to its easy counterpart, in place.

    Runs become a single "Easy run" segment of ``min(previous distance,
    easy_miles)``; quality cross-training becomes easy cross-training.

    Returns:
        True if the day was a quality day and has been demoted
    """
    if not day.is_quality_day:
        return False

    previous_type = day.workout_type
    if day.workout_category == WorkoutCategory.RUN:
        miles = round_distance(min(day.run_distance, easy_miles))
        day.workout_type = WorkoutType.RUN_EASY
        day.segments = single_run_segments("Easy run", miles, paces)
    else:
        day.workout_type = WorkoutType.CROSS_EASY
    day.refresh()

    logger.debug(
        "Demoted quality day",
        date=day.date.isoformat(),
        previous_type=str(previous_type),
        reason=reason,
    )
    return True
