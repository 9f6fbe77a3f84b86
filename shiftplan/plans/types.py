"""Canonical plan schema.

This module defines the records produced by the plan generator where:
- All distances are MILES
- Cross-training stress is expressed as a mile-equivalent load
- total_load is derived, never set on its own
- Flags (quality, long effort, cross-train intensity) are derived from the workout type
"""

from datetime import date as date_type
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from shiftplan.plans.invariants import MIN_LONG_RUN_MILES
from shiftplan.utils.numbers import compute_total_load, round_distance, safe_num


class Phase(StrEnum):
    """Training phase, ordered BASE -> BUILD -> PEAK -> TAPER."""

    BASE = "BASE"
    BUILD = "BUILD"
    PEAK = "PEAK"
    TAPER = "TAPER"


PHASE_ORDER: tuple[Phase, ...] = (Phase.BASE, Phase.BUILD, Phase.PEAK, Phase.TAPER)


class WorkoutCategory(StrEnum):
    RUN = "run"
    CROSS_TRAIN = "cross_train"
    STRENGTH = "strength"
    REST = "rest"


class WorkoutType(StrEnum):
    RUN_EASY = "RUN_EASY"
    RUN_QUALITY_T = "RUN_QUALITY_T"
    RUN_QUALITY_I = "RUN_QUALITY_I"
    RUN_QUALITY_LONG = "RUN_QUALITY_LONG"
    CROSS_EASY = "CROSS_EASY"
    CROSS_QUALITY_T = "CROSS_QUALITY_T"
    CROSS_QUALITY_I = "CROSS_QUALITY_I"
    STRENGTH = "STRENGTH"
    REST = "REST"


class CrossTrainIntensity(StrEnum):
    EASY = "easy"
    QUALITY = "quality"
    NONE = "none"


RUN_WORKOUT_TYPES: frozenset[WorkoutType] = frozenset(
    {
        WorkoutType.RUN_EASY,
        WorkoutType.RUN_QUALITY_T,
        WorkoutType.RUN_QUALITY_I,
        WorkoutType.RUN_QUALITY_LONG,
    }
)

CROSS_TRAIN_WORKOUT_TYPES: frozenset[WorkoutType] = frozenset(
    {
        WorkoutType.CROSS_EASY,
        WorkoutType.CROSS_QUALITY_T,
        WorkoutType.CROSS_QUALITY_I,
    }
)

QUALITY_WORKOUT_TYPES: frozenset[WorkoutType] = frozenset(
    {
        WorkoutType.RUN_QUALITY_T,
        WorkoutType.RUN_QUALITY_I,
        WorkoutType.RUN_QUALITY_LONG,
        WorkoutType.CROSS_QUALITY_T,
        WorkoutType.CROSS_QUALITY_I,
    }
)

# Threshold/interval runs: quality runs that are not the long effort
WORKOUT_RUN_TYPES: frozenset[WorkoutType] = frozenset(
    {WorkoutType.RUN_QUALITY_T, WorkoutType.RUN_QUALITY_I}
)

# Cross-training load in run-mile equivalents
CROSS_TRAIN_LOAD_EQ: dict[WorkoutType, float] = {
    WorkoutType.CROSS_EASY: 2.5,
    WorkoutType.CROSS_QUALITY_T: 4.5,
    WorkoutType.CROSS_QUALITY_I: 5.5,
}

_CATEGORY_BY_TYPE: dict[WorkoutType, WorkoutCategory] = {
    **{t: WorkoutCategory.RUN for t in RUN_WORKOUT_TYPES},
    **{t: WorkoutCategory.CROSS_TRAIN for t in CROSS_TRAIN_WORKOUT_TYPES},
    WorkoutType.STRENGTH: WorkoutCategory.STRENGTH,
    WorkoutType.REST: WorkoutCategory.REST,
}


def category_for(workout_type: WorkoutType) -> WorkoutCategory:
    """Map a workout type onto its category."""
    return _CATEGORY_BY_TYPE[workout_type]


class Segment(BaseModel):
    """One ordered piece of a day's workout.

    Attributes:
        label: Display label ("Warmup", "Threshold", "Long run", ...)
        distance_miles: Distance in miles (runs only)
        pace: Opaque pace annotation from the pace formatter
        duration_min: Estimated minutes at the segment pace (only when paces are known)
    """

    label: str
    distance_miles: float | None = None
    pace: str | None = None
    duration_min: int | None = None


class PlanDay(BaseModel):
    """A single calendar day of the plan.

    Created once by the assignment engine and mutated in place by the
    look-back step and the consistency repair pass. Call ``refresh`` after
    changing ``workout_type`` or ``segments``.
    """

    date: date_type
    phase: Phase
    workout_type: WorkoutType
    workout_category: WorkoutCategory = WorkoutCategory.REST
    cross_train_intensity: CrossTrainIntensity = CrossTrainIntensity.NONE
    is_workday: bool = False
    segments: list[Segment] = Field(default_factory=list)
    run_distance: float = 0.0
    run_load: float = 0.0
    cross_train_load: float = 0.0
    total_load: float = 0.0
    is_long_effort: bool = False
    is_quality_day: bool = False

    def refresh(self) -> "PlanDay":
        """Recompute category, flags, distances and loads from the workout type."""
        self.workout_category = category_for(self.workout_type)
        self.is_long_effort = self.workout_type == WorkoutType.RUN_QUALITY_LONG
        self.is_quality_day = self.workout_type in QUALITY_WORKOUT_TYPES

        if self.workout_category == WorkoutCategory.CROSS_TRAIN:
            self.cross_train_intensity = (
                CrossTrainIntensity.QUALITY if self.is_quality_day else CrossTrainIntensity.EASY
            )
        else:
            self.cross_train_intensity = CrossTrainIntensity.NONE

        if self.workout_category == WorkoutCategory.RUN:
            self.run_distance = round_distance(sum(safe_num(s.distance_miles) for s in self.segments))
        else:
            self.run_distance = 0.0

        self.run_load = self.run_distance
        self.cross_train_load = CROSS_TRAIN_LOAD_EQ.get(self.workout_type, 0.0)
        self.total_load = compute_total_load(self.run_load, self.cross_train_load)
        return self

    @property
    def is_run(self) -> bool:
        return self.workout_category == WorkoutCategory.RUN

    @property
    def is_workout_run(self) -> bool:
        return self.workout_type in WORKOUT_RUN_TYPES


class PlanAnomaly(BaseModel):
    """A non-fatal condition recorded during generation or repair."""

    code: str
    date: date_type | None = None
    detail: str = ""


class PlanRequest(BaseModel):
    """Validated generator input.

    Numeric fields are normalized rather than rejected: non-finite or negative
    loads become 0, a missing or invalid event distance becomes the long-run
    floor, and an unusable VO2max disables pace annotations.
    """

    start_date: date_type
    goal_date: date_type
    event_distance: float = MIN_LONG_RUN_MILES
    workday_map: dict[str, bool] = Field(default_factory=dict)
    starting_load: float = 0.0
    peak_load: float = 0.0
    vo2max: float | None = None

    @field_validator("starting_load", "peak_load", mode="before")
    @classmethod
    def normalize_load(cls, value: object) -> float:
        return max(0.0, safe_num(value))

    @field_validator("event_distance", mode="before")
    @classmethod
    def normalize_event_distance(cls, value: object) -> float:
        distance = round_distance(value)
        return distance if distance > 0 else MIN_LONG_RUN_MILES

    @field_validator("vo2max", mode="before")
    @classmethod
    def normalize_vo2max(cls, value: object) -> float | None:
        if value is None:
            return None
        number = safe_num(value)
        return number if number > 0 else None

    @field_validator("workday_map", mode="before")
    @classmethod
    def normalize_workday_map(cls, value: object) -> dict[str, bool]:
        if not value:
            return {}
        if not isinstance(value, dict):
            raise ValueError("workday_map must be a mapping of ISO date -> bool")
        return {str(key): bool(flag) for key, flag in value.items()}


class PlanResult(BaseModel):
    """Generated plan plus the anomalies recorded along the way."""

    days: list[PlanDay]
    anomalies: list[PlanAnomaly] = Field(default_factory=list)
