"""Plans module - shift-aware training plan generation.

This module provides:
- The plan schema (PlanDay, PlanRequest, PlanResult) in miles
- Phase and load ramp helpers
- The forward assignment pass and the consistency repair pass
- Plan statistics and invariant validation
"""

from shiftplan.plans.errors import InvalidPlanInputError, PlannerError, PlanningInvariantError
from shiftplan.plans.generate import generate_plan
from shiftplan.plans.pace import PaceSet, paces_from_vo2max
from shiftplan.plans.phase import get_phase
from shiftplan.plans.policy import PlanPolicy, RestDayPolicy
from shiftplan.plans.ramp import target_rolling_load, weekly_target_load
from shiftplan.plans.stats import PlanStatistics, compute_plan_statistics
from shiftplan.plans.types import (
    Phase,
    PlanAnomaly,
    PlanDay,
    PlanRequest,
    PlanResult,
    WorkoutCategory,
    WorkoutType,
)
from shiftplan.plans.validate import validate_plan

__all__ = [
    "InvalidPlanInputError",
    "PaceSet",
    "Phase",
    "PlanAnomaly",
    "PlanDay",
    "PlanPolicy",
    "PlanRequest",
    "PlanResult",
    "PlanStatistics",
    "PlannerError",
    "PlanningInvariantError",
    "RestDayPolicy",
    "WorkoutCategory",
    "WorkoutType",
    "compute_plan_statistics",
    "generate_plan",
    "get_phase",
    "paces_from_vo2max",
    "target_rolling_load",
    "validate_plan",
    "weekly_target_load",
]
