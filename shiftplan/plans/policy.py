"""Scheduling policy knobs.

Policy values are configuration, not law: the strength slots, the rest-day
tie-break and the workday run fallback can all be changed per request or via
settings without touching the engine.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from shiftplan.config.settings import Settings


class RestDayPolicy(StrEnum):
    """How the single rest day of a week is chosen."""

    FIRST_WORKDAY = "first_workday"  # earliest workday, else first eligible day
    WEEK_START = "week_start"  # first eligible day regardless of workdays


class PlanPolicy(BaseModel):
    """Immutable policy passed to the assignment engine.

    Attributes:
        strength_slot_offsets: Week offsets (0-6) where a workday becomes strength
        rest_day_policy: Rest-day selection rule
        allow_workday_run_fallback: Permit an easy run on a workday when a week
            has no non-workday slot at all
    """

    model_config = ConfigDict(frozen=True)

    strength_slot_offsets: frozenset[int] = Field(default_factory=lambda: frozenset({2, 4}))
    rest_day_policy: RestDayPolicy = RestDayPolicy.FIRST_WORKDAY
    allow_workday_run_fallback: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "PlanPolicy":
        return cls(
            strength_slot_offsets=frozenset(settings.strength_slot_offsets),
            rest_day_policy=RestDayPolicy(settings.rest_day_policy),
            allow_workday_run_fallback=settings.allow_workday_run_fallback,
        )
