"""Plan Generation Invariants - Single Source of Truth.

This module defines the scheduling constants shared by the assignment engine,
the consistency repair pass and the plan validator. Every rule that needs a
threshold, fraction or cap imports it from here.

All distances are MILES. Loads are miles or mile-equivalents.
"""

# Phase boundaries as a fraction of the start->goal window
BUILD_START_PCT = 0.35
PEAK_START_PCT = 0.75
TAPER_START_PCT = 0.90

# Maximum quality days in any 7-day trailing window, keyed by phase
PHASE_QUALITY_CAPS: dict[str, int] = {
    "BASE": 1,
    "BUILD": 3,
    "PEAK": 2,
    "TAPER": 2,
}

# Long effort size as a fraction of the weekly target load
LONG_RUN_PHASE_FRACTIONS: dict[str, float] = {
    "BASE": 0.22,
    "BUILD": 0.25,
    "PEAK": 0.28,
    "TAPER": 0.20,
}

# Window sizes
WEEK_LENGTH_DAYS = 7
TRAILING_WINDOW_DAYS = 6  # days looked back from the day being assigned
ROLLING_LOAD_WINDOW_DAYS = 10

# The ramp produces a 10-day rolling target; runs are sized from a weekly one
WEEKLY_FROM_ROLLING = 7 / 10

# Distance floors
MIN_LONG_RUN_MILES = 5.0
MIN_QUALITY_RUN_MILES = 6.0
MIN_EASY_RUN_MILES = 3.0
DEFAULT_LAST_LONG_DISTANCE = 5.0

# Distance fractions
QUALITY_RUN_WEEKLY_FRACTION = 0.15
EASY_RUN_WEEKLY_FRACTION = 0.10
EASY_RUN_LONG_FRACTION = 0.75
BELOW_LONG_RUN_FRACTION = 0.90
GOAL_WEEK_EASY_LONG_FRACTION = 0.60
GOAL_WEEK_EASY_EVENT_FRACTION = 0.60
WORKOUT_RUN_LONG_CAP_FRACTION = 0.60

# Quality work needs more than this many days before the goal
MIN_DAYS_TO_GOAL_FOR_QUALITY = 3

# Long efforts this close to the goal (goal day excluded) are demoted
TAPER_PROTECTION_DAYS = 6

# At most this many threshold/interval runs in the trailing window during TAPER
TAPER_MAX_WORKOUT_RUNS_IN_WINDOW = 1

# Minimum spacing between designated rest days
MIN_REST_SPACING_DAYS = 7
