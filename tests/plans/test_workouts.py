"""Tests for workout sizing, construction and demotion."""

from datetime import date

import pytest

from shiftplan.plans.pace import paces_from_vo2max
from shiftplan.plans.types import CrossTrainIntensity, Phase, WorkoutCategory, WorkoutType
from shiftplan.plans.workouts import (
    build_cross_train_day,
    build_easy_run,
    build_long_run,
    build_rest_day,
    build_strength_day,
    build_workout_run,
    demote_to_easy,
    derive_long_run_miles,
    easy_run_miles,
    goal_week_easy_miles,
    quality_run_miles,
    rescale_run,
    split_distance,
)

DAY = date(2026, 2, 10)


def test_long_run_floor_and_phase_fraction():
    """Test that the long run is floored at 5 miles and scaled by phase."""
    assert derive_long_run_miles(Phase.BASE, 10) == 5.0
    assert derive_long_run_miles(Phase.PEAK, 50) == 14.0
    assert derive_long_run_miles(Phase.BUILD, 40) == 10.0


def test_long_run_capped_at_event_distance():
    assert derive_long_run_miles(Phase.PEAK, 50, event_distance=8.0) == 8.0


def test_quality_run_floor_and_below_long_cap():
    """Test that a quality run is at least 6 miles but stays under the long run."""
    assert quality_run_miles(20, 10) == 6.0
    assert quality_run_miles(50, 5.0) == 4.5


def test_easy_run_sizing():
    assert easy_run_miles(40, 10) == 4.0
    assert easy_run_miles(10, 5) == 3.0


def test_goal_week_easy_is_bounded_by_event():
    assert goal_week_easy_miles(40, 10, 8) == 4.0
    assert goal_week_easy_miles(40, 10, 5) == 3.0


def test_split_distance_preserves_total():
    parts = split_distance(10, (0.25, 0.55, 0.20))
    assert parts == [2.5, 5.5, 2.0]
    assert sum(split_distance(7.3, (0.3, 0.45, 0.25))) == pytest.approx(7.3)


def test_workout_run_segments_and_flags():
    """Test that a threshold run carries warmup, main set and cooldown."""
    paces = paces_from_vo2max(45)
    day = build_workout_run(DAY, Phase.BUILD, False, WorkoutType.RUN_QUALITY_T, 8.0, paces)

    assert [s.label for s in day.segments] == ["Warmup", "Threshold", "Cooldown"]
    assert day.segments[1].pace == paces.threshold
    assert day.segments[0].pace == paces.easy
    assert day.run_distance == pytest.approx(8.0)
    assert day.total_load == pytest.approx(8.0)
    assert day.is_quality_day
    assert not day.is_long_effort
    assert day.is_workout_run


def test_interval_run_uses_interval_pace():
    paces = paces_from_vo2max(45)
    day = build_workout_run(DAY, Phase.PEAK, False, WorkoutType.RUN_QUALITY_I, 6.0, paces)
    assert [s.label for s in day.segments] == ["Warmup", "Intervals", "Cooldown"]
    assert day.segments[1].pace == paces.interval


def test_long_run_flags():
    day = build_long_run(DAY, Phase.PEAK, False, 12.0, None)
    assert day.is_long_effort
    assert day.is_quality_day
    assert day.workout_category == WorkoutCategory.RUN
    assert day.segments[0].label == "Long run"
    assert day.segments[0].pace is None


def test_cross_train_loads():
    """Test cross-training load equivalents per intensity."""
    easy = build_cross_train_day(DAY, Phase.BUILD, True, WorkoutType.CROSS_EASY)
    threshold = build_cross_train_day(DAY, Phase.BUILD, True, WorkoutType.CROSS_QUALITY_T)
    interval = build_cross_train_day(DAY, Phase.BUILD, True, WorkoutType.CROSS_QUALITY_I)

    assert easy.total_load == 2.5
    assert threshold.total_load == 4.5
    assert interval.total_load == 5.5
    assert easy.cross_train_intensity == CrossTrainIntensity.EASY
    assert interval.cross_train_intensity == CrossTrainIntensity.QUALITY
    assert interval.is_quality_day
    assert interval.run_distance == 0.0


def test_cross_train_builder_rejects_run_types():
    with pytest.raises(ValueError, match="Not a cross-training workout type"):
        build_cross_train_day(DAY, Phase.BUILD, True, WorkoutType.RUN_EASY)


def test_rest_and_strength_have_zero_load():
    rest = build_rest_day(DAY, Phase.BASE, False)
    strength = build_strength_day(DAY, Phase.BASE, True)
    assert rest.total_load == 0.0
    assert strength.total_load == 0.0
    assert strength.workout_category == WorkoutCategory.STRENGTH
    assert rest.cross_train_intensity == CrossTrainIntensity.NONE


def test_demote_run_to_easy():
    """Test that demotion yields a single easy segment no longer than before."""
    day = build_long_run(DAY, Phase.PEAK, False, 12.0, None)
    assert demote_to_easy(day, 4.0, None, reason="test")

    assert day.workout_type == WorkoutType.RUN_EASY
    assert [s.label for s in day.segments] == ["Easy run"]
    assert day.run_distance == 4.0
    assert not day.is_long_effort
    assert not day.is_quality_day
    assert day.total_load == 4.0


def test_demote_keeps_shorter_distance():
    day = build_workout_run(DAY, Phase.BUILD, False, WorkoutType.RUN_QUALITY_T, 3.0, None)
    demote_to_easy(day, 5.0, None)
    assert day.run_distance == 3.0


def test_demote_cross_train_quality():
    day = build_cross_train_day(DAY, Phase.BUILD, True, WorkoutType.CROSS_QUALITY_I)
    assert demote_to_easy(day, 4.0, None)
    assert day.workout_type == WorkoutType.CROSS_EASY
    assert day.cross_train_load == 2.5


def test_demote_is_noop_for_easy_days():
    day = build_easy_run(DAY, Phase.BASE, False, 3.0, None)
    assert not demote_to_easy(day, 2.0, None)
    assert day.run_distance == 3.0


def test_rescale_run_shrinks_segments():
    day = build_workout_run(DAY, Phase.BUILD, False, WorkoutType.RUN_QUALITY_T, 9.0, None)
    assert rescale_run(day, 6.0)
    assert day.run_distance == pytest.approx(6.0)
    assert len(day.segments) == 3
    assert not rescale_run(day, 7.0)


def test_segment_durations_follow_paces_and_rescale():
    """Test that run segments carry estimated minutes that shrink with the run."""
    paces = paces_from_vo2max(45)
    day = build_workout_run(DAY, Phase.BUILD, False, WorkoutType.RUN_QUALITY_T, 8.0, paces)
    assert [s.duration_min for s in day.segments] == [20, 38, 16]

    assert rescale_run(day, 4.0)
    assert [s.distance_miles for s in day.segments] == [1.0, 2.2, 0.8]
    assert [s.duration_min for s in day.segments] == [10, 19, 8]


def test_segments_without_paces_have_no_duration():
    day = build_easy_run(DAY, Phase.BASE, False, 4.0, None)
    assert day.segments[0].duration_min is None
