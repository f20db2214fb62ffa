"""
Tests for the Workout Recommendation Scorer.

Scoring is pure, so most cases use lightweight stand-ins for Workout and
WellnessLog rows.
"""
from __future__ import annotations

from types import SimpleNamespace as NS

import pytest

from brickwall.core.errors import InvalidArgumentError, NotFoundError
from brickwall.models.user import FitnessLevel, PrimaryGoal
from brickwall.models.wellness_log import Mood
from brickwall.models.workout import Difficulty, WorkoutType
from brickwall.services import catalog, scorer, wellness
from brickwall.services.scorer import (
    BASE_SCORE,
    difficulty_rank,
    is_suitable_for,
    recommend,
    recommendation_reason,
    score_workout,
)


def _workout(name, workout_type, difficulty, duration):
    return NS(name=name, workout_type=workout_type, difficulty=difficulty,
              estimated_duration=duration)


def _log(energy=3, stress=3):
    return NS(energy_level=energy, stress_level=stress)


GENTLE = _workout("Gentle Stretch", WorkoutType.flexibility, Difficulty.beginner, 20)
POWER = _workout("Power Lifts", WorkoutType.strength, Difficulty.advanced, 45)
TEMPO = _workout("Tempo Run", WorkoutType.cardio, Difficulty.intermediate, 30)


# ---------------------------------------------------------------------------
# score_workout
# ---------------------------------------------------------------------------

class TestScoreWorkout:
    def test_base_score_only(self):
        assert score_workout(TEMPO, FitnessLevel.beginner) == BASE_SCORE

    def test_fitness_match(self):
        assert score_workout(TEMPO, FitnessLevel.intermediate) == BASE_SCORE + 20

    def test_low_energy_bonuses(self):
        # 50 + 20 match + 30 beginner + 20 short + 25 flexibility
        assert score_workout(GENTLE, FitnessLevel.beginner, _log(energy=2)) == 145

    def test_high_energy_bonuses(self):
        # 50 + 20 match + 15 advanced + 10 strength
        assert score_workout(POWER, FitnessLevel.advanced, _log(energy=4)) == 95

    def test_high_stress_bonuses(self):
        short_stretch = _workout("Unwind", WorkoutType.flexibility, Difficulty.advanced, 25)
        # 50 + 30 flexibility + 15 short
        assert score_workout(short_stretch, FitnessLevel.beginner, _log(stress=4)) == 95

    def test_low_energy_and_high_stress_stack(self):
        # 50 + 20 + (30 + 20 + 25) + (30 + 15)
        assert score_workout(GENTLE, FitnessLevel.beginner, _log(energy=1, stress=5)) == 190

    def test_mid_range_log_adds_nothing(self):
        assert score_workout(GENTLE, FitnessLevel.advanced, _log(energy=3, stress=3)) == BASE_SCORE

    @pytest.mark.parametrize("goal,workout,bonus", [
        (PrimaryGoal.strength, POWER, 15),
        (PrimaryGoal.cardio, TEMPO, 15),
        (PrimaryGoal.flexibility, GENTLE, 15),
        (PrimaryGoal.cardio, POWER, 0),
        (PrimaryGoal.weight_loss, TEMPO, 0),
    ])
    def test_goal_bonus(self, goal, workout, bonus):
        without = score_workout(workout, FitnessLevel.beginner)
        assert score_workout(workout, FitnessLevel.beginner, primary_goal=goal) == without + bonus

    def test_accepts_plain_strings(self):
        w = _workout("Strings", "strength", "advanced", 40)
        assert score_workout(w, "advanced", _log(energy=5), primary_goal="strength") == 110


class TestRecommend:
    def test_highest_score_wins(self):
        assert recommend([TEMPO, POWER, GENTLE], FitnessLevel.beginner, _log(energy=2)) is GENTLE

    def test_tie_goes_to_first_candidate(self):
        a = _workout("A", WorkoutType.mixed, Difficulty.intermediate, 30)
        b = _workout("B", WorkoutType.mixed, Difficulty.intermediate, 30)
        assert recommend([a, b], FitnessLevel.beginner) is a
        assert recommend([b, a], FitnessLevel.beginner) is b

    def test_empty_candidates_rejected(self):
        with pytest.raises(InvalidArgumentError):
            recommend([], FitnessLevel.beginner)


class TestDifficultyRanking:
    def test_explicit_order(self):
        assert difficulty_rank(Difficulty.beginner) < difficulty_rank(Difficulty.intermediate)
        assert difficulty_rank(Difficulty.intermediate) < difficulty_rank(Difficulty.advanced)
        assert difficulty_rank(FitnessLevel.advanced) == difficulty_rank(Difficulty.advanced)

    def test_unknown_level(self):
        with pytest.raises(InvalidArgumentError):
            difficulty_rank("elite")

    @pytest.mark.parametrize("workout_level,user_level,expected", [
        (Difficulty.beginner, FitnessLevel.beginner, True),
        (Difficulty.beginner, FitnessLevel.advanced, True),
        (Difficulty.intermediate, FitnessLevel.beginner, False),
        (Difficulty.advanced, FitnessLevel.intermediate, False),
        (Difficulty.advanced, FitnessLevel.advanced, True),
    ])
    def test_suitability(self, workout_level, user_level, expected):
        assert is_suitable_for(workout_level, user_level) is expected


class TestReason:
    @pytest.mark.parametrize("log,expected", [
        (None, "Matches your fitness level and goals perfectly!"),
        (_log(energy=2, stress=5), "Perfect for your energy level today - gentle but effective!"),
        (_log(energy=3, stress=4), "Great for stress relief - you'll feel amazing after!"),
        (_log(energy=5, stress=1), "You've got great energy today - let's maximize it!"),
        (_log(energy=3, stress=3), "Matches your fitness level and goals perfectly!"),
    ])
    def test_reason_text(self, log, expected):
        assert recommendation_reason(log) == expected


# ---------------------------------------------------------------------------
# recommend_for_user
# ---------------------------------------------------------------------------

def _seed(db, *rows):
    return [
        catalog.add_workout(
            db, name=name, workout_type=wtype, difficulty=level, estimated_duration=minutes
        )
        for name, wtype, level, minutes in rows
    ]


class TestRecommendForUser:
    def test_uses_todays_check_in(self, db, make_user, clock):
        user = make_user(primary_goal=PrimaryGoal.strength)
        _, gentle, _ = _seed(
            db,
            ("Upper Body Blast", WorkoutType.strength, Difficulty.intermediate, 30),
            ("Stress Relief Stretch", WorkoutType.flexibility, Difficulty.beginner, 15),
            ("HIIT Inferno", WorkoutType.cardio, Difficulty.advanced, 25),
        )
        wellness.record_check_in(
            db, user.id, clock=clock,
            log_date=clock.today(), energy_level=2, stress_level=4, sleep_quality=3,
            mood=Mood.stressed,
        )

        rec = scorer.recommend_for_user(db, user.id, clock=clock)

        assert rec.workout.id == gentle.id
        assert rec.score == 190
        assert rec.reason == "Perfect for your energy level today - gentle but effective!"

    def test_suitable_only_filters_harder_workouts(self, db, make_user, clock):
        user = make_user(
            fitness_level=FitnessLevel.intermediate, primary_goal=PrimaryGoal.cardio
        )
        hiit, mobility = _seed(
            db,
            ("HIIT Inferno", WorkoutType.cardio, Difficulty.advanced, 25),
            ("Mobility Flow", WorkoutType.flexibility, Difficulty.beginner, 20),
        )
        assert scorer.recommend_for_user(db, user.id, clock=clock).workout.id == hiit.id
        filtered = scorer.recommend_for_user(db, user.id, clock=clock, suitable_only=True)
        assert filtered.workout.id == mobility.id
        assert filtered.reason == "Matches your fitness level and goals perfectly!"

    def test_empty_catalog(self, db, user, clock):
        with pytest.raises(InvalidArgumentError):
            scorer.recommend_for_user(db, user.id, clock=clock)

    def test_unknown_user(self, db, clock):
        with pytest.raises(NotFoundError):
            scorer.recommend_for_user(db, 9999, clock=clock)
