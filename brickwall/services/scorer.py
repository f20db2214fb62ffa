"""
Workout Recommendation Scorer.

Pure scoring over a candidate list; the highest score wins and ties go to the
candidate that appears first in the list.

Score = 50
      + 20  difficulty matches the user's fitness level
      with a wellness log for today:
        energy <= 2 : +30 beginner, +20 duration <= 20 min, +25 flexibility
        energy >= 4 : +15 advanced, +10 strength
        stress >= 4 : +30 flexibility, +15 duration <= 25 min
      + 15  workout type matches the primary goal

Difficulty levels are compared through difficulty_rank(), an explicit
ranking, never through enum declaration order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from brickwall.core.clock import Clock, system_clock
from brickwall.core.errors import InvalidArgumentError
from brickwall.models.user import FitnessLevel, PrimaryGoal
from brickwall.models.workout import Difficulty, Workout, WorkoutType
from brickwall.services import catalog, wellness
from brickwall.services.lookups import require_user

logger = logging.getLogger("brickwall.scorer")

BASE_SCORE = 50

_DIFFICULTY_RANKS: dict[str, int] = {
    "beginner": 0,
    "intermediate": 1,
    "advanced": 2,
}
ENTRY_RANK = _DIFFICULTY_RANKS["beginner"]
TOP_RANK = _DIFFICULTY_RANKS["advanced"]

_GOAL_WORKOUT_TYPE: dict[PrimaryGoal, WorkoutType] = {
    PrimaryGoal.strength: WorkoutType.strength,
    PrimaryGoal.cardio: WorkoutType.cardio,
    PrimaryGoal.flexibility: WorkoutType.flexibility,
}


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def difficulty_rank(level: Difficulty | FitnessLevel | str) -> int:
    """beginner=0 < intermediate=1 < advanced=2, for workout and user levels alike."""
    try:
        return _DIFFICULTY_RANKS[_ev(level)]
    except KeyError:
        raise InvalidArgumentError(
            message=f"Unknown difficulty level {level!r}.",
            details={"level": str(level), "allowed": list(_DIFFICULTY_RANKS)},
        ) from None


def is_suitable_for(workout_difficulty: Difficulty | str, user_level: FitnessLevel | str) -> bool:
    """A workout suits a user whose level is at or above the workout's."""
    return difficulty_rank(user_level) >= difficulty_rank(workout_difficulty)


@dataclass
class Recommendation:
    workout: Workout
    score: int
    reason: str


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def score_workout(
    workout,
    user_fitness_level: FitnessLevel | str,
    today_log=None,
    primary_goal: Optional[PrimaryGoal] = None,
) -> int:
    rank = difficulty_rank(workout.difficulty)
    workout_type = WorkoutType(_ev(workout.workout_type))
    duration = workout.estimated_duration

    score = BASE_SCORE
    if rank == difficulty_rank(user_fitness_level):
        score += 20

    if today_log is not None:
        energy = today_log.energy_level
        stress = today_log.stress_level

        if energy <= 2:
            if rank == ENTRY_RANK:
                score += 30
            if duration <= 20:
                score += 20
            if workout_type == WorkoutType.flexibility:
                score += 25

        if energy >= 4:
            if rank == TOP_RANK:
                score += 15
            if workout_type == WorkoutType.strength:
                score += 10

        if stress >= 4:
            if workout_type == WorkoutType.flexibility:
                score += 30
            if duration <= 25:
                score += 15

    if primary_goal is not None:
        if _GOAL_WORKOUT_TYPE.get(PrimaryGoal(_ev(primary_goal))) == workout_type:
            score += 15

    return score


def _best(candidates, user_fitness_level, today_log, primary_goal):
    if not candidates:
        raise InvalidArgumentError(message="No candidate workouts to recommend from.")
    best, best_score = None, None
    for workout in candidates:
        score = score_workout(workout, user_fitness_level, today_log, primary_goal)
        # Strict > keeps the earliest candidate on ties.
        if best_score is None or score > best_score:
            best, best_score = workout, score
    return best, best_score


def recommend(
    candidates: Sequence,
    user_fitness_level: FitnessLevel | str,
    today_log=None,
    primary_goal: Optional[PrimaryGoal] = None,
):
    """Highest-scoring candidate; first in list order on ties."""
    best, _ = _best(candidates, user_fitness_level, today_log, primary_goal)
    return best


def recommendation_reason(today_log=None) -> str:
    if today_log is not None:
        if today_log.energy_level <= 2:
            return "Perfect for your energy level today - gentle but effective!"
        if today_log.stress_level >= 4:
            return "Great for stress relief - you'll feel amazing after!"
        if today_log.energy_level >= 4:
            return "You've got great energy today - let's maximize it!"
    return "Matches your fitness level and goals perfectly!"


def recommend_for_user(
    db: Session,
    user_id: int,
    clock: Clock = system_clock,
    suitable_only: bool = False,
) -> Recommendation:
    """Score the whole catalog for a user against today's check-in, if any."""
    user = require_user(db, user_id)
    candidates = catalog.list_workouts(db)
    if suitable_only:
        candidates = [w for w in candidates if is_suitable_for(w.difficulty, user.fitness_level)]
    today_log = wellness.get_log(db, user_id, clock.today())

    workout, score = _best(candidates, user.fitness_level, today_log, user.primary_goal)
    logger.info("Recommended workout %s (score %s) for user %s", workout.id, score, user_id)
    return Recommendation(workout=workout, score=score, reason=recommendation_reason(today_log))
