"""
Fetch-or-raise helpers shared by the services.

Relationships are plain foreign-key ids; these are the one-directional
lookups that turn an id into a row.
"""
from __future__ import annotations

from sqlalchemy.orm import Session

from brickwall.core.errors import NotFoundError
from brickwall.models.behavior_state import BehaviorState
from brickwall.models.milestone import Milestone
from brickwall.models.user import User
from brickwall.models.workout import Workout
from brickwall.models.workout_session import WorkoutSession


def require_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def require_workout(db: Session, workout_id: int) -> Workout:
    workout = db.get(Workout, workout_id)
    if workout is None:
        raise NotFoundError("Workout", workout_id)
    return workout


def require_session(db: Session, session_id: int) -> WorkoutSession:
    session = db.get(WorkoutSession, session_id)
    if session is None:
        raise NotFoundError("WorkoutSession", session_id)
    return session


def require_milestone(db: Session, milestone_id: int) -> Milestone:
    milestone = db.get(Milestone, milestone_id)
    if milestone is None:
        raise NotFoundError("Milestone", milestone_id)
    return milestone


def require_state(db: Session, user_id: int) -> BehaviorState:
    state = (
        db.query(BehaviorState)
        .filter(BehaviorState.user_id == user_id)
        .one_or_none()
    )
    if state is None:
        raise NotFoundError("BehaviorState", user_id)
    return state
