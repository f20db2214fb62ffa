"""
Workout sessions: start, complete, skip.

A session must be completed before the ledger will lay a brick for it.
Completing twice is a conflict; completing a skipped session is an invalid
state.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from brickwall.core.clock import Clock, system_clock
from brickwall.core.errors import (
    InvalidArgumentError,
    InvalidStateError,
    SessionAlreadyCompletedError,
)
from brickwall.models.workout_session import SessionStatus, WorkoutSession
from brickwall.services.lookups import require_session, require_user, require_workout

logger = logging.getLogger("brickwall.sessions")

MIN_RATING = 1
MAX_RATING = 5


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def start_session(
    db: Session, user_id: int, workout_id: int, clock: Clock = system_clock
) -> WorkoutSession:
    require_user(db, user_id)
    require_workout(db, workout_id)
    session = WorkoutSession(
        user_id=user_id,
        workout_id=workout_id,
        status=SessionStatus.in_progress,
        started_at=clock.now(),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    logger.info("Started session %s (workout %s) for user %s", session.id, workout_id, user_id)
    return session


def complete_session(
    db: Session,
    session_id: int,
    perceived_difficulty: Optional[int] = None,
    notes: Optional[str] = None,
    clock: Clock = system_clock,
) -> WorkoutSession:
    if perceived_difficulty is not None and not MIN_RATING <= perceived_difficulty <= MAX_RATING:
        raise InvalidArgumentError(
            message=f"Perceived difficulty must be {MIN_RATING}..{MAX_RATING}, got {perceived_difficulty}.",
            details={"perceived_difficulty": perceived_difficulty},
        )
    session = require_session(db, session_id)
    if session.status == SessionStatus.completed:
        raise SessionAlreadyCompletedError(session_id)
    if session.status == SessionStatus.skipped:
        raise InvalidStateError(
            message=f"Workout session {session_id} was skipped and cannot be completed.",
            details={"session_id": session_id, "status": _ev(session.status)},
        )

    session.status = SessionStatus.completed
    session.ended_at = clock.now()
    session.perceived_difficulty = perceived_difficulty
    if notes:
        session.notes = notes
    db.commit()
    db.refresh(session)
    logger.info("Completed session %s for user %s", session.id, session.user_id)
    return session


def skip_session(db: Session, session_id: int) -> WorkoutSession:
    session = require_session(db, session_id)
    if session.status == SessionStatus.completed:
        raise SessionAlreadyCompletedError(session_id)
    session.status = SessionStatus.skipped
    db.commit()
    db.refresh(session)
    logger.info("Skipped session %s for user %s", session.id, session.user_id)
    return session


def active_session(db: Session, user_id: int) -> Optional[WorkoutSession]:
    return (
        db.query(WorkoutSession)
        .filter(
            WorkoutSession.user_id == user_id,
            WorkoutSession.status == SessionStatus.in_progress,
        )
        .order_by(WorkoutSession.started_at.desc(), WorkoutSession.id.desc())
        .first()
    )


def list_sessions(db: Session, user_id: int) -> list[WorkoutSession]:
    """Session history, newest first."""
    return (
        db.query(WorkoutSession)
        .filter(WorkoutSession.user_id == user_id)
        .order_by(WorkoutSession.started_at.desc(), WorkoutSession.id.desc())
        .all()
    )
