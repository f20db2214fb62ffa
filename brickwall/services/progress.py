"""
Workout completion pipeline.

  complete session -> ledger brick for today -> tracker event -> milestone check

A second completion on a day that already has a brick still completes the
session, but lays no brick and leaves streaks and milestones alone. The one
exception is a brick whose tracker update failed after it was laid: the next
completion that day logs the event and checks milestones for it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import Session

from brickwall.core.clock import Clock, system_clock
from brickwall.core.errors import DuplicateBrickError
from brickwall.models.behavior_state import BehaviorState
from brickwall.models.brick import Brick
from brickwall.models.milestone import Milestone
from brickwall.models.workout_session import WorkoutSession
from brickwall.services import ledger, milestones, sessions, tracker
from brickwall.services.lookups import require_state

logger = logging.getLogger("brickwall.progress")


@dataclass
class CompletionResult:
    session: WorkoutSession
    state: BehaviorState
    brick: Optional[Brick] = None
    newly_achieved: list[Milestone] = field(default_factory=list)

    @property
    def brick_laid(self) -> bool:
        return self.brick is not None


def complete_workout(
    db: Session,
    session_id: int,
    perceived_difficulty: Optional[int] = None,
    notes: Optional[str] = None,
    clock: Clock = system_clock,
) -> CompletionResult:
    session = sessions.complete_session(
        db, session_id,
        perceived_difficulty=perceived_difficulty,
        notes=notes,
        clock=clock,
    )
    user_id = session.user_id
    day = clock.today()

    try:
        brick = ledger.create_brick(db, user_id, session.id, day)
    except DuplicateBrickError:
        logger.info("User %s already has today's brick; session %s earns none", user_id, session.id)
        state = require_state(db, user_id)
        existing = ledger.brick_for_date(db, user_id, day)
        if existing is None or existing.is_archived or state.last_event_date == day:
            return CompletionResult(session=session, state=state)
        # An earlier completion laid the brick but its tracker update never landed.
        logger.warning("Brick for user %s on %s was never tracked; catching up", user_id, day)
        state, achieved = _track(db, user_id, day, clock)
        return CompletionResult(session=session, state=state, newly_achieved=achieved)

    state, achieved = _track(db, user_id, day, clock)
    return CompletionResult(session=session, state=state, brick=brick, newly_achieved=achieved)


def _track(db: Session, user_id: int, day, clock: Clock):
    state = tracker.log_event(db, user_id, day, clock=clock)
    return state, milestones.check_all(db, user_id, state, clock=clock)
