"""
Onboarding: a new user starts with an empty BehaviorState and the default
milestone catalog, written in one commit.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from brickwall.core.clock import Clock, system_clock
from brickwall.core.errors import InvalidArgumentError
from brickwall.models.behavior_state import BehaviorState
from brickwall.models.user import FitnessLevel, PrimaryGoal, User
from brickwall.services.milestones import build_default_set

logger = logging.getLogger("brickwall.users")


def create_user(
    db: Session,
    display_name: str,
    fitness_level: FitnessLevel = FitnessLevel.beginner,
    primary_goal: Optional[PrimaryGoal] = None,
    created_on: Optional[date] = None,
    clock: Clock = system_clock,
) -> User:
    if not display_name or not display_name.strip():
        raise InvalidArgumentError(message="Display name must not be blank.")
    today = clock.today()
    created_on = created_on or today
    if created_on > today:
        raise InvalidArgumentError(
            message=f"Account creation date {created_on} is in the future.",
            details={"created_on": str(created_on), "today": str(today)},
        )

    user = User(
        display_name=display_name.strip(),
        created_on=created_on,
        fitness_level=fitness_level,
        primary_goal=primary_goal,
    )
    db.add(user)
    db.flush()

    db.add(BehaviorState(user_id=user.id))
    db.add_all(build_default_set(user.id))
    db.commit()
    db.refresh(user)
    logger.info("Created user %s with behavior state and default milestones", user.id)
    return user
