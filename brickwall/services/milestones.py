"""
Milestone Progress Engine.

A milestone is a numeric target (streak length, workout count, or a manually
driven goal). Progress is written through update_progress(); reaching the
target flips it to achieved exactly once. Achievement is one-way: an achieved
milestone keeps current_value == target_value and its first achieved_at.

check_all() re-evaluates a user's open milestones against a BehaviorState
and returns the ones that were achieved by that call, so the caller can fire
celebrations for them.

Public API
----------
update_progress(milestone, new_value, now)          -> Milestone   (no commit)
increment_progress(milestone, now)                  -> Milestone   (no commit)
progress_ratio / progress_percentage_string / is_almost_complete /
remaining_value / is_in_progress / describe_progress
check_all(db, user_id, state)                       -> list[Milestone]
create_default_set(db, user_id)                     -> list[Milestone]
create_custom_milestone(db, user_id, ...)           -> Milestone
set_milestone_progress(db, milestone_id, value)     -> Milestone
list_milestones(db, user_id, status, milestone_type) -> list[Milestone]
achieved_count(db, user_id)                         -> int
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from brickwall.core.clock import Clock, system_clock
from brickwall.core.errors import InvalidArgumentError
from brickwall.models.milestone import Milestone, MilestoneType
from brickwall.schemas.milestone import MilestoneProgress
from brickwall.services.lookups import require_milestone, require_user

logger = logging.getLogger("brickwall.milestones")

ALMOST_COMPLETE_RATIO = 0.8


# ---------------------------------------------------------------------------
# Default catalog: four tiers, created at onboarding
# ---------------------------------------------------------------------------

DEFAULT_MILESTONES: list[tuple[str, str, MilestoneType, int]] = [
    # Tier 1: first week
    ("First Brick Laid!", "Your first workout is complete!", MilestoneType.workout_count, 1),
    ("3-Day Streak!", "Three days in a row! You're building momentum!", MilestoneType.streak, 3),
    ("5 Workouts!", "You've completed 5 workouts!", MilestoneType.workout_count, 5),
    ("7-Day Warrior!", "One full week! This is a habit now!", MilestoneType.streak, 7),
    # Tier 2: first month
    ("First 10!", "10 workouts complete! You're serious about this!", MilestoneType.workout_count, 10),
    ("14-Day Dedication!", "Two weeks strong!", MilestoneType.streak, 14),
    ("25 Workouts!", "Quarter century of workouts!", MilestoneType.workout_count, 25),
    ("30-Day Champion!", "One full month of consistency!", MilestoneType.streak, 30),
    # Tier 3: established habit
    ("50 Workouts!", "Half a hundred! Impressive!", MilestoneType.workout_count, 50),
    ("60-Day Diamond!", "Two months of daily dedication!", MilestoneType.streak, 60),
    ("Century Club!", "100 workouts completed!", MilestoneType.workout_count, 100),
    ("100-Day Club!", "Triple digits! You're elite!", MilestoneType.streak, 100),
    # Tier 4: advanced
    ("200 Workouts!", "Two hundred strong!", MilestoneType.workout_count, 200),
    ("6-Month Streak!", "180 days of consistency!", MilestoneType.streak, 180),
    ("365-Day Legend!", "ONE FULL YEAR! Incredible!", MilestoneType.streak, 365),
    ("500-Workout Hero!", "You're a fitness superhero!", MilestoneType.workout_count, 500),
]

# Types whose progress is derived from BehaviorState. The rest are driven
# manually through set_milestone_progress().
_STATE_FIELD_FOR_TYPE: dict[MilestoneType, str] = {
    MilestoneType.streak: "consecutive_days",
    MilestoneType.workout_count: "total_checks_logged",
}

_STATUS_FILTERS = ("achieved", "in_progress", "almost_complete")


def build_default_set(user_id: int) -> list[Milestone]:
    """Unsaved default milestones for a user."""
    return [
        Milestone(
            user_id=user_id,
            name=name,
            description=description,
            milestone_type=milestone_type,
            target_value=target,
            current_value=0,
            is_achieved=False,
        )
        for name, description, milestone_type, target in DEFAULT_MILESTONES
    ]


# ---------------------------------------------------------------------------
# Progress rules (pure, operate on a Milestone instance)
# ---------------------------------------------------------------------------

def update_progress(
    milestone: Milestone, new_value: Optional[int], now: datetime
) -> Milestone:
    """
    Record progress. None or negative values are ignored, as is anything
    after the milestone has been achieved.
    """
    if new_value is None or new_value < 0:
        return milestone
    if milestone.is_achieved:
        return milestone

    milestone.current_value = new_value
    if milestone.current_value >= milestone.target_value:
        milestone.is_achieved = True
        milestone.achieved_at = now
        milestone.current_value = milestone.target_value
    return milestone


def increment_progress(milestone: Milestone, now: datetime) -> Milestone:
    return update_progress(milestone, (milestone.current_value or 0) + 1, now)


def progress_ratio(milestone: Milestone) -> float:
    if not milestone.target_value or milestone.target_value <= 0:
        return 0.0
    current = milestone.current_value or 0
    return min(current / milestone.target_value, 1.0)


def progress_percentage_string(milestone: Milestone) -> str:
    """Truncated, not rounded: 5/7 -> "71%". Integer math, so 29/100 stays "29%"."""
    target = milestone.target_value
    if not target or target <= 0:
        return "0%"
    current = min(max(milestone.current_value or 0, 0), target)
    return f"{current * 100 // target}%"


def is_almost_complete(milestone: Milestone) -> bool:
    return progress_ratio(milestone) >= ALMOST_COMPLETE_RATIO and not milestone.is_achieved


def is_in_progress(milestone: Milestone) -> bool:
    return (milestone.current_value or 0) > 0 and not milestone.is_achieved


def remaining_value(milestone: Milestone) -> int:
    return max(0, milestone.target_value - (milestone.current_value or 0))


def describe_progress(milestone: Milestone) -> MilestoneProgress:
    return MilestoneProgress(
        id=milestone.id,
        name=milestone.name,
        milestone_type=milestone.milestone_type,
        target_value=milestone.target_value,
        current_value=milestone.current_value,
        is_achieved=milestone.is_achieved,
        achieved_at=milestone.achieved_at,
        progress_ratio=progress_ratio(milestone),
        progress_percentage=progress_percentage_string(milestone),
        remaining_value=remaining_value(milestone),
        is_almost_complete=is_almost_complete(milestone),
    )


# ---------------------------------------------------------------------------
# Public: persistence
# ---------------------------------------------------------------------------

def create_default_set(db: Session, user_id: int) -> list[Milestone]:
    require_user(db, user_id)
    milestones = build_default_set(user_id)
    db.add_all(milestones)
    db.commit()
    for m in milestones:
        db.refresh(m)
    logger.info("Created %s default milestones for user %s", len(milestones), user_id)
    return milestones


def create_custom_milestone(
    db: Session,
    user_id: int,
    name: str,
    milestone_type: MilestoneType,
    target_value: int,
    description: Optional[str] = None,
) -> Milestone:
    require_user(db, user_id)
    if target_value is None or target_value <= 0:
        raise InvalidArgumentError(
            message=f"Milestone target must be positive, got {target_value}.",
            details={"target_value": target_value},
        )
    if not name or not name.strip():
        raise InvalidArgumentError(message="Milestone name must not be blank.")

    milestone = Milestone(
        user_id=user_id,
        name=name.strip(),
        description=description,
        milestone_type=milestone_type,
        target_value=target_value,
        current_value=0,
        is_achieved=False,
    )
    db.add(milestone)
    db.commit()
    db.refresh(milestone)
    logger.info("Created custom milestone %s '%s' for user %s", milestone.id, milestone.name, user_id)
    return milestone


def set_milestone_progress(
    db: Session,
    milestone_id: int,
    value: int,
    clock: Clock = system_clock,
) -> Milestone:
    """Manually set progress (goal_achieved, consistency, personal_record milestones)."""
    if value is None or value < 0:
        raise InvalidArgumentError(
            message=f"Progress value must be non-negative, got {value}.",
            details={"value": value},
        )
    milestone = require_milestone(db, milestone_id)
    was_achieved = milestone.is_achieved
    update_progress(milestone, value, clock.now())
    db.commit()
    db.refresh(milestone)
    if milestone.is_achieved and not was_achieved:
        logger.info("Milestone achieved: '%s' for user %s", milestone.name, milestone.user_id)
    return milestone


def check_all(
    db: Session,
    user_id: int,
    state,
    clock: Clock = system_clock,
) -> list[Milestone]:
    """
    Re-evaluate every open milestone of the user against `state` (anything
    with consecutive_days / total_checks_logged). Returns the newly achieved.
    """
    now = clock.now()
    open_milestones = (
        db.query(Milestone)
        .filter(Milestone.user_id == user_id, Milestone.is_achieved.is_(False))
        .order_by(Milestone.id.asc())
        .all()
    )

    newly_achieved: list[Milestone] = []
    for milestone in open_milestones:
        field = _STATE_FIELD_FOR_TYPE.get(MilestoneType(milestone.milestone_type))
        if field is None:
            continue
        update_progress(milestone, getattr(state, field), now)
        if milestone.is_achieved:
            newly_achieved.append(milestone)
            logger.info("Milestone achieved: '%s' for user %s", milestone.name, user_id)

    db.commit()
    for milestone in newly_achieved:
        db.refresh(milestone)
    if newly_achieved:
        logger.info("User %s achieved %s new milestone(s)", user_id, len(newly_achieved))
    return newly_achieved


def list_milestones(
    db: Session,
    user_id: int,
    status: Optional[str] = None,
    milestone_type: Optional[MilestoneType] = None,
) -> list[Milestone]:
    """
    The user's milestones in catalog order.
    status: None (all) | "achieved" | "in_progress" | "almost_complete".
    """
    if status is not None and status not in _STATUS_FILTERS:
        raise InvalidArgumentError(
            message=f"Unknown milestone status filter {status!r}.",
            details={"status": status, "allowed": list(_STATUS_FILTERS)},
        )
    require_user(db, user_id)
    q = db.query(Milestone).filter(Milestone.user_id == user_id)
    if milestone_type is not None:
        q = q.filter(Milestone.milestone_type == milestone_type)
    if status == "achieved":
        q = q.filter(Milestone.is_achieved.is_(True))
    elif status == "in_progress":
        q = q.filter(Milestone.is_achieved.is_(False), Milestone.current_value > 0)
    items = q.order_by(Milestone.id.asc()).all()
    if status == "almost_complete":
        items = [m for m in items if is_almost_complete(m)]
    return items


def achieved_count(db: Session, user_id: int) -> int:
    return (
        db.query(func.count(Milestone.id))
        .filter(Milestone.user_id == user_id, Milestone.is_achieved.is_(True))
        .scalar()
        or 0
    )
