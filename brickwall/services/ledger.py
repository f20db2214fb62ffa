"""
Daily Ledger: one brick per user per calendar day.

A completed workout session earns the user a brick for the day it was
completed. A second completion on the same day earns nothing: the ledger
rewards showing up daily, not volume.

Exclusivity
-----------
create_brick() checks for an existing brick first so the common case gets a
clean DuplicateBrickError. Two racing requests can both pass that check, so
the unique constraint (user_id, brick_date) is the final guard: the loser's
commit raises IntegrityError, is rolled back and reported as the same
conflict.

The ledger owns the lifetime workout counter (count_workout_bricks); the
Tracker reads it and never keeps a second count of its own.

Public API
----------
create_brick(db, user_id, session_id, completion_date)  -> Brick
exists_for_date(db, user_id, day)                       -> bool
brick_for_date(db, user_id, day)                        -> Brick | None
list_by_date_range(db, user_id, start, end)             -> list[Brick]
list_all(db, user_id)                                   -> list[Brick]   (newest first)
list_month(db, user_id, year, month)                    -> list[Brick]
count_workout_bricks(db, user_id)                       -> int
archive_brick(db, brick_id)                             -> Brick
brick_stats(db, user_id)                                -> BrickStats
color_code(brick_type)                                  -> str
"""
from __future__ import annotations

import calendar
import logging
from datetime import date, timedelta

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from brickwall.core.clock import Clock, system_clock
from brickwall.core.errors import (
    DuplicateBrickError,
    InvalidArgumentError,
    NotFoundError,
    SessionNotCompletedError,
)
from brickwall.models.brick import Brick, BrickType
from brickwall.models.workout_session import SessionStatus
from brickwall.schemas.brick import BrickStats
from brickwall.services.lookups import require_session, require_state, require_user

logger = logging.getLogger("brickwall.ledger")


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------

_BRICK_COLORS: dict[BrickType, str] = {
    BrickType.workout:      "#FF6B35",   # orange
    BrickType.streak_bonus: "#F7C948",   # gold
    BrickType.milestone:    "#8B5CF6",   # purple
}


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def color_code(brick_type: BrickType | str) -> str:
    """Hex color for a brick. Depends on the type only."""
    return _BRICK_COLORS[BrickType(_ev(brick_type))]


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def exists_for_date(db: Session, user_id: int, day: date) -> bool:
    """True if any brick (archived ones included) occupies `day`."""
    return (
        db.query(Brick.id)
        .filter(Brick.user_id == user_id, Brick.brick_date == day)
        .first()
        is not None
    )


def brick_for_date(db: Session, user_id: int, day: date) -> Brick | None:
    return (
        db.query(Brick)
        .filter(Brick.user_id == user_id, Brick.brick_date == day)
        .one_or_none()
    )


def list_by_date_range(
    db: Session,
    user_id: int,
    start: date,
    end: date,
    include_archived: bool = False,
) -> list[Brick]:
    """Bricks with start <= brick_date <= end, oldest first."""
    if start > end:
        raise InvalidArgumentError(
            message=f"Range start {start} is after range end {end}.",
            details={"start": str(start), "end": str(end)},
        )
    q = db.query(Brick).filter(
        Brick.user_id == user_id,
        Brick.brick_date >= start,
        Brick.brick_date <= end,
    )
    if not include_archived:
        q = q.filter(Brick.is_archived.is_(False))
    return q.order_by(Brick.brick_date.asc()).all()


def list_all(db: Session, user_id: int, include_archived: bool = False) -> list[Brick]:
    """Every brick of the user, newest first."""
    q = db.query(Brick).filter(Brick.user_id == user_id)
    if not include_archived:
        q = q.filter(Brick.is_archived.is_(False))
    return q.order_by(Brick.brick_date.desc()).all()


def list_month(db: Session, user_id: int, year: int, month: int) -> list[Brick]:
    """The brick-wall calendar for one month."""
    if not 1 <= month <= 12:
        raise InvalidArgumentError(
            message=f"Month must be 1..12, got {month}.",
            details={"month": month},
        )
    last_day = calendar.monthrange(year, month)[1]
    return list_by_date_range(db, user_id, date(year, month, 1), date(year, month, last_day))


def count_workout_bricks(db: Session, user_id: int) -> int:
    """Lifetime count of laid workout bricks. The single source of truth."""
    return (
        db.query(func.count(Brick.id))
        .filter(
            Brick.user_id == user_id,
            Brick.brick_type == BrickType.workout,
            Brick.is_archived.is_(False),
        )
        .scalar()
        or 0
    )


def brick_stats(db: Session, user_id: int, clock: Clock = system_clock) -> BrickStats:
    """Totals for the wall header: all time, this ISO week, this month, streaks."""
    require_user(db, user_id)
    state = require_state(db, user_id)
    today = clock.today()

    week_start = today - timedelta(days=today.weekday())
    week_end = week_start + timedelta(days=6)
    month_start = today.replace(day=1)
    month_end = today.replace(day=calendar.monthrange(today.year, today.month)[1])

    total = (
        db.query(func.count(Brick.id))
        .filter(Brick.user_id == user_id, Brick.is_archived.is_(False))
        .scalar()
        or 0
    )
    stats = BrickStats(
        total_bricks=total,
        bricks_this_week=len(list_by_date_range(db, user_id, week_start, week_end)),
        bricks_this_month=len(list_by_date_range(db, user_id, month_start, month_end)),
        current_streak=state.consecutive_days,
        longest_streak=state.longest_streak,
    )
    logger.debug("Brick stats for user %s: %s", user_id, stats)
    return stats


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def create_brick(
    db: Session,
    user_id: int,
    session_id: int,
    completion_date: date,
    brick_type: BrickType = BrickType.workout,
) -> Brick:
    """
    Lay the brick for a completed session.

    Raises NotFoundError for an unknown session (or one owned by another
    user), SessionNotCompletedError if the session is not completed, and
    DuplicateBrickError if the day already has a brick.
    Does not touch BehaviorState; the caller logs the event separately.
    """
    session = require_session(db, session_id)
    if session.user_id != user_id:
        raise NotFoundError("WorkoutSession", session_id)
    if session.status != SessionStatus.completed:
        raise SessionNotCompletedError(session_id, _ev(session.status))

    if exists_for_date(db, user_id, completion_date):
        logger.warning("Brick already exists for user %s on %s", user_id, completion_date)
        raise DuplicateBrickError(user_id, completion_date)

    brick = Brick(
        user_id=user_id,
        session_id=session_id,
        brick_date=completion_date,
        brick_type=brick_type,
    )
    db.add(brick)
    try:
        db.commit()
    except IntegrityError:
        # Lost the race: another request laid this day's brick first.
        db.rollback()
        logger.warning(
            "Concurrent brick insert for user %s on %s rejected", user_id, completion_date
        )
        raise DuplicateBrickError(user_id, completion_date)

    db.refresh(brick)
    logger.info("Laid %s brick %s for user %s on %s",
                _ev(brick.brick_type), brick.id, user_id, completion_date)
    return brick


def archive_brick(db: Session, brick_id: int, clock: Clock = system_clock) -> Brick:
    """Soft-disable a brick. Its day stays taken. Archiving twice is a no-op."""
    brick = db.get(Brick, brick_id)
    if brick is None:
        raise NotFoundError("Brick", brick_id)
    if brick.is_archived:
        return brick
    brick.is_archived = True
    brick.archived_at = clock.now()
    db.commit()
    db.refresh(brick)
    logger.info("Archived brick %s (user %s, %s)", brick.id, brick.user_id, brick.brick_date)
    return brick
