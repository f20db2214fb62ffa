"""
Wellness check-ins.

One log per user per calendar day (unique constraint, same race handling as
the brick ledger). Today's log feeds the tracker's fatigue and energy inputs:

  wellness score = (energy + (6 - stress) + sleep) / 15      0.2 .. 1.0
  fatigue        = 1 - wellness score
  recent energy  = (energy - 1) / 4                          0.0 .. 1.0

Only today's check-in can be edited; an edit feeds the tracker again.
"""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from brickwall.core.clock import Clock, system_clock
from brickwall.core.errors import (
    DuplicateWellnessLogError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    invalid_argument_from,
)
from brickwall.models.wellness_log import Mood, WellnessLog
from brickwall.schemas.wellness import WellnessLogCreate, WellnessLogUpdate
from brickwall.services import tracker
from brickwall.services.lookups import require_user

logger = logging.getLogger("brickwall.wellness")

RECENT_DAYS = 7


# ---------------------------------------------------------------------------
# Derived indicators
# ---------------------------------------------------------------------------

def wellness_score(log) -> float:
    """Overall 0..1 wellness; stress counts inverted."""
    return (log.energy_level + (6 - log.stress_level) + log.sleep_quality) / 15.0


def fatigue_from(log) -> float:
    return round(1.0 - wellness_score(log), 4)


def energy_from(log) -> float:
    return (log.energy_level - 1) / 4.0


def needs_recovery(log) -> bool:
    """At least two of: low energy, high stress, poor sleep."""
    indicators = [
        log.energy_level <= 2,
        log.stress_level >= 4,
        log.sleep_quality <= 2,
    ]
    return sum(indicators) >= 2


def is_optimal_workout_day(log) -> bool:
    """High energy and low stress, in a mood that is neither low nor stressed."""
    return (
        log.energy_level >= 4
        and log.stress_level < 4
        and _ev(log.mood) not in (Mood.low.value, Mood.stressed.value)
    )


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


# ---------------------------------------------------------------------------
# Public: reads
# ---------------------------------------------------------------------------

def get_log(db: Session, user_id: int, day: date) -> Optional[WellnessLog]:
    return (
        db.query(WellnessLog)
        .filter(WellnessLog.user_id == user_id, WellnessLog.log_date == day)
        .one_or_none()
    )


def require_log(db: Session, log_id: int) -> WellnessLog:
    log = db.get(WellnessLog, log_id)
    if log is None:
        raise NotFoundError("WellnessLog", log_id)
    return log


def has_logged_today(db: Session, user_id: int, clock: Clock = system_clock) -> bool:
    require_user(db, user_id)
    return get_log(db, user_id, clock.today()) is not None


def list_logs(
    db: Session,
    user_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[WellnessLog]:
    """Check-ins with start <= log_date <= end (either bound optional), newest first."""
    if start is not None and end is not None and start > end:
        raise InvalidArgumentError(
            message=f"Range start {start} is after range end {end}.",
            details={"start": str(start), "end": str(end)},
        )
    require_user(db, user_id)
    q = db.query(WellnessLog).filter(WellnessLog.user_id == user_id)
    if start is not None:
        q = q.filter(WellnessLog.log_date >= start)
    if end is not None:
        q = q.filter(WellnessLog.log_date <= end)
    return q.order_by(WellnessLog.log_date.desc()).all()


def recent_logs(
    db: Session,
    user_id: int,
    days: int = RECENT_DAYS,
    clock: Clock = system_clock,
) -> list[WellnessLog]:
    """The last `days` days of check-ins up to today, newest first."""
    if days < 1:
        raise InvalidArgumentError(
            message=f"Window must cover at least one day, got {days}.",
            details={"days": days},
        )
    today = clock.today()
    return list_logs(db, user_id, today - timedelta(days=days - 1), today)


def recovery_days(
    db: Session,
    user_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[WellnessLog]:
    """Check-ins flagged by needs_recovery(), newest first."""
    return [log for log in list_logs(db, user_id, start, end) if needs_recovery(log)]


# ---------------------------------------------------------------------------
# Public: writes
# ---------------------------------------------------------------------------

def _feed_tracker(db: Session, log: WellnessLog, clock: Clock) -> None:
    tracker.set_wellness_inputs(
        db, log.user_id,
        fatigue_score=fatigue_from(log),
        recent_energy_score=energy_from(log),
        clock=clock,
    )


def record_check_in(
    db: Session,
    user_id: int,
    clock: Clock = system_clock,
    **fields,
) -> WellnessLog:
    """
    Store a check-in (log_date, energy_level, stress_level, sleep_quality,
    mood, notes). Ratings outside 1..5 and future dates are rejected.
    A check-in for today also updates the tracker's wellness inputs.
    """
    try:
        payload = WellnessLogCreate(**fields)
    except ValidationError as exc:
        raise invalid_argument_from(exc) from exc

    require_user(db, user_id)
    today = clock.today()
    if payload.log_date > today:
        raise InvalidArgumentError(
            message=f"Check-in date {payload.log_date} is in the future.",
            details={"log_date": str(payload.log_date), "today": str(today)},
        )
    if get_log(db, user_id, payload.log_date) is not None:
        raise DuplicateWellnessLogError(user_id, payload.log_date)

    log = WellnessLog(user_id=user_id, **payload.model_dump())
    db.add(log)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateWellnessLogError(user_id, payload.log_date)
    db.refresh(log)
    logger.info("Recorded check-in %s for user %s on %s", log.id, user_id, log.log_date)

    if log.log_date == today:
        _feed_tracker(db, log, clock)
    return log


def update_check_in(
    db: Session,
    log_id: int,
    clock: Clock = system_clock,
    **fields,
) -> WellnessLog:
    """
    Edit today's check-in. Only the fields passed are changed; earlier days
    are read-only. The tracker's wellness inputs are recomputed.
    """
    try:
        payload = WellnessLogUpdate(**fields)
    except ValidationError as exc:
        raise invalid_argument_from(exc) from exc

    log = require_log(db, log_id)
    today = clock.today()
    if log.log_date != today:
        raise InvalidStateError(
            message=f"Check-in {log_id} is for {log.log_date}; only today's can be edited.",
            details={"log_id": log_id, "log_date": str(log.log_date), "today": str(today)},
        )

    changes = payload.model_dump(exclude_unset=True)
    cleared = [name for name, value in changes.items() if value is None and name != "notes"]
    if cleared:
        raise InvalidArgumentError(
            message="Ratings and mood cannot be cleared.",
            details={"fields": cleared},
        )
    for name, value in changes.items():
        setattr(log, name, value)
    db.commit()
    db.refresh(log)
    logger.info("Updated check-in %s for user %s", log.id, log.user_id)

    _feed_tracker(db, log, clock)
    return log
