"""
Streak & Consistency Tracker: derives a user's BehaviorState from workout events.

Update rules (apply_event, pure)
--------------------------------
  gap = event_date - last_event_date (days)

  streak      first event       -> 1
              gap == 0          -> unchanged (same-day re-log)
              gap == 1          -> +1
              gap  > 1          -> 1 (streak broken, today counts)
  longest     max(longest, streak)
  total       lifetime count read from the ledger, never incremented here
  consistency 0.7 * old + 0.3 * min(events / days since account creation, 1.0)

Classification
--------------
  motivation  score >= 0.7 motivated | score <= 0.3 struggling | else neutral
  momentum    first event stable | streak >= 3 rising | gap >= 3 falling | else stable
  tone        (first match wins)
                score <= 0.3 or fatigue >= 0.7  -> empathetic
                streak >= 7                     -> challenging
                momentum rising                 -> celebratory
                otherwise                       -> encouraging

Writes
------
Every mutation of a BehaviorState goes through _update_state(): read the row
(FOR UPDATE where the backend supports it), apply, commit. The row carries an
optimistic version_id; if another writer committed in between, the stale
commit is rolled back and the whole read-modify-write runs again.

Public API
----------
log_event(db, user_id, event_date, lifetime_event_count=None) -> BehaviorState
set_wellness_inputs(db, user_id, fatigue_score, recent_energy_score) -> BehaviorState
current_state(db, user_id)                                    -> BehaviorStateRead
apply_event(snapshot, event_date, lifetime_event_count, window_start) -> TrackerSnapshot
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from brickwall.core.clock import Clock, system_clock
from brickwall.core.config import settings
from brickwall.core.errors import (
    BrickwallException,
    InvalidArgumentError,
    NotFoundError,
    StateUpdateConflictError,
)
from brickwall.models.behavior_state import (
    BehaviorState,
    CoachingTone,
    MomentumTrend,
    MotivationState,
)
from brickwall.models.user import User
from brickwall.schemas.behavior import BehaviorStateRead
from brickwall.services import ledger
from brickwall.services.lookups import require_state, require_user

logger = logging.getLogger("brickwall.tracker")


# Consistency smoothing
EMA_HISTORY_WEIGHT = 0.7
EMA_RECENT_WEIGHT  = 0.3

# Classification thresholds
MOTIVATED_THRESHOLD   = 0.7
STRUGGLING_THRESHOLD  = 0.3
RISING_STREAK_DAYS    = 3
LAPSE_GAP_DAYS        = 3
HIGH_FATIGUE          = 0.7
CHALLENGE_STREAK_DAYS = 7


# ---------------------------------------------------------------------------
# Pure core
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TrackerSnapshot:
    consecutive_days: int = 0
    longest_streak: int = 0
    total_checks_logged: int = 0
    last_event_date: Optional[date] = None
    consistency_score: float = 0.0
    motivation_state: MotivationState = MotivationState.neutral
    momentum_trend: MomentumTrend = MomentumTrend.stable
    coaching_tone: CoachingTone = CoachingTone.encouraging
    fatigue_score: float = 0.0
    recent_energy_score: float = 0.5

    @classmethod
    def from_row(cls, row: BehaviorState) -> "TrackerSnapshot":
        return cls(
            consecutive_days=row.consecutive_days,
            longest_streak=row.longest_streak,
            total_checks_logged=row.total_checks_logged,
            last_event_date=row.last_event_date,
            consistency_score=row.consistency_score,
            motivation_state=MotivationState(row.motivation_state),
            momentum_trend=MomentumTrend(row.momentum_trend),
            coaching_tone=CoachingTone(row.coaching_tone),
            fatigue_score=row.fatigue_score,
            recent_energy_score=row.recent_energy_score,
        )


def classify_motivation(consistency_score: float) -> MotivationState:
    if consistency_score >= MOTIVATED_THRESHOLD:
        return MotivationState.motivated
    if consistency_score <= STRUGGLING_THRESHOLD:
        return MotivationState.struggling
    return MotivationState.neutral


def classify_momentum(
    first_event: bool, consecutive_days: int, gap: Optional[int]
) -> MomentumTrend:
    if first_event:
        return MomentumTrend.stable
    if consecutive_days >= RISING_STREAK_DAYS:
        return MomentumTrend.rising
    if gap is not None and gap >= LAPSE_GAP_DAYS:
        return MomentumTrend.falling
    return MomentumTrend.stable


def classify_tone(
    consistency_score: float,
    fatigue_score: float,
    consecutive_days: int,
    momentum: MomentumTrend,
) -> CoachingTone:
    if consistency_score <= STRUGGLING_THRESHOLD or fatigue_score >= HIGH_FATIGUE:
        return CoachingTone.empathetic
    if consecutive_days >= CHALLENGE_STREAK_DAYS:
        return CoachingTone.challenging
    if momentum == MomentumTrend.rising:
        return CoachingTone.celebratory
    return CoachingTone.encouraging


def consistency_ratio(events: int, window_start: date, event_date: date) -> float:
    """Logged events per elapsed day since `window_start` (inclusive), capped at 1."""
    window_days = (event_date - window_start).days + 1
    if window_days <= 0:
        return 0.0
    return min(events / window_days, 1.0)


def apply_event(
    prev: TrackerSnapshot,
    event_date: date,
    lifetime_event_count: int,
    window_start: date,
) -> TrackerSnapshot:
    """Return the state after one workout event. Deterministic, no I/O."""
    first_event = prev.last_event_date is None
    gap = None if first_event else (event_date - prev.last_event_date).days

    if first_event:
        streak = 1
    elif gap == 0:
        streak = prev.consecutive_days
    elif gap == 1:
        streak = prev.consecutive_days + 1
    else:
        streak = 1

    ratio = consistency_ratio(lifetime_event_count, window_start, event_date)
    score = EMA_HISTORY_WEIGHT * prev.consistency_score + EMA_RECENT_WEIGHT * ratio
    score = min(max(score, 0.0), 1.0)

    momentum = classify_momentum(first_event, streak, gap)
    return replace(
        prev,
        consecutive_days=streak,
        longest_streak=max(prev.longest_streak, streak),
        total_checks_logged=lifetime_event_count,
        last_event_date=event_date,
        consistency_score=score,
        motivation_state=classify_motivation(score),
        momentum_trend=momentum,
        coaching_tone=classify_tone(score, prev.fatigue_score, streak, momentum),
    )


# ---------------------------------------------------------------------------
# Single-writer update path
# ---------------------------------------------------------------------------

def _load_for_update(db: Session, user_id: int) -> BehaviorState:
    state = (
        db.query(BehaviorState)
        .filter(BehaviorState.user_id == user_id)
        .with_for_update()
        .populate_existing()
        .one_or_none()
    )
    if state is None:
        raise NotFoundError("BehaviorState", user_id)
    return state


def _update_state(
    db: Session,
    user_id: int,
    mutate: Callable[[BehaviorState], None],
) -> BehaviorState:
    attempts = max(1, settings.STATE_UPDATE_MAX_RETRIES)
    for attempt in range(1, attempts + 1):
        state = _load_for_update(db, user_id)
        try:
            mutate(state)
        except BrickwallException:
            db.rollback()
            raise
        try:
            db.commit()
        except StaleDataError:
            db.rollback()
            logger.warning(
                "Stale behavior state for user %s (attempt %s/%s), retrying",
                user_id, attempt, attempts,
            )
            continue
        db.refresh(state)
        return state
    raise StateUpdateConflictError(user_id, attempts)


def _write_snapshot(
    state: BehaviorState, prev: TrackerSnapshot, nxt: TrackerSnapshot, clock: Clock
) -> None:
    state.consecutive_days = nxt.consecutive_days
    state.longest_streak = nxt.longest_streak
    state.total_checks_logged = nxt.total_checks_logged
    state.last_event_date = nxt.last_event_date
    state.consistency_score = nxt.consistency_score
    state.motivation_state = nxt.motivation_state
    state.momentum_trend = nxt.momentum_trend
    state.fatigue_score = nxt.fatigue_score
    state.recent_energy_score = nxt.recent_energy_score
    if nxt.coaching_tone != prev.coaching_tone:
        state.coaching_tone = nxt.coaching_tone
        state.last_tone_change = clock.now()


# ---------------------------------------------------------------------------
# Public: writes
# ---------------------------------------------------------------------------

def validate_event_date(user: User, event_date: date, clock: Clock = system_clock) -> None:
    """Reject events dated in the future or before the account existed."""
    today = clock.today()
    if event_date > today:
        raise InvalidArgumentError(
            message=f"Event date {event_date} is in the future.",
            details={"event_date": str(event_date), "today": str(today)},
        )
    if event_date < user.created_on:
        raise InvalidArgumentError(
            message=f"Event date {event_date} is before account creation ({user.created_on}).",
            details={"event_date": str(event_date), "created_on": str(user.created_on)},
        )


def log_event(
    db: Session,
    user_id: int,
    event_date: date,
    lifetime_event_count: Optional[int] = None,
    clock: Clock = system_clock,
) -> BehaviorState:
    """
    Fold one workout event into the user's BehaviorState and persist it.

    `lifetime_event_count` defaults to the ledger's brick count.
    Raises InvalidArgumentError for future dates, dates before account
    creation, dates earlier than the last logged event, or a negative count.
    """
    user = require_user(db, user_id)
    validate_event_date(user, event_date, clock)
    if lifetime_event_count is not None and lifetime_event_count < 0:
        raise InvalidArgumentError(
            message="Lifetime event count cannot be negative.",
            details={"lifetime_event_count": lifetime_event_count},
        )
    window_start = user.created_on

    def mutate(state: BehaviorState) -> None:
        # Counted per attempt; a retry must see bricks laid in between.
        count = lifetime_event_count
        if count is None:
            count = ledger.count_workout_bricks(db, user_id)
        prev = TrackerSnapshot.from_row(state)
        if prev.last_event_date is not None and event_date < prev.last_event_date:
            raise InvalidArgumentError(
                message=(
                    f"Event date {event_date} is earlier than the last logged "
                    f"event ({prev.last_event_date})."
                ),
                details={
                    "event_date": str(event_date),
                    "last_event_date": str(prev.last_event_date),
                },
            )
        nxt = apply_event(prev, event_date, count, window_start)
        _write_snapshot(state, prev, nxt, clock)
        if nxt.coaching_tone != prev.coaching_tone:
            logger.info(
                "Coaching tone for user %s: %s -> %s",
                user_id, prev.coaching_tone.value, nxt.coaching_tone.value,
            )

    state = _update_state(db, user_id, mutate)
    logger.info(
        "Logged event for user %s on %s: streak=%s longest=%s score=%.3f",
        user_id, event_date, state.consecutive_days, state.longest_streak,
        state.consistency_score,
    )
    return state


def set_wellness_inputs(
    db: Session,
    user_id: int,
    fatigue_score: float,
    recent_energy_score: float,
    clock: Clock = system_clock,
) -> BehaviorState:
    """
    Store the wellness-derived inputs and re-derive the coaching tone.

    Before the first logged event there is nothing to classify, so the tone
    is left as is.
    """
    for name, value in (("fatigue_score", fatigue_score),
                        ("recent_energy_score", recent_energy_score)):
        if not 0.0 <= value <= 1.0:
            raise InvalidArgumentError(
                message=f"{name} must be within [0, 1], got {value}.",
                details={name: value},
            )
    require_user(db, user_id)

    def mutate(state: BehaviorState) -> None:
        prev = TrackerSnapshot.from_row(state)
        nxt = replace(prev, fatigue_score=fatigue_score, recent_energy_score=recent_energy_score)
        if prev.last_event_date is not None:
            nxt = replace(nxt, coaching_tone=classify_tone(
                nxt.consistency_score, nxt.fatigue_score,
                nxt.consecutive_days, nxt.momentum_trend,
            ))
        _write_snapshot(state, prev, nxt, clock)

    return _update_state(db, user_id, mutate)


# ---------------------------------------------------------------------------
# Public: reads
# ---------------------------------------------------------------------------

def current_state(db: Session, user_id: int) -> BehaviorStateRead:
    """Read-only view of the user's BehaviorState for coaching/messaging."""
    return BehaviorStateRead.model_validate(require_state(db, user_id))
