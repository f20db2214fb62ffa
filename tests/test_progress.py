"""
End-to-end tests for the workout completion pipeline:
session -> brick -> tracker event -> milestone check.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from brickwall.core.clock import FixedClock
from brickwall.core.errors import (
    InvalidStateError,
    SessionAlreadyCompletedError,
    StateUpdateConflictError,
)
from brickwall.models.behavior_state import CoachingTone, MomentumTrend
from brickwall.models.workout_session import SessionStatus
from brickwall.services import ledger, milestones, progress, sessions, tracker, users

START = datetime(2026, 5, 4, 7, 30, tzinfo=timezone.utc)


@pytest.fixture()
def morning():
    return FixedClock(START)


@pytest.fixture()
def athlete(db, morning):
    return users.create_user(db, "Early Riser", created_on=START.date(), clock=morning)


def _train(db, user_id, workout_id, clock, **kwargs):
    session = sessions.start_session(db, user_id, workout_id, clock=clock)
    return progress.complete_workout(db, session.id, clock=clock, **kwargs)


class TestCompleteWorkout:
    def test_first_workout(self, db, athlete, workout, morning):
        result = _train(db, athlete.id, workout.id, morning, perceived_difficulty=3)

        assert result.brick_laid is True
        assert result.brick.brick_date == START.date()
        assert result.session.status == SessionStatus.completed
        assert result.state.consecutive_days == 1
        assert result.state.total_checks_logged == 1
        assert result.state.consistency_score == pytest.approx(0.3)
        assert [m.name for m in result.newly_achieved] == ["First Brick Laid!"]

    def test_second_workout_same_day_lays_no_brick(self, db, athlete, workout, morning):
        _train(db, athlete.id, workout.id, morning)
        morning.advance_to(START + timedelta(hours=10))

        result = _train(db, athlete.id, workout.id, morning)

        assert result.brick_laid is False
        assert result.newly_achieved == []
        assert result.session.status == SessionStatus.completed
        assert result.state.consecutive_days == 1
        assert result.state.total_checks_logged == 1
        assert ledger.count_workout_bricks(db, athlete.id) == 1

    def test_three_day_run(self, db, athlete, workout, morning):
        achieved = []
        for offset in range(3):
            morning.advance_to(START + timedelta(days=offset))
            result = _train(db, athlete.id, workout.id, morning)
            achieved.extend(m.name for m in result.newly_achieved)

        assert result.state.consecutive_days == 3
        assert result.state.momentum_trend == MomentumTrend.rising
        assert result.state.coaching_tone == CoachingTone.celebratory
        assert achieved == ["First Brick Laid!", "3-Day Streak!"]
        assert milestones.achieved_count(db, athlete.id) == 2

    def test_week_of_training(self, db, athlete, workout, morning):
        for offset in range(7):
            morning.advance_to(START + timedelta(days=offset))
            result = _train(db, athlete.id, workout.id, morning)

        assert result.state.consecutive_days == 7
        assert result.state.coaching_tone == CoachingTone.challenging
        assert [m.name for m in result.newly_achieved] == ["7-Day Warrior!"]
        stats = ledger.brick_stats(db, athlete.id, clock=morning)
        assert stats.total_bricks == 7
        assert stats.current_streak == 7

    def test_completed_session_cannot_complete_again(self, db, athlete, workout, morning):
        result = _train(db, athlete.id, workout.id, morning)
        with pytest.raises(SessionAlreadyCompletedError):
            progress.complete_workout(db, result.session.id, clock=morning)

    def test_skipped_session(self, db, athlete, workout, morning):
        session = sessions.start_session(db, athlete.id, workout.id, clock=morning)
        sessions.skip_session(db, session.id)
        with pytest.raises(InvalidStateError):
            progress.complete_workout(db, session.id, clock=morning)
        assert ledger.list_all(db, athlete.id) == []


def _conflicted(db, user_id, *args, **kwargs):
    raise StateUpdateConflictError(user_id, 3)


class TestTrackerFailure:
    def test_next_completion_tracks_a_brick_the_tracker_missed(
        self, db, athlete, workout, morning, monkeypatch
    ):
        monkeypatch.setattr(tracker, "log_event", _conflicted)
        with pytest.raises(StateUpdateConflictError):
            _train(db, athlete.id, workout.id, morning)
        monkeypatch.undo()

        assert ledger.exists_for_date(db, athlete.id, START.date())
        assert tracker.current_state(db, athlete.id).consecutive_days == 0

        result = _train(db, athlete.id, workout.id, morning)

        assert result.brick_laid is False
        assert result.state.consecutive_days == 1
        assert result.state.total_checks_logged == 1
        assert result.state.last_event_date == START.date()
        assert [m.name for m in result.newly_achieved] == ["First Brick Laid!"]

    def test_archived_untracked_brick_is_not_counted(
        self, db, athlete, workout, morning, monkeypatch
    ):
        monkeypatch.setattr(tracker, "log_event", _conflicted)
        with pytest.raises(StateUpdateConflictError):
            _train(db, athlete.id, workout.id, morning)
        monkeypatch.undo()
        ledger.archive_brick(db, ledger.brick_for_date(db, athlete.id, START.date()).id, clock=morning)

        result = _train(db, athlete.id, workout.id, morning)

        assert result.brick_laid is False
        assert result.state.consecutive_days == 0
        assert result.newly_achieved == []
