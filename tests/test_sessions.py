"""Tests for workout session lifecycle."""
from __future__ import annotations

from datetime import timedelta

import pytest

from brickwall.core.errors import (
    ConflictError,
    InvalidArgumentError,
    InvalidStateError,
    NotFoundError,
    SessionAlreadyCompletedError,
)
from brickwall.models.workout_session import SessionStatus
from brickwall.services import sessions


class TestStartSession:
    def test_starts_in_progress(self, db, user, workout, clock):
        session = sessions.start_session(db, user.id, workout.id, clock=clock)
        assert session.status == SessionStatus.in_progress
        assert session.ended_at is None
        assert sessions.active_session(db, user.id).id == session.id

    def test_unknown_user(self, db, workout, clock):
        with pytest.raises(NotFoundError):
            sessions.start_session(db, 9999, workout.id, clock=clock)

    def test_unknown_workout(self, db, user, clock):
        with pytest.raises(NotFoundError):
            sessions.start_session(db, user.id, 9999, clock=clock)


class TestCompleteSession:
    def test_completes_with_rating_and_notes(self, db, user, workout, clock):
        session = sessions.start_session(db, user.id, workout.id, clock=clock)
        done = sessions.complete_session(
            db, session.id, perceived_difficulty=4, notes="Legs shaking", clock=clock
        )
        assert done.status == SessionStatus.completed
        assert done.ended_at is not None
        assert done.perceived_difficulty == 4
        assert done.notes == "Legs shaking"
        assert sessions.active_session(db, user.id) is None

    def test_completing_twice_is_conflict(self, db, user, workout, clock):
        session = sessions.start_session(db, user.id, workout.id, clock=clock)
        sessions.complete_session(db, session.id, clock=clock)
        with pytest.raises(SessionAlreadyCompletedError) as exc_info:
            sessions.complete_session(db, session.id, clock=clock)
        assert isinstance(exc_info.value, ConflictError)

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, db, user, workout, clock, rating):
        session = sessions.start_session(db, user.id, workout.id, clock=clock)
        with pytest.raises(InvalidArgumentError):
            sessions.complete_session(db, session.id, perceived_difficulty=rating, clock=clock)

    def test_skipped_session_cannot_be_completed(self, db, user, workout, clock):
        session = sessions.start_session(db, user.id, workout.id, clock=clock)
        sessions.skip_session(db, session.id)
        with pytest.raises(InvalidStateError):
            sessions.complete_session(db, session.id, clock=clock)

    def test_unknown_session(self, db, clock):
        with pytest.raises(NotFoundError):
            sessions.complete_session(db, 9999, clock=clock)


class TestSkipSession:
    def test_skip(self, db, user, workout, clock):
        session = sessions.start_session(db, user.id, workout.id, clock=clock)
        assert sessions.skip_session(db, session.id).status == SessionStatus.skipped

    def test_cannot_skip_completed(self, db, user, completed_session):
        session = completed_session(user.id)
        with pytest.raises(SessionAlreadyCompletedError):
            sessions.skip_session(db, session.id)


class TestListSessions:
    def test_newest_first(self, db, user, workout, clock):
        first = sessions.start_session(db, user.id, workout.id, clock=clock)
        clock.advance_to(clock.now() + timedelta(hours=2))
        second = sessions.start_session(db, user.id, workout.id, clock=clock)
        assert [s.id for s in sessions.list_sessions(db, user.id)] == [second.id, first.id]
        assert sessions.active_session(db, user.id).id == second.id
