"""
Shared pytest fixtures.

Each test gets its own SQLite file under tmp_path, so tests never see each
other's rows and two sessions can be opened against the same database for
the concurrency tests.
"""
from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import brickwall.models  # noqa: F401  (registers every table on Base.metadata)
from brickwall.core.clock import FixedClock
from brickwall.db.base import Base
from brickwall.models.user import FitnessLevel
from brickwall.models.workout import Difficulty, WorkoutType
from brickwall.services import catalog, sessions, users

# Tuesday. Week runs Mon 2026-03-30 .. Sun 2026-04-05.
NOW = datetime(2026, 3, 31, 12, 0, tzinfo=timezone.utc)
DAY1 = date(2026, 3, 1)


def day(n: int) -> date:
    """Day n of the test calendar, DAY1 being day 1."""
    return DAY1 + timedelta(days=n - 1)


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test_brickwall.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def other_db(session_factory):
    """A second, independent session on the same database."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def clock():
    return FixedClock(NOW)


@pytest.fixture()
def make_user(db, clock):
    def _make(
        created_on=DAY1,
        fitness_level=FitnessLevel.beginner,
        primary_goal=None,
        display_name="Test User",
    ):
        return users.create_user(
            db, display_name,
            fitness_level=fitness_level,
            primary_goal=primary_goal,
            created_on=created_on,
            clock=clock,
        )
    return _make


@pytest.fixture()
def user(make_user):
    return make_user()


@pytest.fixture()
def workout(db):
    return catalog.add_workout(
        db,
        name="Upper Body Blast",
        workout_type=WorkoutType.strength,
        difficulty=Difficulty.beginner,
        estimated_duration=30,
    )


@pytest.fixture()
def completed_session(db, clock, workout):
    """Factory: a completed session for `user_id`."""
    def _make(user_id):
        session = sessions.start_session(db, user_id, workout.id, clock=clock)
        return sessions.complete_session(db, session.id, clock=clock)
    return _make
