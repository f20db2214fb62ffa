"""Read-mostly workout catalog consumed by the scorer."""
from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy import or_
from sqlalchemy.orm import Session

from brickwall.core.errors import invalid_argument_from
from brickwall.models.workout import Difficulty, Workout, WorkoutType
from brickwall.schemas.workout import WorkoutCreate
from brickwall.services.lookups import require_workout

logger = logging.getLogger("brickwall.catalog")


def add_workout(db: Session, **fields) -> Workout:
    try:
        payload = WorkoutCreate(**fields)
    except ValidationError as exc:
        raise invalid_argument_from(exc) from exc

    workout = Workout(**payload.model_dump())
    db.add(workout)
    db.commit()
    db.refresh(workout)
    logger.info("Added workout %s '%s'", workout.id, workout.name)
    return workout


def get_workout(db: Session, workout_id: int) -> Workout:
    return require_workout(db, workout_id)


def list_workouts(
    db: Session,
    workout_type: Optional[WorkoutType] = None,
    difficulty: Optional[Difficulty] = None,
    search: Optional[str] = None,
) -> list[Workout]:
    """
    Catalog in insertion order, optionally filtered. `search` is a
    case-insensitive keyword matched against name and description.
    """
    q = db.query(Workout)
    if workout_type is not None:
        q = q.filter(Workout.workout_type == workout_type)
    if difficulty is not None:
        q = q.filter(Workout.difficulty == difficulty)
    if search is not None and search.strip():
        pattern = f"%{search.strip()}%"
        q = q.filter(or_(Workout.name.ilike(pattern), Workout.description.ilike(pattern)))
    items = q.order_by(Workout.id.asc()).all()
    if search:
        logger.debug("Found %s workouts matching %r", len(items), search)
    return items
