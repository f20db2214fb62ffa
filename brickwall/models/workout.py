from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, Enum, CheckConstraint, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from brickwall.db.base import Base


class WorkoutType(str, enum.Enum):
    strength = "strength"
    cardio = "cardio"
    flexibility = "flexibility"
    mixed = "mixed"


class Difficulty(str, enum.Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class Workout(Base):
    """A catalog entry the scorer can recommend."""

    __tablename__ = "workouts"
    __table_args__ = (
        CheckConstraint("estimated_duration > 0", name="ck_workout_duration_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    workout_type: Mapped[str] = mapped_column(
        Enum(WorkoutType, name="workout_type_enum"), nullable=False
    )
    difficulty: Mapped[str] = mapped_column(
        Enum(Difficulty, name="difficulty_enum"), nullable=False
    )
    estimated_duration: Mapped[int] = mapped_column(
        Integer, nullable=False, comment="Minutes"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
