from datetime import datetime, date
from sqlalchemy import Integer, String, DateTime, Date, Enum, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from brickwall.db.base import Base


class FitnessLevel(str, enum.Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class PrimaryGoal(str, enum.Enum):
    strength = "strength"
    cardio = "cardio"
    flexibility = "flexibility"
    weight_loss = "weight_loss"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_on: Mapped[date] = mapped_column(
        Date, nullable=False,
        comment="Account creation day; events before it are rejected.",
    )
    fitness_level: Mapped[str] = mapped_column(
        Enum(FitnessLevel, name="fitness_level_enum"),
        nullable=False,
        default=FitnessLevel.beginner,
    )
    primary_goal: Mapped[str | None] = mapped_column(
        Enum(PrimaryGoal, name="primary_goal_enum"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
