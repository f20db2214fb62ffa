"""
Brick: one calendar day of workout credit on a user's wall.

Never updated after insert, only archived. The unique constraint on
(user_id, brick_date) is the final guard for the one-brick-per-day rule;
archived bricks keep their slot.
"""
from datetime import datetime, date
from sqlalchemy import (
    Integer, Boolean, DateTime, Date, Enum, ForeignKey, UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column
import enum

from brickwall.db.base import Base


class BrickType(str, enum.Enum):
    workout = "workout"
    streak_bonus = "streak_bonus"
    milestone = "milestone"


class Brick(Base):
    __tablename__ = "bricks"
    __table_args__ = (
        UniqueConstraint("user_id", "brick_date", name="uq_brick_user_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    session_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("workout_sessions.id"), nullable=True
    )
    brick_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    brick_type: Mapped[str] = mapped_column(
        Enum(BrickType, name="brick_type_enum"),
        nullable=False,
        default=BrickType.workout,
    )
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
