from datetime import datetime
from sqlalchemy import (
    Integer, String, Text, Boolean, DateTime, Enum, ForeignKey, CheckConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column
import enum

from brickwall.db.base import Base


class MilestoneType(str, enum.Enum):
    streak = "streak"
    workout_count = "workout_count"
    goal_achieved = "goal_achieved"
    consistency = "consistency"
    personal_record = "personal_record"


class Milestone(Base):
    __tablename__ = "milestones"
    __table_args__ = (
        CheckConstraint("target_value > 0", name="ck_milestone_target_positive"),
        CheckConstraint("current_value >= 0", name="ck_milestone_current_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    milestone_type: Mapped[str] = mapped_column(
        Enum(MilestoneType, name="milestone_type_enum"), nullable=False, index=True
    )
    target_value: Mapped[int] = mapped_column(Integer, nullable=False)
    current_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_achieved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    achieved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
