from datetime import datetime, date
from sqlalchemy import (
    Integer, Text, DateTime, Date, Enum, ForeignKey, UniqueConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column
import enum

from brickwall.db.base import Base


class Mood(str, enum.Enum):
    great = "great"
    good = "good"
    okay = "okay"
    low = "low"
    stressed = "stressed"


class WellnessLog(Base):
    """Daily check-in. One per user per day."""

    __tablename__ = "wellness_logs"
    __table_args__ = (
        UniqueConstraint("user_id", "log_date", name="uq_wellness_user_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    log_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    energy_level: Mapped[int] = mapped_column(Integer, nullable=False)
    stress_level: Mapped[int] = mapped_column(Integer, nullable=False)
    sleep_quality: Mapped[int] = mapped_column(Integer, nullable=False)
    mood: Mapped[str] = mapped_column(Enum(Mood, name="mood_enum"), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
