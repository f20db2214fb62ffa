"""
BehaviorState: the per-user aggregate the Tracker derives from workout events.

Exactly one row per user (unique user_id). Written only through
brickwall.services.tracker; `version_id` is an optimistic lock so two
concurrent read-modify-write cycles cannot both land.
"""
from datetime import datetime, date
from sqlalchemy import (
    Integer, Float, DateTime, Date, Enum, ForeignKey, CheckConstraint, func,
)
from sqlalchemy.orm import Mapped, mapped_column
import enum

from brickwall.db.base import Base


class MotivationState(str, enum.Enum):
    motivated = "motivated"
    neutral = "neutral"
    struggling = "struggling"


class MomentumTrend(str, enum.Enum):
    rising = "rising"
    stable = "stable"
    falling = "falling"


class CoachingTone(str, enum.Enum):
    encouraging = "encouraging"
    challenging = "challenging"
    empathetic = "empathetic"
    celebratory = "celebratory"


class BehaviorState(Base):
    __tablename__ = "behavior_states"
    __table_args__ = (
        CheckConstraint(
            "consistency_score >= 0 AND consistency_score <= 1",
            name="ck_behavior_consistency_range",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, unique=True, index=True
    )

    consecutive_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_checks_logged: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_event_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    consistency_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    motivation_state: Mapped[str] = mapped_column(
        Enum(MotivationState, name="motivation_state_enum"),
        nullable=False,
        default=MotivationState.neutral,
    )
    momentum_trend: Mapped[str] = mapped_column(
        Enum(MomentumTrend, name="momentum_trend_enum"),
        nullable=False,
        default=MomentumTrend.stable,
    )
    coaching_tone: Mapped[str] = mapped_column(
        Enum(CoachingTone, name="coaching_tone_enum"),
        nullable=False,
        default=CoachingTone.encouraging,
    )
    last_tone_change: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Wellness inputs: 0.0 fully recovered .. 1.0 exhausted; energy normalized 0..1.
    fatigue_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    recent_energy_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.5)

    version_id: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __mapper_args__ = {"version_id_col": version_id}
