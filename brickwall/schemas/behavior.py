"""
Read model for a user's BehaviorState.

Returned by tracker.current_state(); this is what the coaching/messaging
layer reads for context.
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from brickwall.models.behavior_state import CoachingTone, MomentumTrend, MotivationState


class BehaviorStateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    consecutive_days: int = Field(ge=0)
    longest_streak: int = Field(ge=0)
    total_checks_logged: int = Field(ge=0)
    last_event_date: Optional[date] = None
    consistency_score: float = Field(ge=0.0, le=1.0)
    motivation_state: MotivationState
    momentum_trend: MomentumTrend
    coaching_tone: CoachingTone
    fatigue_score: float = Field(ge=0.0, le=1.0)
    recent_energy_score: float = Field(ge=0.0, le=1.0)
    last_tone_change: Optional[datetime] = None
