from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from brickwall.models.wellness_log import Mood


class WellnessLogCreate(BaseModel):
    """A daily check-in. All ratings are 1 (lowest) .. 5 (highest)."""
    log_date: date
    energy_level: int = Field(ge=1, le=5)
    stress_level: int = Field(ge=1, le=5)
    sleep_quality: int = Field(ge=1, le=5)
    mood: Mood
    notes: Optional[str] = Field(default=None, max_length=2000)


class WellnessLogUpdate(BaseModel):
    """Partial edit of today's check-in. The log date itself is fixed."""
    model_config = ConfigDict(extra="forbid")

    energy_level: Optional[int] = Field(default=None, ge=1, le=5)
    stress_level: Optional[int] = Field(default=None, ge=1, le=5)
    sleep_quality: Optional[int] = Field(default=None, ge=1, le=5)
    mood: Optional[Mood] = None
    notes: Optional[str] = Field(default=None, max_length=2000)
