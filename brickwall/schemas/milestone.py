from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from brickwall.models.milestone import MilestoneType


class MilestoneProgress(BaseModel):
    id: int
    name: str
    milestone_type: MilestoneType
    target_value: int
    current_value: int
    is_achieved: bool
    achieved_at: Optional[datetime] = None
    progress_ratio: float = Field(ge=0.0, le=1.0)
    progress_percentage: str = Field(description='Truncated percentage, e.g. "71%".')
    remaining_value: int
    is_almost_complete: bool
