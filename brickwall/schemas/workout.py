from typing import Optional
from pydantic import BaseModel, Field, field_validator

from brickwall.models.workout import Difficulty, WorkoutType


class WorkoutCreate(BaseModel):
    name: str = Field(min_length=3, max_length=100)
    description: Optional[str] = None
    workout_type: WorkoutType
    difficulty: Difficulty
    estimated_duration: int = Field(gt=0, description="Minutes")

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        stripped = v.strip()
        if len(stripped) < 3:
            raise ValueError("name must contain at least 3 non-whitespace characters")
        return stripped
