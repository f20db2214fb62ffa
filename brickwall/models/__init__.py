from .user import User
from .workout import Workout
from .workout_session import WorkoutSession
from .behavior_state import BehaviorState
from .brick import Brick
from .milestone import Milestone
from .wellness_log import WellnessLog

__all__ = [
    "User",
    "Workout",
    "WorkoutSession",
    "BehaviorState",
    "Brick",
    "Milestone",
    "WellnessLog",
]
