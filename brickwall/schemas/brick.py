from pydantic import BaseModel


class BrickStats(BaseModel):
    """Brick wall summary for one user."""
    total_bricks: int
    bricks_this_week: int
    bricks_this_month: int
    current_streak: int
    longest_streak: int
