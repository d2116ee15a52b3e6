from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from goaltrack.models.goal import GoalType, GoalDirection, GoalCategory

class GoalBase(BaseModel):
    name: str = Field(min_length=1)
    type: GoalType = GoalType.CUSTOM
    target_value: Optional[float] = None
    target_unit: str = ""
    target_reps: Optional[int] = None
    baseline_value: Optional[float] = None
    is_personal: bool = True
    challenge_id: Optional[int] = None

class GoalCreate(GoalBase):
    user_id: int
    # Left empty, both are inferred from the name and unit
    direction: Optional[GoalDirection] = None
    category: Optional[GoalCategory] = None

class GoalUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[GoalType] = None
    target_value: Optional[float] = None
    target_unit: Optional[str] = None
    target_reps: Optional[int] = None
    baseline_value: Optional[float] = None
    is_personal: Optional[bool] = None
    challenge_id: Optional[int] = None
    direction: Optional[GoalDirection] = None
    category: Optional[GoalCategory] = None

class GoalResponse(GoalBase):
    id: int
    user_id: int
    direction: GoalDirection
    category: GoalCategory
    metric_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
