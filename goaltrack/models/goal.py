from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum as PyEnum
from goaltrack.models.timestamps import timestamp_field

class GoalType(str, PyEnum):
    STRENGTH = "strength"
    CARDIO = "cardio"
    ENDURANCE = "endurance"
    BODY_COMPOSITION = "body_composition"
    FLEXIBILITY = "flexibility"
    CUSTOM = "custom"

class GoalDirection(str, PyEnum):
    HIGHER_IS_BETTER = "higher_is_better"
    LOWER_IS_BETTER = "lower_is_better"

class GoalCategory(str, PyEnum):
    WEIGHT = "weight"
    BODY_FAT = "body_fat"
    MUSCLE_MASS = "muscle_mass"
    WEARABLE_METRIC = "wearable_metric"
    GENERIC = "generic"

class Goal(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)

    # Goal details
    name: str
    type: GoalType = Field(default=GoalType.CUSTOM)
    target_value: Optional[float] = None  # None means the goal is not set yet
    target_unit: str = ""
    target_reps: Optional[int] = None
    baseline_value: Optional[float] = None  # overrides the derived baseline when set

    # Scope
    is_personal: bool = True
    challenge_id: Optional[int] = Field(default=None, foreign_key="challenge.id", index=True)

    # Classification, assigned once when the goal is written
    direction: GoalDirection = Field(default=GoalDirection.HIGHER_IS_BETTER)
    category: GoalCategory = Field(default=GoalCategory.GENERIC)
    metric_name: Optional[str] = None  # canonical unified metric name for wearable goals

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()

    @property
    def is_lower_better(self) -> bool:
        return self.direction == GoalDirection.LOWER_IS_BETTER

    @property
    def has_target(self) -> bool:
        return self.target_value is not None
