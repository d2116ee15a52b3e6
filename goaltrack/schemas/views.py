from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import date, datetime
from enum import Enum

from goaltrack.models.goal import GoalType, GoalDirection, GoalCategory

class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"

class SparklinePoint(BaseModel):
    value: float
    measurement_date: date

class CompetingObservation(BaseModel):
    """A reading from one source that competed for the resolved value"""
    source: str
    value: float
    label: str
    measurement_date: Optional[date] = None

class SourceReading(BaseModel):
    value: float
    measurement_date: date

class AggregatedBodyMetric(BaseModel):
    value: float
    source: str
    measurement_date: date
    confidence: int
    sparkline: List[SparklinePoint] = Field(default_factory=list)  # newest first
    sources: Dict[str, SourceReading] = Field(default_factory=dict)  # latest reading per source

class BodyMetrics(BaseModel):
    weight: Optional[AggregatedBodyMetric] = None
    body_fat: Optional[AggregatedBodyMetric] = None
    muscle_mass: Optional[AggregatedBodyMetric] = None

class ChallengeGoalView(BaseModel):
    """Fully computed goal card; nothing downstream recalculates these numbers"""
    id: int
    name: str
    type: GoalType
    target_value: Optional[float] = None
    target_unit: str
    target_reps: Optional[int] = None
    direction: GoalDirection
    category: GoalCategory

    current_value: float
    progress_percentage: Optional[float] = None
    trend: Trend = Trend.STABLE
    trend_percentage: float = 0.0
    is_improving: bool = False

    is_personal: bool
    challenge_id: Optional[int] = None
    challenge_title: Optional[str] = None

    measurements: List[SparklinePoint] = Field(default_factory=list)
    source: str = "manual"
    baseline_value: Optional[float] = None
    sub_sources: List[CompetingObservation] = Field(default_factory=list)

    has_target: bool
    has_data: bool

class NotificationResponse(BaseModel):
    key: str
    message: str
    level: str
    created_at: datetime
    action: Optional[str] = None
