from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import date, datetime
from goaltrack.models.timestamps import timestamp_field

class UnifiedMetric(SQLModel, table=True):
    """Normalized cross-device reading keyed by canonical metric name"""
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    metric_name: str = Field(index=True)  # e.g. "Recovery Score", "HRV RMSSD"
    value: float
    unit: str = ""
    source: str = "wearable"
    measurement_date: date

class BodyCompositionReading(SQLModel, table=True):
    """One scan, weigh-in or caliper entry; any of the three metrics may be missing"""
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    source: str  # inbody, withings, garmin, oura, whoop, manual
    measurement_date: date

    weight: Optional[float] = None  # kg
    body_fat: Optional[float] = None  # %
    muscle_mass: Optional[float] = None  # kg

class GoalCurrentValue(SQLModel, table=True):
    """Materialized latest value per goal, maintained by the sync jobs"""
    goal_id: int = Field(foreign_key="goal.id", primary_key=True)
    current_value: Optional[float] = None
    source: str = "manual"
    updated_at: datetime = timestamp_field()
