from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import date, datetime
from goaltrack.models.timestamps import timestamp_field
from enum import Enum

class MeasurementSource(str, Enum):
    MANUAL = "manual"
    INBODY = "inbody"
    WITHINGS = "withings"
    WEARABLE = "wearable"
    GARMIN = "garmin"
    OURA = "oura"
    WHOOP = "whoop"

class Measurement(SQLModel, table=True):
    """A single observation for a goal; at most one row per goal per day"""
    __table_args__ = (
        UniqueConstraint("goal_id", "measurement_date", name="uq_measurement_goal_date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    goal_id: int = Field(foreign_key="goal.id", index=True)
    user_id: int = Field(index=True)

    value: float
    unit: str = ""
    measurement_date: date
    source: str = Field(default=MeasurementSource.MANUAL.value)  # open vocabulary, see MeasurementSource

    # Optional details
    reps: Optional[int] = None
    notes: Optional[str] = None
    photo_url: Optional[str] = None

    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field()
