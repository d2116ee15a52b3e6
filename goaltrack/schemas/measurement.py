from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

from goaltrack.models.measurement import MeasurementSource

class MeasurementCreate(BaseModel):
    value: float
    unit: str = ""
    measurement_date: date = Field(default_factory=date.today)
    source: str = MeasurementSource.MANUAL.value
    reps: Optional[int] = None
    notes: Optional[str] = None
    photo_url: Optional[str] = None

class MeasurementResponse(BaseModel):
    id: int
    goal_id: int
    user_id: int
    value: float
    unit: str
    measurement_date: date
    source: str
    reps: Optional[int] = None
    notes: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class MeasurementWriteResult(BaseModel):
    """Outcome of an upsert; replaced_value is set when an earlier entry for the same day was overwritten"""
    measurement: MeasurementResponse
    replaced_value: Optional[float] = None
