from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime, UniqueConstraint
from typing import Optional
from datetime import date, datetime
from goaltrack.models.timestamps import timestamp_field

class Challenge(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None

class ChallengeParticipation(SQLModel, table=True):
    """Links a user to a challenge and keeps the body snapshot taken when they joined"""
    __table_args__ = (
        UniqueConstraint("challenge_id", "user_id", name="uq_participation_challenge_user"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    challenge_id: int = Field(foreign_key="challenge.id", index=True)
    user_id: int = Field(index=True)

    # Baseline snapshot
    baseline_weight: Optional[float] = None  # kg
    baseline_body_fat: Optional[float] = None  # %
    baseline_muscle_mass: Optional[float] = None  # kg
    baseline_recorded_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    joined_at: datetime = timestamp_field()
