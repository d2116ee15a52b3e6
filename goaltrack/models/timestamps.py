from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlmodel import Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_field():
    """Timezone-aware column defaulting to the current UTC time"""
    return Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
