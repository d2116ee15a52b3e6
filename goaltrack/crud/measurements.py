import logging
from sqlmodel import Session, select, col
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Sequence, Tuple
from datetime import date

from goaltrack.models.measurement import Measurement, MeasurementSource
from goaltrack.models.timestamps import utc_now

logger = logging.getLogger(__name__)

def get_measurement(session: Session, measurement_id: int) -> Optional[Measurement]:
    """Get a measurement by ID"""
    return session.get(Measurement, measurement_id)

def _find_for_day(session: Session, goal_id: int, measurement_date: date) -> Optional[Measurement]:
    return session.exec(
        select(Measurement).where(
            Measurement.goal_id == goal_id,
            Measurement.measurement_date == measurement_date
        )
    ).first()

def insert_or_replace(
    session: Session,
    goal_id: int,
    user_id: int,
    measurement_date: date,
    value: float,
    unit: str = "",
    source: str = MeasurementSource.MANUAL.value,
    notes: Optional[str] = None,
    photo_url: Optional[str] = None,
    reps: Optional[int] = None
) -> Tuple[Measurement, Optional[float]]:
    """
    Write the measurement for a goal and day, replacing any earlier one.

    Returns the stored row and the value it replaced (None for a fresh day).
    """
    fields = dict(
        user_id=user_id,
        value=value,
        unit=unit,
        source=source,
        notes=notes,
        photo_url=photo_url,
        reps=reps,
    )

    retried = False
    while True:
        existing = _find_for_day(session, goal_id, measurement_date)
        replaced_value = existing.value if existing else None

        if existing:
            for key, field_value in fields.items():
                setattr(existing, key, field_value)
            existing.updated_at = utc_now()
            db_measurement = existing
        else:
            db_measurement = Measurement(goal_id=goal_id, measurement_date=measurement_date, **fields)

        session.add(db_measurement)
        try:
            session.commit()
        except IntegrityError:
            # Another writer inserted the same goal+day between our read and commit
            session.rollback()
            if retried:
                raise
            retried = True
            logger.info(f"Concurrent write for goal {goal_id} on {measurement_date}, retrying as update")
            continue

        session.refresh(db_measurement)
        if replaced_value is not None:
            logger.info(
                f"Replaced measurement for goal {goal_id} on {measurement_date}: "
                f"{replaced_value} -> {db_measurement.value}"
            )
        return db_measurement, replaced_value

def query(session: Session, user_id: int, goal_ids: Sequence[int]) -> List[Measurement]:
    """Get all measurements of a user for a set of goals, newest first"""
    if not goal_ids:
        return []

    statement = select(Measurement).where(
        Measurement.user_id == user_id,
        col(Measurement.goal_id).in_(list(goal_ids))
    ).order_by(Measurement.measurement_date.desc())
    return list(session.exec(statement).all())

def query_by_goal(session: Session, goal_id: int, user_id: int) -> List[Measurement]:
    """Get all measurements of a goal, newest first"""
    statement = select(Measurement).where(
        Measurement.goal_id == goal_id,
        Measurement.user_id == user_id
    ).order_by(Measurement.measurement_date.desc())
    return list(session.exec(statement).all())

def delete_measurement(session: Session, measurement_id: int) -> bool:
    """Delete a measurement"""
    db_measurement = session.get(Measurement, measurement_id)
    if not db_measurement:
        return False

    session.delete(db_measurement)
    session.commit()
    return True
