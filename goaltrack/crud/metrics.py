from sqlmodel import Session, select, col
from typing import List, Optional, Sequence
from datetime import date

from goaltrack.models.metrics import UnifiedMetric, BodyCompositionReading, GoalCurrentValue

def unified_metric_history(session: Session, user_id: int) -> List[UnifiedMetric]:
    """Get every unified metric reading of a user, newest first"""
    query = select(UnifiedMetric).where(
        UnifiedMetric.user_id == user_id
    ).order_by(UnifiedMetric.measurement_date.desc(), UnifiedMetric.id.desc())
    return list(session.exec(query).all())

def body_composition_readings(
    session: Session,
    user_id: int,
    since: Optional[date] = None
) -> List[BodyCompositionReading]:
    """Get body composition readings from all sources, newest first"""
    query = select(BodyCompositionReading).where(BodyCompositionReading.user_id == user_id)

    if since:
        query = query.where(BodyCompositionReading.measurement_date >= since)

    query = query.order_by(BodyCompositionReading.measurement_date.desc(), BodyCompositionReading.id.desc())
    return list(session.exec(query).all())

def current_value_lookup(session: Session, goal_ids: Sequence[int]) -> List[GoalCurrentValue]:
    """Get the materialized current values for a set of goals"""
    if not goal_ids:
        return []

    query = select(GoalCurrentValue).where(col(GoalCurrentValue.goal_id).in_(list(goal_ids)))
    return list(session.exec(query).all())
