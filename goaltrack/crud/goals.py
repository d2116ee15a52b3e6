from sqlmodel import Session, select, or_, col
from typing import Any, Dict, List, Optional, Sequence, Tuple

from goaltrack.models.goal import Goal
from goaltrack.models.challenge import Challenge, ChallengeParticipation
from goaltrack.models.measurement import Measurement
from goaltrack.models.metrics import GoalCurrentValue
from goaltrack.models.timestamps import utc_now

def get_goal(session: Session, goal_id: int) -> Optional[Goal]:
    """Get a goal by ID"""
    return session.get(Goal, goal_id)

def list_goals(
    session: Session,
    user_id: int,
    challenge_ids: Optional[Sequence[int]] = None
) -> List[Goal]:
    """
    Get a user's goals, newest first.

    With challenge_ids given, only personal goals and goals of those
    challenges are returned.
    """
    query = select(Goal).where(Goal.user_id == user_id)

    if challenge_ids is not None:
        if challenge_ids:
            query = query.where(or_(Goal.is_personal == True, col(Goal.challenge_id).in_(challenge_ids)))  # noqa: E712
        else:
            query = query.where(Goal.is_personal == True)  # noqa: E712

    query = query.order_by(Goal.created_at.desc(), Goal.id.desc())
    return list(session.exec(query).all())

def create_goal(session: Session, values: Dict[str, Any]) -> Goal:
    """Create a new goal"""
    db_goal = Goal(**values)
    session.add(db_goal)
    session.commit()
    session.refresh(db_goal)
    return db_goal

def update_goal(session: Session, goal_id: int, patch: Dict[str, Any]) -> Optional[Goal]:
    """Update a goal"""
    db_goal = session.get(Goal, goal_id)
    if not db_goal:
        return None

    for key, value in patch.items():
        setattr(db_goal, key, value)
    db_goal.updated_at = utc_now()

    session.add(db_goal)
    session.commit()
    session.refresh(db_goal)
    return db_goal

def delete_goal(session: Session, goal_id: int) -> bool:
    """Delete a goal together with its measurements and current value record"""
    db_goal = session.get(Goal, goal_id)
    if not db_goal:
        return False

    for measurement in session.exec(select(Measurement).where(Measurement.goal_id == goal_id)).all():
        session.delete(measurement)
    current_value = session.get(GoalCurrentValue, goal_id)
    if current_value:
        session.delete(current_value)

    session.delete(db_goal)
    session.commit()
    return True

def list_participations(
    session: Session,
    user_id: int
) -> List[Tuple[ChallengeParticipation, Challenge]]:
    """Get a user's challenge participations with the challenge they belong to"""
    query = select(ChallengeParticipation, Challenge).where(
        ChallengeParticipation.user_id == user_id,
        ChallengeParticipation.challenge_id == Challenge.id
    ).order_by(ChallengeParticipation.joined_at)
    return [(participation, challenge) for participation, challenge in session.exec(query).all()]
