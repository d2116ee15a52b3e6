from fastapi import APIRouter, Depends
from sqlmodel import Session
from typing import List

from goaltrack.database import get_session
from goaltrack.schemas.views import ChallengeGoalView, NotificationResponse
from goaltrack.services.aggregation import GoalAggregationService, notification_service
from goaltrack.services.sources import GoalDataSources

router = APIRouter(prefix="/users", tags=["goal-views"])

def get_aggregation_service(session: Session = Depends(get_session)) -> GoalAggregationService:
    return GoalAggregationService(GoalDataSources(session))

@router.get("/{user_id}/goal-views", response_model=List[ChallengeGoalView])
async def get_goal_views(
    user_id: int,
    aggregation: GoalAggregationService = Depends(get_aggregation_service)
) -> List[ChallengeGoalView]:
    """
    Get every goal of a user with current value, progress and trend.

    On an upstream failure the list is empty and a notification with a
    refresh action is queued for the user.
    """
    return aggregation.get_challenge_goal_views(user_id)

@router.post("/{user_id}/goal-views/refresh", response_model=List[ChallengeGoalView])
async def refresh_goal_views(
    user_id: int,
    aggregation: GoalAggregationService = Depends(get_aggregation_service)
) -> List[ChallengeGoalView]:
    """Recompute goal views, skipping the cache"""
    return aggregation.refresh(user_id)

@router.get("/{user_id}/notifications", response_model=List[NotificationResponse])
async def get_notifications(user_id: int) -> List[NotificationResponse]:
    """Get and clear the pending notifications of a user"""
    return [
        NotificationResponse(
            key=notification.key,
            message=notification.message,
            level=notification.level,
            created_at=notification.created_at,
            action=notification.action
        )
        for notification in notification_service.drain(user_id)
    ]
