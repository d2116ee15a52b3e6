from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session
from typing import List

from goaltrack.database import get_session
from goaltrack.errors import GoalNotFoundError
from goaltrack.schemas.goal import GoalCreate, GoalUpdate, GoalResponse
from goaltrack.schemas.measurement import MeasurementCreate, MeasurementResponse, MeasurementWriteResult
from goaltrack.services.goals import GoalService

router = APIRouter(prefix="/goals", tags=["goals"])

def get_goal_service(session: Session = Depends(get_session)) -> GoalService:
    return GoalService(session)

@router.get("/", response_model=List[GoalResponse])
async def list_goals(
    user_id: int = Query(..., description="Owner of the goals"),
    goal_service: GoalService = Depends(get_goal_service)
):
    """Get all goals of a user, newest first"""
    return goal_service.list_goals(user_id)

@router.post("/", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal: GoalCreate,
    goal_service: GoalService = Depends(get_goal_service)
):
    """Create a goal; direction and category are inferred from the name unless given"""
    return goal_service.create_goal(goal)

@router.get("/{goal_id}", response_model=GoalResponse)
async def get_goal(
    goal_id: int,
    goal_service: GoalService = Depends(get_goal_service)
):
    try:
        return goal_service.get_goal(goal_id)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.patch("/{goal_id}", response_model=GoalResponse)
async def update_goal(
    goal_id: int,
    goal: GoalUpdate,
    goal_service: GoalService = Depends(get_goal_service)
):
    try:
        return goal_service.update_goal(goal_id, goal)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.delete("/{goal_id}")
async def delete_goal(
    goal_id: int,
    goal_service: GoalService = Depends(get_goal_service)
):
    """Delete a goal and all of its measurements"""
    try:
        goal_service.delete_goal(goal_id)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": f"Goal {goal_id} deleted successfully"}

@router.get("/{goal_id}/measurements", response_model=List[MeasurementResponse])
async def list_measurements(
    goal_id: int,
    goal_service: GoalService = Depends(get_goal_service)
):
    """Get all measurements of a goal, newest first"""
    try:
        return goal_service.list_measurements(goal_id)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

@router.post("/{goal_id}/measurements", response_model=MeasurementWriteResult)
async def record_measurement(
    goal_id: int,
    measurement: MeasurementCreate,
    goal_service: GoalService = Depends(get_goal_service)
) -> MeasurementWriteResult:
    """
    Record the value of a goal for a day.

    A second value for the same day replaces the first; the old value is
    returned as replaced_value so the client can confirm the overwrite.
    """
    try:
        stored, replaced_value = goal_service.record_measurement(goal_id, measurement)
    except GoalNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MeasurementWriteResult(
        measurement=MeasurementResponse.model_validate(stored),
        replaced_value=replaced_value
    )
