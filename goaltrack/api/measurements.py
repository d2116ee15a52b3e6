from fastapi import APIRouter, Depends, HTTPException

from goaltrack.api.goals import get_goal_service
from goaltrack.errors import MeasurementNotFoundError
from goaltrack.services.goals import GoalService

router = APIRouter(prefix="/measurements", tags=["measurements"])

@router.delete("/{measurement_id}")
async def delete_measurement(
    measurement_id: int,
    goal_service: GoalService = Depends(get_goal_service)
):
    """Delete a measurement"""
    try:
        goal_service.delete_measurement(measurement_id)
    except MeasurementNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": f"Measurement {measurement_id} deleted successfully"}
