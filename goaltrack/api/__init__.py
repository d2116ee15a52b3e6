from fastapi import APIRouter
from goaltrack.api import goals, measurements, views

api_router = APIRouter()

# Include all routers
api_router.include_router(goals.router)
api_router.include_router(measurements.router)
api_router.include_router(views.router)
