import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from goaltrack.api import api_router
from goaltrack.config import settings
from goaltrack.database import create_db_and_tables

def configure_logging():
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )

configure_logging()

app = FastAPI(
    title="GoalTrack",
    description="Goal progress aggregation for trainers and their clients",
    version="1.0.0",
)

# CORS middleware configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(api_router, prefix=settings.API_V1_PREFIX)

@app.on_event("startup")
async def on_startup():
    create_db_and_tables()

@app.get("/")
async def root():
    return {"message": "Welcome to GoalTrack API"}
