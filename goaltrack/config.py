from pydantic_settings import BaseSettings
from functools import lru_cache
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    API_V1_PREFIX: str = "/api/v1"
    DATABASE_URL: str = "sqlite:///./goaltrack.db"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Goal view aggregation
    GOAL_VIEW_CACHE_TTL_SECONDS: float = 30.0
    SPARKLINE_LIMIT: int = 14
    BODY_FAT_STALE_DAYS: int = 30
    BODY_METRICS_WINDOW_DAYS: int = 90
    TREND_STABLE_THRESHOLD: float = 0.5
    SYNTHETIC_BASELINE_FACTOR: float = 1.5

    # User notifications kept per user until read
    NOTIFICATION_QUEUE_SIZE: int = 20

    class Config:
        env_file = ".env"

@lru_cache()
def get_settings():
    return Settings()

settings = get_settings()
