import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session
from goaltrack.config import settings

logger = logging.getLogger(__name__)

def build_engine(database_url: Optional[str] = None, **kwargs) -> Engine:
    """Create an engine for a database URL, DATABASE_URL by default"""
    database_url = database_url or settings.DATABASE_URL
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, echo=settings.DEBUG, connect_args=connect_args, **kwargs)

engine = build_engine()

def create_db_and_tables(bind: Optional[Engine] = None):
    # Import all models so their tables are registered on the metadata
    from goaltrack import models  # noqa: F401
    bind = bind or engine
    SQLModel.metadata.create_all(bind)
    logger.info(f"Goal tracking tables ready on {bind.url}")

def get_session():
    with Session(engine) as session:
        yield session
