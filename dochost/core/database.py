"""
Database configuration and session management
"""

from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool
import structlog

from dochost.core.config import get_settings

logger = structlog.get_logger(__name__)
settings = get_settings()


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {"pool_pre_ping": True}


engine = create_engine(
    settings.DATABASE_URL,
    echo=False,
    **_engine_kwargs(settings.DATABASE_URL),
)


def init_db():
    """Create database tables (development and tests; production uses Alembic)"""
    SQLModel.metadata.create_all(engine)
    logger.info("Database tables created")


def get_session():
    """Dependency to get database session"""
    with Session(engine) as session:
        yield session
