"""
DocHost API - Main Application Entry Point
Private data API: tenants, pages, credentials and subdomain sessions
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import structlog

from dochost import __version__
from dochost.access.sessions import Clock, InMemorySessionStore, RedisSessionStore, SessionStore, utcnow
from dochost.api import credentials, pages, subdomain_auth, tenants
from dochost.core.config import Settings, get_settings
from dochost.core.database import init_db
from dochost.core.exceptions import register_exception_handlers
from dochost.core.logging import configure_logging

logger = structlog.get_logger(__name__)
settings = get_settings()


def build_session_store(settings: Settings, clock: Clock = utcnow) -> SessionStore:
    """Session store for the process that issues sessions"""
    if settings.SESSION_BACKEND == "redis":
        return RedisSessionStore.from_url(settings.REDIS_URL, clock=clock)
    if settings.SESSION_BACKEND != "memory":
        raise ValueError(f"Unsupported session backend for the api: {settings.SESSION_BACKEND}")
    return InMemorySessionStore(clock=clock, sweep_every=settings.SESSION_SWEEP_EVERY)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Initializing DocHost API")
    if settings.ENVIRONMENT == "development":
        init_db()
    else:
        logger.info("Database managed by Alembic migrations")

    yield

    logger.info("Shutting down DocHost API")


def create_app(session_store: Optional[SessionStore] = None, clock: Clock = utcnow) -> FastAPI:
    """Build the API application; tests inject their own store and clock"""
    configure_logging(settings.DEBUG)

    app = FastAPI(
        title="DocHost API",
        description="Multi-tenant documentation hosting data API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.clock = clock
    app.state.session_store = session_store or build_session_store(settings, clock)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    prefix = settings.API_PREFIX
    app.include_router(tenants.router, prefix=prefix, tags=["tenants"])
    app.include_router(subdomain_auth.router, prefix=prefix, tags=["subdomain-auth"])
    app.include_router(pages.router, prefix=f"{prefix}/pages", tags=["pages"])
    app.include_router(credentials.router, prefix=f"{prefix}/credentials", tags=["credentials"])

    @app.get(f"{prefix}/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": "dochost-api",
            "version": __version__,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "dochost.main:app",
        host="0.0.0.0",
        port=3001,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
