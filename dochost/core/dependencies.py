"""
Authentication and service dependencies for FastAPI
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader
from sqlmodel import Session, select
from datetime import timedelta
from typing import Optional
import structlog

from dochost.access.directory import SqlTenantDirectory
from dochost.access.issuer import CredentialIssuer
from dochost.access.sessions import Clock, SessionStore
from dochost.core.config import get_settings
from dochost.core.database import get_session
from dochost.core.security import keys_match
from dochost.models.tenant import Tenant

logger = structlog.get_logger(__name__)
settings = get_settings()

api_key_header = APIKeyHeader(name=settings.API_KEY_HEADER, auto_error=False)
internal_key_header = APIKeyHeader(name=settings.INTERNAL_KEY_HEADER, auto_error=False)


async def get_current_tenant(
    api_key: Optional[str] = Depends(api_key_header),
    session: Session = Depends(get_session)
) -> Tenant:
    """Tenant owning the X-API-Key header"""
    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key required",
        )

    tenant = session.exec(select(Tenant).where(Tenant.api_key == api_key)).first()
    if tenant is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )
    return tenant


async def require_internal_key(internal_key: Optional[str] = Depends(internal_key_header)) -> None:
    """Guard for endpoints only the site process may call"""
    if not keys_match(internal_key, settings.INTERNAL_API_KEY):
        logger.warning("Rejected internal endpoint call with bad key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Internal access only",
        )


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_directory(session: Session = Depends(get_session)) -> SqlTenantDirectory:
    return SqlTenantDirectory(session)


def get_issuer(
    directory: SqlTenantDirectory = Depends(get_directory),
    store: SessionStore = Depends(get_session_store),
    clock: Clock = Depends(get_clock),
) -> CredentialIssuer:
    return CredentialIssuer(
        directory,
        store,
        clock=clock,
        ttl=timedelta(hours=settings.SESSION_TTL_HOURS),
        cookie_prefix=settings.SESSION_COOKIE_PREFIX,
    )
