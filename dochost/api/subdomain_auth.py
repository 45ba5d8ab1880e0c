"""
Subdomain password login and session lookup endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
import structlog

from dochost.access.gate import set_session_cookie
from dochost.access.issuer import CredentialIssuer
from dochost.access.sessions import Clock, SessionStore
from dochost.core.config import get_settings
from dochost.core.dependencies import get_clock, get_issuer, get_session_store, require_internal_key
from dochost.schemas.auth import SessionRecord, SubdomainLogin, SubdomainLoginResponse

logger = structlog.get_logger(__name__)
router = APIRouter()
settings = get_settings()


@router.post("/subdomain/login", response_model=SubdomainLoginResponse)
async def subdomain_login(
    login_data: SubdomainLogin,
    response: Response,
    issuer: CredentialIssuer = Depends(get_issuer)
):
    """Exchange the subdomain password for a session cookie"""
    issued = await issuer.login(login_data.subdomain, login_data.password)
    set_session_cookie(
        response,
        issued.cookie_name,
        issued.token,
        max_age=settings.SESSION_TTL_HOURS * 60 * 60,
        secure=settings.cookie_secure,
    )

    return SubdomainLoginResponse(
        token=issued.token,
        cookie_name=issued.cookie_name,
        expires_at=issued.expires_at,
    )


@router.get(
    "/subdomain/sessions/{token}",
    response_model=SessionRecord,
    dependencies=[Depends(require_internal_key)],
)
async def get_subdomain_session(
    token: str,
    store: SessionStore = Depends(get_session_store),
    clock: Clock = Depends(get_clock)
):
    """Session lookup for the site process"""
    session = await store.get(token)
    if session is None or session.is_expired(clock()):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found"
        )
    return SessionRecord(
        tenant_id=session.tenant_id,
        subdomain=session.subdomain,
        expires_at=session.expires_at,
    )
