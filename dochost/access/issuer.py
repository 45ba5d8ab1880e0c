"""
Subdomain password login
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Protocol, Tuple

import structlog

from dochost.access.gate import DEFAULT_COOKIE_PREFIX, session_cookie_name
from dochost.access.sessions import Clock, SessionStore, SubdomainSession, utcnow
from dochost.core.exceptions import AuthFailure
from dochost.core.security import generate_session_token, verify_password
from dochost.schemas.tenant import TenantRecord

logger = structlog.get_logger(__name__)

SESSION_TTL = timedelta(hours=24)


class LoginDirectory(Protocol):
    async def find_login_subject(self, label: str) -> Tuple[Optional[TenantRecord], Optional[str]]:
        ...


@dataclass(frozen=True)
class IssuedSession:
    token: str
    cookie_name: str
    session: SubdomainSession

    @property
    def expires_at(self) -> datetime:
        return self.session.expires_at


class CredentialIssuer:
    """Checks a subdomain password and records a new session"""

    def __init__(
        self,
        directory: LoginDirectory,
        store: SessionStore,
        clock: Clock = utcnow,
        ttl: timedelta = SESSION_TTL,
        cookie_prefix: str = DEFAULT_COOKIE_PREFIX,
    ):
        self.directory = directory
        self.store = store
        self.clock = clock
        self.ttl = ttl
        self.cookie_prefix = cookie_prefix

    async def login(self, label: str, password: str) -> IssuedSession:
        """Raise AuthFailure for an unknown subdomain, a tenant without a
        password, or a wrong password alike."""
        label = label.strip().lower()
        tenant, password_hash = await self.directory.find_login_subject(label)

        # verify_password runs a dummy hash when there is nothing to check
        if not verify_password(password, password_hash) or tenant is None:
            logger.info(f"Subdomain login failed for {label}")
            raise AuthFailure()

        session = SubdomainSession(
            tenant_id=tenant.id,
            subdomain=label,
            expires_at=self.clock() + self.ttl,
        )
        token = generate_session_token()
        await self.store.put(token, session)

        logger.info(f"Subdomain session issued for {label}")
        return IssuedSession(
            token=token,
            cookie_name=session_cookie_name(label, self.cookie_prefix),
            session=session,
        )
