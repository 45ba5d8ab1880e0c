"""
Per-request access decision for password-protected tenants
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Optional
from urllib.parse import urlencode

from starlette.responses import Response
import structlog

from dochost.access.resolver import ResolvedContext
from dochost.access.sessions import Clock, SessionReader, utcnow

logger = structlog.get_logger(__name__)

DEFAULT_COOKIE_PREFIX = "subdomain_auth_"
DEFAULT_LOGIN_PATH = "/subdomain-login"
DEFAULT_COOKIE_MAX_AGE = 24 * 60 * 60

# API and static assets never go through tenant resolution
EXEMPT_PREFIXES = ("/api/", "/css/", "/js/", "/images/", "/uploads/")
EXEMPT_PATHS = ("/health", "/favicon.ico")


class Verdict(str, Enum):
    ALLOW = "allow"
    CHALLENGE = "challenge"
    EXEMPT = "exempt"


@dataclass(frozen=True)
class GateDecision:
    verdict: Verdict
    redirect_to: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.verdict is not Verdict.CHALLENGE


ALLOW = GateDecision(Verdict.ALLOW)
EXEMPT = GateDecision(Verdict.EXEMPT)


def session_cookie_name(label: str, prefix: str = DEFAULT_COOKIE_PREFIX) -> str:
    """Cookie carrying the session for one subdomain"""
    return f"{prefix}{label}"


def set_session_cookie(
    response: Response,
    cookie_name: str,
    token: str,
    max_age: int = DEFAULT_COOKIE_MAX_AGE,
    secure: bool = False,
) -> None:
    """HttpOnly, SameSite=Lax, site-wide session cookie"""
    response.set_cookie(
        key=cookie_name,
        value=token,
        max_age=max_age,
        httponly=True,
        secure=secure,
        samesite="lax",
        path="/",
    )


class AccessGate:
    """Decides ALLOW / CHALLENGE / EXEMPT for a resolved request

    Rules, first match wins:
      1. exempt path (API, static assets, login page)  -> EXEMPT
      2. no tenant                                      -> ALLOW
      3. tenant without a subdomain password            -> ALLOW
      4. no session cookie for the tenant's label       -> CHALLENGE
      5. session valid for this tenant and unexpired    -> ALLOW, else CHALLENGE

    Nothing is cached between calls.
    """

    def __init__(
        self,
        store: SessionReader,
        clock: Clock = utcnow,
        login_path: str = DEFAULT_LOGIN_PATH,
        cookie_prefix: str = DEFAULT_COOKIE_PREFIX,
        exempt_prefixes: Iterable[str] = EXEMPT_PREFIXES,
        exempt_paths: Iterable[str] = EXEMPT_PATHS,
    ):
        self.store = store
        self.clock = clock
        self.login_path = login_path
        self.cookie_prefix = cookie_prefix
        self.exempt_prefixes = tuple(exempt_prefixes)
        self.exempt_paths = frozenset(exempt_paths) | {login_path}

    def is_exempt(self, path: str) -> bool:
        """Exempt paths are decided before, and without, tenant resolution"""
        return path in self.exempt_paths or path.startswith(self.exempt_prefixes)

    def login_redirect(self, label: Optional[str]) -> str:
        if not label:
            return self.login_path
        return f"{self.login_path}?{urlencode({'subdomain': label})}"

    async def decide(self, path: str, context: ResolvedContext, cookies: Mapping[str, str]) -> GateDecision:
        if self.is_exempt(path):
            return EXEMPT

        tenant = context.tenant
        if tenant is None:
            return ALLOW

        if not tenant.password_protected:
            return ALLOW

        label = tenant.subdomain
        challenge = GateDecision(Verdict.CHALLENGE, self.login_redirect(label))
        if not label:
            # Password set but no subdomain to log in against
            return challenge

        token = cookies.get(session_cookie_name(label, self.cookie_prefix))
        if not token:
            return challenge

        session = await self.store.get(token)
        if session is None or not session.authorizes(tenant.id, self.clock()):
            logger.info(f"Rejected subdomain session for {label}")
            return challenge

        return ALLOW
