"""
Domain resolution + subdomain access gate as one middleware
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable
import structlog

from dochost.access.gate import AccessGate, Verdict
from dochost.access.resolver import NO_TENANT, DomainResolver
from dochost.core.exceptions import DirectoryUnavailable

logger = structlog.get_logger(__name__)


class SubdomainAccessMiddleware(BaseHTTPMiddleware):
    """Resolve the tenant for the Host header, then run the access gate

    The resolved context is stored on request.state.tenant_context for
    the route handlers.
    """

    def __init__(self, app, resolver: DomainResolver, gate: AccessGate):
        super().__init__(app)
        self.resolver = resolver
        self.gate = gate

    async def _resolve_login_host(self, host):
        """Best-effort lookup for the login page, which must stay reachable"""
        try:
            return await self.resolver.resolve(host)
        except DirectoryUnavailable:
            logger.warning(f"Directory unavailable, serving login page for {host} without a tenant")
            return NO_TENANT

    async def dispatch(self, request: Request, call_next: Callable):
        path = request.url.path
        host = request.headers.get("host")

        if self.gate.is_exempt(path):
            context = NO_TENANT
            if path == self.gate.login_path:
                context = await self._resolve_login_host(host)
            request.state.tenant_context = context
            return await call_next(request)

        try:
            context = await self.resolver.resolve(host)
        except DirectoryUnavailable as e:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"error": e.message},
            )
        request.state.tenant_context = context

        decision = await self.gate.decide(path, context, request.cookies)
        if decision.verdict is Verdict.CHALLENGE:
            logger.debug(f"Access challenge for {path}, redirecting to {decision.redirect_to}")
            return RedirectResponse(decision.redirect_to, status_code=status.HTTP_302_FOUND)

        return await call_next(request)
