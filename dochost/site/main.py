"""
DocHost Site - public entry point

Every request passes the domain resolver and access gate before any route.
Sessions are issued by the api process; this process either shares its Redis
store or looks sessions up through the api, never keeping its own.
"""

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from contextlib import asynccontextmanager
from pydantic import BaseModel, Field
from typing import Optional
import httpx
import structlog

from dochost import __version__
from dochost.access.directory import HttpTenantDirectory, TenantDirectory
from dochost.access.gate import AccessGate, set_session_cookie
from dochost.access.middleware import SubdomainAccessMiddleware
from dochost.access.resolver import NO_TENANT, DomainResolver
from dochost.access.sessions import Clock, RedisSessionStore, RemoteSessionStore, SessionReader, utcnow
from dochost.core.config import get_settings
from dochost.core.exceptions import register_exception_handlers
from dochost.core.logging import configure_logging
from dochost.schemas.tenant import SUBDOMAIN_RE
from dochost.site.api_client import ApiClient
from dochost.site.login_page import render_login_form

logger = structlog.get_logger(__name__)
settings = get_settings()


class LoginForm(BaseModel):
    subdomain: str = Field(..., min_length=1, max_length=63)
    password: str = Field(..., min_length=1, max_length=128)


def _tenant_or_404(request: Request):
    tenant = getattr(request.state, "tenant_context", NO_TENANT).tenant
    if tenant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No documentation site for this host"
        )
    return tenant


def create_app(
    http_client: Optional[httpx.AsyncClient] = None,
    directory: Optional[TenantDirectory] = None,
    session_store: Optional[SessionReader] = None,
    clock: Clock = utcnow,
) -> FastAPI:
    """Build the site application. The http client talks to the data API."""
    configure_logging(settings.DEBUG)

    client = http_client or httpx.AsyncClient(
        base_url=settings.API_BASE_URL,
        timeout=settings.DIRECTORY_TIMEOUT_SECONDS,
    )
    directory = directory or HttpTenantDirectory(
        client, settings.INTERNAL_API_KEY, settings.INTERNAL_KEY_HEADER
    )
    if session_store is None:
        if settings.SESSION_BACKEND == "redis":
            session_store = RedisSessionStore.from_url(settings.REDIS_URL, clock=clock)
        else:
            session_store = RemoteSessionStore(
                client, settings.INTERNAL_API_KEY, settings.INTERNAL_KEY_HEADER, clock=clock
            )
    api = ApiClient(client, settings.API_KEY_HEADER)

    resolver = DomainResolver(directory, settings.PLATFORM_DOMAIN, fail_open=settings.DIRECTORY_FAIL_OPEN)
    gate = AccessGate(
        session_store,
        clock=clock,
        login_path=settings.LOGIN_PATH,
        cookie_prefix=settings.SESSION_COOKIE_PREFIX,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Initializing DocHost site")
        yield
        await client.aclose()
        logger.info("Shutting down DocHost site")

    app = FastAPI(
        title="DocHost Site",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
    )
    app.state.resolver = resolver
    app.state.gate = gate
    app.add_middleware(SubdomainAccessMiddleware, resolver=resolver, gate=gate)
    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": "dochost-site"}

    @app.get("/")
    async def home(request: Request):
        """Tenant landing summary, or the platform landing"""
        context = request.state.tenant_context
        if context.tenant is None:
            return {"message": "DocHost - documentation hosting", "version": __version__}
        tenant = context.tenant
        return {
            "name": tenant.name,
            "binding": context.mode.value,
            "domain_settings": tenant.domain_settings,
            "docs": "/docs",
        }

    @app.get("/docs")
    async def list_docs(request: Request, category: Optional[str] = Query(None)):
        tenant = _tenant_or_404(request)
        pages = await api.list_pages(tenant.api_key)
        categories = sorted({p["category"] for p in pages})
        if category:
            pages = [p for p in pages if p["category"] == category]
        return {
            "tenant": tenant.name,
            "categories": categories,
            "selected_category": category,
            "pages": [
                {k: p[k] for k in ("title", "slug", "category", "tags", "weight", "updated_at")}
                for p in pages
            ],
        }

    @app.get("/docs/{category}/{slug}")
    async def get_doc(request: Request, category: str, slug: str):
        tenant = _tenant_or_404(request)
        pages = await api.list_pages(tenant.api_key, category=category)
        page = next((p for p in pages if p["slug"] == slug), None)
        if page is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Page not found"
            )
        return page

    @app.get(settings.LOGIN_PATH, response_class=HTMLResponse)
    async def login_page(request: Request, subdomain: Optional[str] = Query(None)):
        if not subdomain:
            tenant = getattr(request.state, "tenant_context", NO_TENANT).tenant
            if tenant is not None and tenant.password_protected and not tenant.subdomain:
                return HTMLResponse(
                    "<p>This site is password protected but has no subdomain to sign in with.</p>",
                    status_code=status.HTTP_403_FORBIDDEN,
                )
            subdomain = tenant.subdomain if tenant is not None else None
        if not subdomain or not SUBDOMAIN_RE.match(subdomain.lower()):
            return RedirectResponse("/", status_code=status.HTTP_302_FOUND)
        return HTMLResponse(render_login_form(subdomain.lower()))

    @app.post("/api/subdomain/login")
    async def subdomain_login(form: LoginForm):
        """Forward the password to the issuer and set the cookie on this host"""
        upstream = await api.login(form.subdomain, form.password)
        if upstream.status_code == status.HTTP_401_UNAUTHORIZED:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"error": "Invalid subdomain or password"},
            )
        if upstream.status_code != status.HTTP_200_OK:
            logger.error(f"Subdomain login forward returned {upstream.status_code}")
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content={"error": "Login failed"},
            )

        issued = upstream.json()
        response = JSONResponse({
            "success": True,
            "redirect_url": issued["redirect_url"],
            "expires_at": issued["expires_at"],
        })
        set_session_cookie(
            response,
            issued["cookie_name"],
            issued["token"],
            max_age=settings.SESSION_TTL_HOURS * 60 * 60,
            secure=settings.cookie_secure,
        )
        return response

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "dochost.site.main:app",
        host="0.0.0.0",
        port=3000,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
