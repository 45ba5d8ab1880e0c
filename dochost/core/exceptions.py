"""
Domain exceptions and their HTTP mapping
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
import structlog

logger = structlog.get_logger(__name__)


class DocHostError(Exception):
    """Base class for domain errors"""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class AuthFailure(DocHostError):
    """Wrong subdomain password, or no such subdomain. Deliberately indistinguishable."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid subdomain or password"


class TenantNotFound(DocHostError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Tenant not found"


class TenantConflict(DocHostError):
    """A custom domain, subdomain or name is already claimed by another tenant"""

    status_code = status.HTTP_409_CONFLICT
    message = "Already in use"


class DirectoryUnavailable(DocHostError):
    """The tenant directory could not be reached"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Tenant directory unavailable"


async def dochost_error_handler(request: Request, exc: DocHostError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DocHostError, dochost_error_handler)
