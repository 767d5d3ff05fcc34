"""Domain exceptions and the handlers that turn them into JSON responses.

Every error body carries the request_id so a failing call can be matched
with its log lines.
"""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.funnelhub.core.logging import get_logger

logger = get_logger(__name__)


class TenantBackendError(Exception):
    """A tenant's REST backend rejected a request or could not be reached."""

    def __init__(
        self,
        tenant_slug: str,
        message: str,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.tenant_slug = tenant_slug
        self.message = message
        self.status_code = status_code
        self.details = details


class GeoLookupError(Exception):
    """Country lookup failed. Never reaches a response; callers fall back."""


class GenerationError(Exception):
    """The AI gateway failed; status_code is what the caller should see."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_response(status_code: int, detail: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "request_id": correlation_id.get(),
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail)

    @app.exception_handler(TenantBackendError)
    async def tenant_backend_handler(request: Request, exc: TenantBackendError) -> JSONResponse:
        logger.warning(
            "Tenant backend error",
            tenant=exc.tenant_slug,
            upstream_status=exc.status_code,
            error=exc.message,
            path=request.url.path,
        )
        return _error_response(
            status.HTTP_502_BAD_GATEWAY,
            f"Tenant '{exc.tenant_slug}' backend error: {exc.message}",
        )

    @app.exception_handler(GenerationError)
    async def generation_handler(request: Request, exc: GenerationError) -> JSONResponse:
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=correlation_id.get(),
            path=request.url.path,
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
