"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.funnelhub.core.config import Settings
from src.funnelhub.core.rate_limit import global_rate_limit_middleware

from .audit_context import audit_context_middleware
from .logging_context import logging_context_middleware

__all__ = [
    "setup_middlewares",
    "audit_context_middleware",
    "logging_context_middleware",
    "global_rate_limit_middleware",
]

# Headers the Supabase JS client and the admin UI send
CORS_ALLOW_HEADERS = [
    "Authorization",
    "Content-Type",
    "X-Client-Info",
    "apikey",
    "X-Admin-Key",
    "X-Request-ID",
    "X-Metrics-Key",
]


def setup_middlewares(app: FastAPI, settings: Settings) -> None:
    """Configure all application middlewares.

    Starlette runs the last-added middleware first, so the request passes
    correlation id, CORS, rate limit, logging context and audit context in
    that order.
    """

    @app.middleware("http")
    async def _audit_context(request, call_next):  # type: ignore[no-untyped-def]
        return await audit_context_middleware(request, call_next)

    @app.middleware("http")
    async def _logging_context(request, call_next):  # type: ignore[no-untyped-def]
        return await logging_context_middleware(request, call_next)

    @app.middleware("http")
    async def _global_rate_limit(request, call_next):  # type: ignore[no-untyped-def]
        return await global_rate_limit_middleware(request, call_next)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
        expose_headers=["X-Request-ID", "Content-Disposition"],
    )

    # Outermost: every response, errors included, carries X-Request-ID
    app.add_middleware(CorrelationIdMiddleware)
