from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.funnelhub.api.funnel.routes import router as funnel_router
from src.funnelhub.api.middlewares import setup_middlewares
from src.funnelhub.api.v1.router import api_router
from src.funnelhub.core.config import get_settings
from src.funnelhub.core.db import dispose_engine
from src.funnelhub.core.exceptions import setup_exception_handlers
from src.funnelhub.core.health import setup_health_endpoint, setup_metrics
from src.funnelhub.core.logging import get_logger, setup_logging
from src.funnelhub.core.rate_limit import limiter
from src.funnelhub.core.redis import close_redis
from src.funnelhub.tenancy.clients import tenant_clients

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}", env=settings.app_env)

    yield

    logger.info("Closing connections...")
    await tenant_clients.close_all()
    await close_redis()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "tenants", "description": "Registry of tenant Supabase projects"},
    {"name": "analytics", "description": "Unified analytics across all tenant sites"},
    {"name": "generation", "description": "AI-written blog, result and pre-landing content"},
    {"name": "funnel", "description": "Public visitor funnel per tenant site"},
    {"name": "audit", "description": "History of admin changes"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Admin and funnel hub for a fleet of Supabase-backed marketing sites",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    setup_middlewares(app, settings)

    app.include_router(api_router)
    app.include_router(funnel_router)

    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
