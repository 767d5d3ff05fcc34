"""Rate limiting.

Two layers:
1. Global middleware: a per-IP token bucket applied to every request.
2. Endpoint decorators (slowapi): tighter limits on the AI generation routes,
   which cost gateway credits.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from src.funnelhub.core.config import get_settings
from src.funnelhub.core.logging import get_logger

logger = get_logger(__name__)

EXEMPT_PATHS = ("/health", "/health/ready", "/metrics", "/docs", "/openapi.json", "/redoc")

_buckets: dict[str, tuple[float, float]] = {}
_buckets_lock = asyncio.Lock()


def get_rate_limit_key(request: Request) -> str:
    """Key on client IP only; headers are caller-controlled."""
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    """Create the slowapi limiter, backed by Redis when configured.

    Disabled in the testing environment.
    """
    settings = get_settings()

    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    if settings.redis_url:
        logger.info("Rate limiter using Redis backend")
        return Limiter(key_func=get_rate_limit_key, storage_uri=settings.redis_url)
    logger.info("Rate limiter using in-memory backend (not distributed)")
    return Limiter(key_func=get_rate_limit_key)


limiter = create_limiter()


def generation_limit() -> str:
    """Limit string for generation routes, read lazily by slowapi."""
    return get_settings().generation_rate_limit


async def take_token(client_ip: str, now: float | None = None) -> bool:
    """Consume one token from client_ip's bucket. False when it is empty."""
    settings = get_settings()
    rate = settings.global_rate_limit_per_second
    burst = float(settings.global_rate_limit_burst)
    now = time.monotonic() if now is None else now

    async with _buckets_lock:
        tokens, last_update = _buckets.get(client_ip, (burst, now))
        tokens = min(burst, tokens + (now - last_update) * rate)
        if tokens >= 1:
            _buckets[client_ip] = (tokens - 1, now)
            return True
        _buckets[client_ip] = (tokens, now)
        return False


def reset_buckets() -> None:
    _buckets.clear()


async def global_rate_limit_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Per-IP token bucket in front of every route except monitoring."""
    if request.url.path in EXEMPT_PATHS or get_settings().app_env == "testing":
        return await call_next(request)

    client_ip = get_rate_limit_key(request)
    if not await take_token(client_ip):
        logger.warning("Global rate limit exceeded", client_ip=client_ip, path=request.url.path)
        return JSONResponse(
            status_code=429,
            content={
                "detail": "Too many requests. Please slow down.",
                "retry_after": 1,
            },
            headers={"Retry-After": "1"},
        )
    return await call_next(request)
