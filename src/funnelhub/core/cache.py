"""JSON cache on Redis with graceful fallback.

Used for analytics snapshots and geo-IP lookups. Every function is a no-op
(or a miss) when Redis is unavailable, and Redis errors are logged rather
than raised: a cache must never fail the request it is speeding up.
"""

import json
from typing import Any

from src.funnelhub.core.logging import get_logger
from src.funnelhub.core.redis import get_redis

logger = get_logger(__name__)

PREFIX_ANALYTICS = "analytics"
PREFIX_GEOIP = "geoip"


def cache_key(prefix: str, *parts: str) -> str:
    return ":".join([prefix, *parts])


async def get_json(key: str) -> Any | None:
    """Return the cached value, or None on a miss or when Redis is down."""
    redis = await get_redis()
    if not redis:
        return None
    try:
        raw = await redis.get(key)
    except Exception as e:
        logger.warning("Cache read failed", key=key, error=str(e))
        return None
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Discarding corrupt cache entry", key=key)
        return None


async def set_json(key: str, value: Any, ttl: int) -> bool:
    """Store value for ttl seconds. Returns False when nothing was written."""
    redis = await get_redis()
    if not redis or ttl <= 0:
        return False
    try:
        await redis.setex(key, ttl, json.dumps(value, default=str))
    except Exception as e:
        logger.warning("Cache write failed", key=key, error=str(e))
        return False
    return True


async def delete_prefix(prefix: str) -> int:
    """Drop every key under prefix. Returns the number of deleted keys."""
    redis = await get_redis()
    if not redis:
        return 0
    deleted = 0
    try:
        async for key in redis.scan_iter(match=f"{prefix}:*"):
            deleted += await redis.delete(key)
    except Exception as e:
        logger.warning("Cache invalidation failed", prefix=prefix, error=str(e))
    return deleted
