"""
Redis caching service for movie catalog listings.

CACHING STRATEGY
================

What we cache:
  - Paginated movie listing responses (JSON-serialized)
  - Key pattern: "movies:list:{query-string}"

Why:
  - The catalog is the most frequently read page and changes rarely
  - Seat counts are never cached: bookings need real-time availability

Invalidation:
  - Any movie create/update/delete drops every "movies:list:*" key
  - TTL-based expiry as safety net

Redis is optional. When it is disabled or unreachable every call degrades
to a cache miss and the database answers.
"""

import json
from typing import Optional

import redis.asyncio as redis
from cinebook.core.config import get_settings
from cinebook.core.logging import get_logger
from cinebook.core.metrics import record_cache_operation, redis_available

logger = get_logger(__name__)
settings = get_settings()

MOVIE_LIST_PREFIX = "movies:list:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            redis_available.set(1)
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            redis_available.set(0)
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def make_movie_list_key(**params) -> str:
    parts = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] is not None)
    return f"{MOVIE_LIST_PREFIX}{parts}"


async def get_cached(key: str) -> Optional[dict]:
    client = await get_redis()
    if not client:
        return None

    try:
        data = await client.get(key)
        record_cache_operation("get", hit=data is not None)
        if data:
            logger.debug("cache_hit", key=key)
            return json.loads(data)
        logger.debug("cache_miss", key=key)
    except Exception as e:
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached(key: str, data: dict) -> None:
    client = await get_redis()
    if not client:
        return

    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_prefix(prefix: str = MOVIE_LIST_PREFIX) -> None:
    """Delete every key under `prefix` using SCAN."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{prefix}*", count=100):
            await client.delete(key)
            deleted += 1
        logger.info("cache_invalidated", prefix=prefix, keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", prefix=prefix, error=str(e))


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for the health endpoint."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "status": "connected",
            "hits": hits,
            "misses": misses,
            "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}
