"""
Redis-backed dashboard cache and token revocation list.

CACHING STRATEGY
================

What we cache:
  - Dashboard event listings (JSON-serialized list of events)
  - Cache key pattern: "events:list:search={search}&sport={sport}"

Invalidation strategy:
  - Every create, update and delete removes all "events:list:*" keys.
    This is the server-side counterpart of revalidating the dashboard route.
  - TTL-based expiry as safety net.

Revoked tokens:
  - "auth:revoked:{jti}" is set on logout and expires with the token itself.

Redis is optional. With REDIS_ENABLED=false, or when the server is unreachable,
every read is a miss, writes are no-ops and no token counts as revoked.
"""

import json
from typing import Optional

import redis.asyncio as redis
from fastbreak.core.config import get_settings
from fastbreak.core.logging import get_logger
from fastbreak.core.metrics import cache_invalidations, record_cache_operation

logger = get_logger(__name__)
settings = get_settings()

EVENT_LIST_PREFIX = "events:list:"
REVOKED_TOKEN_PREFIX = "auth:revoked:"

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
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
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


def _make_event_list_key(search: Optional[str], sport_type: Optional[str]) -> str:
    search_part = (search or "").strip().lower()
    sport_part = (sport_type or "").strip().lower()
    return f"{EVENT_LIST_PREFIX}search={search_part}&sport={sport_part}"


async def get_cached_events(search: Optional[str], sport_type: Optional[str]) -> Optional[list[dict]]:
    """Retrieve a cached dashboard listing."""
    client = await get_redis()
    if not client:
        return None

    key = _make_event_list_key(search, sport_type)
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


async def set_cached_events(search: Optional[str], sport_type: Optional[str], events: list[dict]) -> None:
    """Cache a dashboard listing with TTL."""
    client = await get_redis()
    if not client:
        return

    key = _make_event_list_key(search, sport_type)
    try:
        await client.setex(key, settings.REDIS_CACHE_TTL, json.dumps(events, default=str))
        record_cache_operation("set", hit=False)
        logger.debug("cache_set", key=key, ttl=settings.REDIS_CACHE_TTL)
    except Exception as e:
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_event_cache() -> None:
    """Drop every cached dashboard listing."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{EVENT_LIST_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        cache_invalidations.inc()
        logger.info("cache_invalidated", keys_deleted=deleted)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))


async def revoke_token(token_id: str, ttl_seconds: int) -> bool:
    """Mark a token id as revoked until it would have expired anyway."""
    client = await get_redis()
    if not client or ttl_seconds <= 0:
        return False

    try:
        await client.setex(f"{REVOKED_TOKEN_PREFIX}{token_id}", ttl_seconds, "1")
        return True
    except Exception as e:
        logger.error("token_revoke_error", error=str(e))
        return False


async def is_token_revoked(token_id: str) -> bool:
    client = await get_redis()
    if not client:
        return False

    try:
        return await client.exists(f"{REVOKED_TOKEN_PREFIX}{token_id}") > 0
    except Exception as e:
        logger.error("token_revocation_check_error", error=str(e))
        return False


async def get_cache_stats() -> dict:
    """Get Redis cache statistics for monitoring."""
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
