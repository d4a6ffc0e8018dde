"""Shared Redis connection pool."""

import redis.asyncio as redis

from chart_registry.core.config import get_settings

_redis: redis.Redis | None = None


async def init_redis(url: str | None = None) -> redis.Redis | None:
    """Initialize the shared Redis connection pool.

    Returns None (and leaves the pool unset) when no URL is configured.
    """
    global _redis

    if _redis is not None:
        return _redis

    redis_url = url or get_settings().redis_url
    if not redis_url:
        return None

    _redis = redis.from_url(
        redis_url,
        encoding="utf-8",
        decode_responses=True,
    )

    # Verify connectivity
    await _redis.ping()
    return _redis


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis

    if _redis is not None:
        await _redis.aclose()
        _redis = None


def get_redis() -> redis.Redis:
    """Return the shared Redis client.

    Raises RuntimeError if init_redis() has not been called.
    """
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis
