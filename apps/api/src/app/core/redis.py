"""
Redis Client

Shared async Redis connection. Redis backs the rate limiter; when it is
unreachable outside production the application keeps running and the rate
limiter falls back to process memory.
"""

import logging

from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError

from app.core.config import settings

logger = logging.getLogger(__name__)

redis_client: Redis | None = None


async def init_redis() -> Redis | None:
    """
    Connect to Redis on application startup.

    Returns:
        The connected client, or None when Redis is unreachable and the
        environment tolerates running without it

    Raises:
        RedisError/OSError: In production when the connection fails
    """
    global redis_client
    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        await client.aclose()
        if settings.is_production:
            raise
        logger.warning(f"Redis unavailable, continuing without it: {e}")
        redis_client = None
        return None

    redis_client = client
    return redis_client


def get_redis_client() -> Redis | None:
    """Return the shared client, or None if Redis is not connected."""
    return redis_client


async def close_redis() -> None:
    """Close the shared Redis connection."""
    global redis_client
    if redis_client is not None:
        await redis_client.aclose()
        redis_client = None


__all__ = ["close_redis", "get_redis_client", "init_redis", "redis_client"]
