from __future__ import annotations

import logging

import redis.asyncio as redis

from app.core.config import Settings

logger = logging.getLogger(__name__)


def create_redis_client(settings: Settings) -> redis.Redis:
    """Redis client for the quote cache; owned by the application lifespan."""
    return redis.Redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=False,
    )


async def close_redis_client(client: redis.Redis | None) -> None:
    if client is None:
        return
    try:
        await client.aclose()
    except (redis.RedisError, OSError) as exc:  # pragma: no cover - best-effort close
        logger.warning("Failed to close Redis client: %s", exc)
    else:
        logger.info("Redis client closed")


__all__ = ["create_redis_client", "close_redis_client"]
