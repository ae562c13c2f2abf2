"""
Quote cache.

Quotes are memoized under a key built from hotel, stay dates and guest
count, with a fixed TTL. Entries are not invalidated when inventory or
prices change, so a quote can lag behind the store for up to the TTL
unless the mutation path calls ``invalidate_hotel``.

A cache-store failure is never fatal: reads degrade to a miss and writes
are skipped, so the request falls through to live computation.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import time
from collections import OrderedDict
from datetime import date
from typing import Any, Callable, Protocol

import redis.asyncio as redis

from app.core.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "avail:"

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def make_quote_cache_key(
    hotel_id: str,
    check_in: date,
    check_out: date,
    guests: int,
    *,
    prefix: str = DEFAULT_PREFIX,
) -> str:
    """``avail:{hotelId}:{YYYYMMDD}-{YYYYMMDD}:{guests}``"""
    return f"{hotel_id_prefix(hotel_id, prefix=prefix)}{check_in:%Y%m%d}-{check_out:%Y%m%d}:{guests}"


def hotel_id_prefix(hotel_id: str, *, prefix: str = DEFAULT_PREFIX) -> str:
    return f"{prefix}{hotel_id}:"


class QuoteCache(Protocol):
    async def get(self, key: str) -> dict[str, Any] | None:
        ...

    async def set(self, key: str, payload: dict[str, Any]) -> None:
        ...

    async def invalidate_hotel(self, hotel_id: str) -> int:
        ...

    async def clear(self) -> int:
        ...

    async def ping(self) -> bool:
        ...

    def stats(self) -> dict[str, Any]:
        ...


def _hit_rate(hits: int, misses: int) -> float:
    total = hits + misses
    return round(hits / total * 100, 2) if total > 0 else 0.0


class MemoryQuoteCache:
    """In-process TTL cache with LRU eviction, for single-instance and test setups."""

    def __init__(
        self,
        *,
        ttl_seconds: float = 600.0,
        max_size: int = 1024,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._cache: OrderedDict[str, tuple[str, float]] = OrderedDict()
        self._ttl = ttl_seconds
        self._max_size = max_size
        self._prefix = prefix
        self._clock = clock
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0

    async def get(self, key: str) -> dict[str, Any] | None:
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None

            payload, stored_at = entry
            if self._clock() - stored_at > self._ttl:
                del self._cache[key]
                self._misses += 1
                return None

            self._cache.move_to_end(key)
            self._hits += 1
        # stored as JSON text so callers never share a mutable dict
        return json.loads(payload)

    async def set(self, key: str, payload: dict[str, Any]) -> None:
        encoded = json.dumps(payload, ensure_ascii=False)
        async with self._lock:
            self._cache[key] = (encoded, self._clock())
            self._cache.move_to_end(key)
            while len(self._cache) > self._max_size:
                self._cache.popitem(last=False)

    async def invalidate_hotel(self, hotel_id: str) -> int:
        start = hotel_id_prefix(hotel_id, prefix=self._prefix)
        async with self._lock:
            doomed = [key for key in self._cache if key.startswith(start)]
            for key in doomed:
                del self._cache[key]
        return len(doomed)

    async def clear(self) -> int:
        async with self._lock:
            count = len(self._cache)
            self._cache.clear()
            self._hits = 0
            self._misses = 0
            return count

    async def ping(self) -> bool:
        return True

    def stats(self) -> dict[str, Any]:
        """Counters plus the number of entries still within their TTL."""
        now = self._clock()
        live = sum(1 for _payload, stored_at in self._cache.values() if now - stored_at <= self._ttl)
        return {
            "backend": "memory",
            "size": live,
            "max_size": self._max_size,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate_percent": _hit_rate(self._hits, self._misses),
            "ttl_seconds": self._ttl,
        }


class RedisQuoteCache:
    """Redis-backed quote cache shared between API instances."""

    def __init__(
        self,
        redis_client: redis.Redis,
        *,
        ttl_seconds: float = 600.0,
        prefix: str = DEFAULT_PREFIX,
    ) -> None:
        self._redis = redis_client
        self._ttl = ttl_seconds
        self._prefix = prefix
        self._hits = 0
        self._misses = 0
        self._errors = 0

    async def get(self, key: str) -> dict[str, Any] | None:
        try:
            raw = await self._redis.get(key)
        except (redis.RedisError, OSError) as exc:
            logger.warning("Quote cache get failed for %s: %s", key, exc)
            self._errors += 1
            self._misses += 1
            return None

        if raw is None:
            self._misses += 1
            return None

        try:
            decoded = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else str(raw)
            payload = json.loads(decoded)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning("Discarding undecodable quote cache entry %s: %s", key, exc)
            self._misses += 1
            return None

        self._hits += 1
        return payload

    async def set(self, key: str, payload: dict[str, Any]) -> None:
        encoded = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        try:
            await self._redis.setex(key, max(1, int(self._ttl)), encoded)
        except (redis.RedisError, OSError) as exc:
            logger.warning("Quote cache set failed for %s: %s", key, exc)
            self._errors += 1

    async def invalidate_hotel(self, hotel_id: str) -> int:
        start = hotel_id_prefix(hotel_id, prefix=self._prefix)
        return await self._delete_matching(_GLOB_SPECIAL.sub(r"\\\1", start) + "*")

    async def clear(self) -> int:
        removed = await self._delete_matching(_GLOB_SPECIAL.sub(r"\\\1", self._prefix) + "*")
        self._hits = 0
        self._misses = 0
        return removed

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except (redis.RedisError, OSError):
            return False

    async def _delete_matching(self, pattern: str) -> int:
        removed = 0
        try:
            async for key in self._redis.scan_iter(match=pattern, count=500):
                removed += await self._redis.delete(key)
        except (redis.RedisError, OSError) as exc:
            logger.warning("Quote cache eviction for %s stopped early: %s", pattern, exc)
            self._errors += 1
        return removed

    def stats(self) -> dict[str, Any]:
        return {
            "backend": "redis",
            "hits": self._hits,
            "misses": self._misses,
            "errors": self._errors,
            "hit_rate_percent": _hit_rate(self._hits, self._misses),
            "ttl_seconds": self._ttl,
        }


def create_quote_cache(
    settings: Settings, redis_client: redis.Redis | None = None
) -> MemoryQuoteCache | RedisQuoteCache:
    if settings.use_redis_cache and redis_client is not None:
        logger.info("Quote cache is using Redis backend")
        return RedisQuoteCache(
            redis_client,
            ttl_seconds=settings.quote_cache_ttl,
            prefix=settings.quote_cache_prefix,
        )
    logger.info("Quote cache is using in-memory backend")
    return MemoryQuoteCache(
        ttl_seconds=settings.quote_cache_ttl,
        max_size=settings.quote_cache_max_size,
        prefix=settings.quote_cache_prefix,
    )


__all__ = [
    "DEFAULT_PREFIX",
    "MemoryQuoteCache",
    "QuoteCache",
    "RedisQuoteCache",
    "create_quote_cache",
    "hotel_id_prefix",
    "make_quote_cache_key",
]
