from __future__ import annotations

import logging
from pathlib import Path

import asyncpg
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from app.core.config import Settings

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


async def create_pool(settings: Settings) -> asyncpg.Pool:
    """Open the PostgreSQL pool, retrying only the initial connect."""
    async for attempt in AsyncRetrying(
        reraise=True,
        stop=stop_after_attempt(max(1, settings.db_connect_attempts)),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type((OSError, asyncpg.PostgresError)),
    ):
        with attempt:
            pool = await asyncpg.create_pool(
                settings.database_url,
                min_size=settings.db_pool_min_size,
                max_size=settings.db_pool_max_size,
            )
            logger.info("PostgreSQL pool ready (min=%d, max=%d)", settings.db_pool_min_size, settings.db_pool_max_size)
            return pool
    raise RuntimeError("unreachable")  # pragma: no cover


async def close_pool(pool: asyncpg.Pool | None) -> None:
    if pool is None:
        return
    await pool.close()
    logger.info("PostgreSQL pool closed")


async def ping_pool(pool: asyncpg.Pool) -> bool:
    try:
        async with pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
    except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
        logger.warning("PostgreSQL ping failed: %s", exc)
        return False
    return True


async def apply_schema(pool: asyncpg.Pool) -> None:
    sql = SCHEMA_PATH.read_text(encoding="utf-8")
    async with pool.acquire() as conn:
        await conn.execute(sql)


__all__ = ["SCHEMA_PATH", "apply_schema", "close_pool", "create_pool", "ping_pool"]
