from __future__ import annotations

import asyncpg


async def list_room_types(pool: asyncpg.Pool, *, hotel_id: str, min_capacity: int) -> list[dict]:
    sql = """
        SELECT id::text AS id, name, capacity, base_price
        FROM room_types
        WHERE hotel_id::text = $1 AND capacity >= $2
        ORDER BY id ASC
    """
    async with pool.acquire() as conn:
        rows = await conn.fetch(sql, hotel_id, min_capacity)
    return [dict(row) for row in rows]


__all__ = ["list_room_types"]
