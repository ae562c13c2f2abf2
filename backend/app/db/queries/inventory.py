from __future__ import annotations

from datetime import date
from typing import Sequence

import asyncpg


async def fetch_inventory(
    pool: asyncpg.Pool, room_type_ids: Sequence[str], *, start: date, end: date
) -> list[dict]:
    """Inventory rows for ``room_type_ids`` on nights in ``[start, end)``."""
    sql = """
        SELECT room_type_id::text AS room_type_id, date, available
        FROM inventory
        WHERE room_type_id::text = ANY($1::text[]) AND date >= $2 AND date < $3
    """
    async with pool.acquire() as conn:
        rows = await conn.fetch(sql, list(room_type_ids), start, end)
    return [dict(row) for row in rows]


__all__ = ["fetch_inventory"]
