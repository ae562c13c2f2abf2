import asyncio
from datetime import date, timedelta
from pathlib import Path
import sys
import uuid

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.core.config import get_settings
from app.db.pool import apply_schema, close_pool, create_pool

HOTEL_ID = uuid.UUID("00000000-0000-0000-0000-0000000000a1")
ROOM_TYPE_ID = uuid.UUID("00000000-0000-0000-0000-00000000a0b1")


async def main() -> None:
    pool = await create_pool(get_settings())
    try:
        await apply_schema(pool)
        async with pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(
                    """
                    INSERT INTO room_types (id, hotel_id, name, capacity, base_price)
                    VALUES ($1, $2, $3, $4, $5)
                    ON CONFLICT (id) DO UPDATE
                    SET name = EXCLUDED.name, capacity = EXCLUDED.capacity, base_price = EXCLUDED.base_price
                    """,
                    ROOM_TYPE_ID,
                    HOTEL_ID,
                    "Deluxe Double",
                    2,
                    500_000,
                )
                first_night = date(2025, 10, 15)
                for offset in range(3):
                    await conn.execute(
                        """
                        INSERT INTO inventory (room_type_id, date, available)
                        VALUES ($1, $2, $3)
                        ON CONFLICT (room_type_id, date) DO UPDATE SET available = EXCLUDED.available
                        """,
                        ROOM_TYPE_ID,
                        first_night + timedelta(days=offset),
                        3,
                    )
                await conn.execute(
                    """
                    INSERT INTO price_calendar (room_type_id, date, price)
                    VALUES ($1, $2, $3)
                    ON CONFLICT (room_type_id, date) DO UPDATE SET price = EXCLUDED.price
                    """,
                    ROOM_TYPE_ID,
                    date(2025, 10, 16),
                    600_000,
                )
    finally:
        await close_pool(pool)

    print("Hotel:", HOTEL_ID)
    print("Room type:", ROOM_TYPE_ID)


if __name__ == "__main__":
    asyncio.run(main())
