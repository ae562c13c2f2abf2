from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

import asyncpg

from app.availability.models import InventoryRecord, PriceOverride, RoomType
from app.db.queries.inventory import fetch_inventory
from app.db.queries.prices import fetch_price_overrides
from app.db.queries.room_types import list_room_types


class AvailabilityRepository(Protocol):
    """Read-only collaborators the quote engine consumes."""

    async def room_types(self, hotel_id: str, *, min_capacity: int) -> list[RoomType]:
        """Room types of ``hotel_id`` holding at least ``min_capacity`` guests, in stable order."""
        ...

    async def inventory(
        self, room_type_ids: Sequence[str], *, start: date, end: date
    ) -> list[InventoryRecord]:
        """Inventory rows for the given room types on nights in ``[start, end)``."""
        ...

    async def price_overrides(
        self, room_type_ids: Sequence[str], *, start: date, end: date
    ) -> list[PriceOverride]:
        """Price overrides for the given room types on nights in ``[start, end)``."""
        ...


class PostgresAvailabilityRepository:
    """
    ``AvailabilityRepository`` over an asyncpg pool.

    Errors from the pool propagate; retrying is left to the caller.
    """

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def room_types(self, hotel_id: str, *, min_capacity: int) -> list[RoomType]:
        rows = await list_room_types(self._pool, hotel_id=hotel_id, min_capacity=min_capacity)
        return [
            RoomType(
                id=row["id"],
                name=row["name"],
                capacity=row["capacity"],
                base_price=row["base_price"],
            )
            for row in rows
        ]

    async def inventory(
        self, room_type_ids: Sequence[str], *, start: date, end: date
    ) -> list[InventoryRecord]:
        rows = await fetch_inventory(self._pool, room_type_ids, start=start, end=end)
        return [
            InventoryRecord(room_type_id=row["room_type_id"], date=row["date"], available=row["available"])
            for row in rows
        ]

    async def price_overrides(
        self, room_type_ids: Sequence[str], *, start: date, end: date
    ) -> list[PriceOverride]:
        rows = await fetch_price_overrides(self._pool, room_type_ids, start=start, end=end)
        return [
            PriceOverride(room_type_id=row["room_type_id"], date=row["date"], price=row["price"])
            for row in rows
        ]


__all__ = ["AvailabilityRepository", "PostgresAvailabilityRepository"]
