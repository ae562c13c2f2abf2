"""
Bulk inventory and price lookup for a set of room types over a stay.

Two queries are issued concurrently (one per table) regardless of how many
room types or nights are involved; the results are then served from
in-memory maps keyed by ``(room_type_id, date)``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date
from typing import Sequence

from app.availability.dates import StayRange
from app.availability.models import InventoryRecord, PriceOverride, RoomType
from app.availability.repository import AvailabilityRepository

# Missing inventory row: nothing sellable that night.
DEFAULT_AVAILABLE = 0

NightKey = tuple[str, date]


@dataclass
class NightlyLookup:
    inventory: dict[NightKey, int] = field(default_factory=dict)
    prices: dict[NightKey, int] = field(default_factory=dict)

    @classmethod
    def from_records(
        cls,
        inventory: Sequence[InventoryRecord],
        prices: Sequence[PriceOverride],
    ) -> "NightlyLookup":
        return cls(
            inventory={(rec.room_type_id, rec.date): rec.available for rec in inventory},
            prices={(rec.room_type_id, rec.date): rec.price for rec in prices},
        )

    def available(self, room_type_id: str, night: date) -> int:
        """Sellable units that night, ``DEFAULT_AVAILABLE`` when no row exists."""
        return self.inventory.get((room_type_id, night), DEFAULT_AVAILABLE)

    def price(self, room_type: RoomType, night: date) -> int:
        """Override price for the night, falling back to the room type's base price."""
        return self.prices.get((room_type.id, night), room_type.base_price)


async def load_nightly_lookup(
    repository: AvailabilityRepository,
    room_types: Sequence[RoomType],
    stay: StayRange,
) -> NightlyLookup:
    ids = [room_type.id for room_type in room_types]
    inventory, prices = await asyncio.gather(
        repository.inventory(ids, start=stay.check_in, end=stay.check_out),
        repository.price_overrides(ids, start=stay.check_in, end=stay.check_out),
    )
    return NightlyLookup.from_records(inventory, prices)


__all__ = ["DEFAULT_AVAILABLE", "NightlyLookup", "load_nightly_lookup"]
