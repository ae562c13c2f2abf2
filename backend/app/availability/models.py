from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass(frozen=True)
class StayRequest:
    hotel_id: str
    check_in: date
    check_out: date
    guests: int


@dataclass(frozen=True)
class RoomType:
    id: str
    name: str
    capacity: int
    base_price: int


@dataclass(frozen=True)
class InventoryRecord:
    room_type_id: str
    date: date
    available: int


@dataclass(frozen=True)
class PriceOverride:
    room_type_id: str
    date: date
    price: int


@dataclass
class NightPrice:
    date: date
    price: int

    def as_dict(self) -> dict[str, Any]:
        return {"date": self.date.isoformat(), "price": self.price}


@dataclass
class RoomQuote:
    room_type_id: str
    name: str
    capacity: int
    total: int
    breakdown: list[NightPrice] = field(default_factory=list)
    available_all_nights: bool = True

    def as_dict(self) -> dict[str, Any]:
        return {
            "roomTypeId": self.room_type_id,
            "name": self.name,
            "capacity": self.capacity,
            "total": self.total,
            "breakdown": [night.as_dict() for night in self.breakdown],
            "availableAllNights": self.available_all_nights,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RoomQuote":
        return cls(
            room_type_id=str(data["roomTypeId"]),
            name=str(data["name"]),
            capacity=int(data["capacity"]),
            total=int(data["total"]),
            breakdown=[
                NightPrice(date=date.fromisoformat(item["date"]), price=int(item["price"]))
                for item in data.get("breakdown", [])
            ],
            available_all_nights=bool(data.get("availableAllNights", True)),
        )


@dataclass
class Quote:
    nights: int
    currency: str
    rooms: list[RoomQuote] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        """JSON-ready form; this is both the cache payload and the response body."""
        return {
            "nights": self.nights,
            "rooms": [room.as_dict() for room in self.rooms],
            "currency": self.currency,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Quote":
        return cls(
            nights=int(data["nights"]),
            currency=str(data["currency"]),
            rooms=[RoomQuote.from_dict(item) for item in data.get("rooms", [])],
        )


__all__ = [
    "StayRequest",
    "RoomType",
    "InventoryRecord",
    "PriceOverride",
    "NightPrice",
    "RoomQuote",
    "Quote",
]
