from __future__ import annotations

from typing import Sequence

from app.availability.dates import StayRange
from app.availability.lookup import NightlyLookup
from app.availability.models import NightPrice, Quote, RoomQuote, RoomType


def build_room_quote(room_type: RoomType, stay: StayRange, lookup: NightlyLookup) -> RoomQuote:
    """
    Price one room type night by night.

    ``available_all_nights`` is False as soon as any night has no sellable
    unit; the remaining nights are still priced so the breakdown is complete.
    """
    total = 0
    ok_all = True
    breakdown: list[NightPrice] = []
    # every night is recorded even after a sold-out one
    for night in stay.days:
        if lookup.available(room_type.id, night) <= 0:
            ok_all = False
        price = lookup.price(room_type, night)
        total += price
        breakdown.append(NightPrice(date=night, price=price))

    return RoomQuote(
        room_type_id=room_type.id,
        name=room_type.name,
        capacity=room_type.capacity,
        total=total,
        breakdown=breakdown,
        available_all_nights=ok_all,
    )


def aggregate_quote(
    room_types: Sequence[RoomType],
    stay: StayRange,
    lookup: NightlyLookup,
    *,
    guests: int,
    currency: str,
) -> Quote:
    """
    Quote every room type that fits ``guests`` and is sellable on all nights.

    Args:
        room_types: candidates, in the order rooms are emitted
        stay: validated stay; its nights drive both lookup and pricing
        lookup: inventory and price maps for the candidates
        guests: party size; smaller room types are skipped
        currency: currency code stamped on the quote
    """
    rooms = [
        quote
        for quote in (
            build_room_quote(room_type, stay, lookup)
            for room_type in room_types
            if room_type.capacity >= guests
        )
        if quote.available_all_nights
    ]
    return Quote(nights=stay.nights, currency=currency, rooms=rooms)


def empty_quote(stay: StayRange, *, currency: str) -> Quote:
    """Quote with no rooms, used when no room type fits the guest count."""
    return Quote(nights=stay.nights, currency=currency, rooms=[])


__all__ = ["aggregate_quote", "build_room_quote", "empty_quote"]
