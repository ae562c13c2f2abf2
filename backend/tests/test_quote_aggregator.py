from datetime import date

from _helpers import nights

from app.availability.aggregator import aggregate_quote, build_room_quote
from app.availability.dates import build_stay_range
from app.availability.lookup import NightlyLookup
from app.availability.models import InventoryRecord, PriceOverride, RoomType

STAY = build_stay_range(date(2025, 10, 15), date(2025, 10, 18))


def _full_inventory(room_type_id: str, available: int = 2) -> list[InventoryRecord]:
    return [
        InventoryRecord(room_type_id=room_type_id, date=night, available=available)
        for night in nights(date(2025, 10, 15), 3)
    ]


def test_lookup_defaults():
    room_type = RoomType(id="RT1", name="Std", capacity=2, base_price=400)
    lookup = NightlyLookup.from_records(
        [InventoryRecord("RT1", date(2025, 10, 15), 4)],
        [PriceOverride("RT1", date(2025, 10, 15), 450)],
    )

    assert lookup.available("RT1", date(2025, 10, 15)) == 4
    assert lookup.available("RT1", date(2025, 10, 16)) == 0
    assert lookup.price(room_type, date(2025, 10, 15)) == 450
    assert lookup.price(room_type, date(2025, 10, 16)) == 400


def test_override_precedence_and_total():
    room_type = RoomType(id="RT1", name="Deluxe Double", capacity=2, base_price=500_000)
    lookup = NightlyLookup.from_records(
        _full_inventory("RT1", 3),
        [PriceOverride("RT1", date(2025, 10, 16), 600_000)],
    )

    quote = build_room_quote(room_type, STAY, lookup)

    assert quote.total == 1_600_000
    assert [(night.date, night.price) for night in quote.breakdown] == [
        (date(2025, 10, 15), 500_000),
        (date(2025, 10, 16), 600_000),
        (date(2025, 10, 17), 500_000),
    ]
    assert quote.available_all_nights is True


def test_sold_out_night_still_recorded_in_breakdown():
    room_type = RoomType(id="RT1", name="Std", capacity=2, base_price=100)
    inventory = _full_inventory("RT1")
    inventory[0] = InventoryRecord("RT1", date(2025, 10, 15), 0)

    quote = build_room_quote(room_type, STAY, NightlyLookup.from_records(inventory, []))

    assert quote.available_all_nights is False
    assert len(quote.breakdown) == 3
    assert quote.total == 300


def test_missing_inventory_row_counts_as_sold_out():
    room_type = RoomType(id="RT1", name="Std", capacity=2, base_price=100)
    inventory = _full_inventory("RT1")[:2]

    quote = build_room_quote(room_type, STAY, NightlyLookup.from_records(inventory, []))

    assert quote.available_all_nights is False


def test_aggregate_filters_unavailable_and_undersized_rooms():
    small = RoomType(id="A", name="Single", capacity=1, base_price=100)
    sold_out = RoomType(id="B", name="Twin", capacity=2, base_price=200)
    family = RoomType(id="C", name="Family", capacity=4, base_price=300)
    inventory = _full_inventory("A") + _full_inventory("C")
    inventory += [
        InventoryRecord("B", date(2025, 10, 15), 1),
        InventoryRecord("B", date(2025, 10, 16), 0),
        InventoryRecord("B", date(2025, 10, 17), 1),
    ]

    quote = aggregate_quote(
        [small, sold_out, family],
        STAY,
        NightlyLookup.from_records(inventory, []),
        guests=2,
        currency="VND",
    )

    assert quote.nights == 3
    assert quote.currency == "VND"
    assert [room.room_type_id for room in quote.rooms] == ["C"]
    assert quote.rooms[0].total == 900


def test_aggregate_keeps_input_order():
    room_types = [
        RoomType(id="Z", name="Suite", capacity=2, base_price=900),
        RoomType(id="A", name="Std", capacity=2, base_price=100),
    ]
    inventory = _full_inventory("Z") + _full_inventory("A")

    quote = aggregate_quote(
        room_types, STAY, NightlyLookup.from_records(inventory, []), guests=2, currency="VND"
    )

    assert [room.room_type_id for room in quote.rooms] == ["Z", "A"]


def test_room_quote_dict_shape():
    room_type = RoomType(id="RT1", name="Std", capacity=2, base_price=100)
    one_night = build_stay_range(date(2025, 10, 15), date(2025, 10, 16))
    quote = aggregate_quote(
        [room_type],
        one_night,
        NightlyLookup.from_records([InventoryRecord("RT1", date(2025, 10, 15), 1)], []),
        guests=1,
        currency="VND",
    )

    assert quote.as_dict() == {
        "nights": 1,
        "rooms": [
            {
                "roomTypeId": "RT1",
                "name": "Std",
                "capacity": 2,
                "total": 100,
                "breakdown": [{"date": "2025-10-15", "price": 100}],
                "availableAllNights": True,
            }
        ],
        "currency": "VND",
    }
