from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from app.availability.errors import InvalidRangeError

DEFAULT_MAX_NIGHTS = 30


@dataclass(frozen=True)
class StayRange:
    """Validated stay; ``days`` lists every night from check-in up to (not including) check-out."""

    check_in: date
    check_out: date
    days: tuple[date, ...]

    @property
    def nights(self) -> int:
        return len(self.days)


def build_stay_range(
    check_in: date, check_out: date, *, max_nights: int = DEFAULT_MAX_NIGHTS
) -> StayRange:
    if check_out < check_in:
        raise InvalidRangeError("checkOut must be after checkIn", bound="order")

    nights = (check_out - check_in).days
    if nights <= 0:
        raise InvalidRangeError("Nights must be >= 1", bound="min")
    if nights > max_nights:
        raise InvalidRangeError(f"Max {max_nights} nights", bound="max")

    days = tuple(check_in + timedelta(days=offset) for offset in range(nights))
    return StayRange(check_in=check_in, check_out=check_out, days=days)


__all__ = ["DEFAULT_MAX_NIGHTS", "StayRange", "build_stay_range"]
