from __future__ import annotations

from typing import Literal

RangeBound = Literal["order", "min", "max"]


class QuoteError(RuntimeError):
    """Base error of the quote engine."""


class StayRequestError(QuoteError, ValueError):
    """Client-side input that cannot be quoted."""


class InvalidRangeError(StayRequestError):
    """Check-in/check-out pair outside the sellable range."""

    def __init__(self, message: str, *, bound: RangeBound) -> None:
        super().__init__(message)
        self.bound = bound


__all__ = ["QuoteError", "StayRequestError", "InvalidRangeError", "RangeBound"]
