"""Availability and pricing quote engine."""

from .cache import MemoryQuoteCache, RedisQuoteCache, create_quote_cache, make_quote_cache_key
from .errors import InvalidRangeError, QuoteError, StayRequestError
from .models import Quote, RoomQuote, RoomType, StayRequest
from .repository import AvailabilityRepository, PostgresAvailabilityRepository
from .service import AvailabilityService

__all__ = [
    "AvailabilityRepository",
    "AvailabilityService",
    "InvalidRangeError",
    "MemoryQuoteCache",
    "PostgresAvailabilityRepository",
    "Quote",
    "QuoteError",
    "RedisQuoteCache",
    "RoomQuote",
    "RoomType",
    "StayRequest",
    "StayRequestError",
    "create_quote_cache",
    "make_quote_cache_key",
]
