from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from app.availability.aggregator import aggregate_quote, empty_quote
from app.availability.cache import DEFAULT_PREFIX, QuoteCache, make_quote_cache_key
from app.availability.dates import DEFAULT_MAX_NIGHTS, StayRange, build_stay_range
from app.availability.errors import StayRequestError
from app.availability.lookup import load_nightly_lookup
from app.availability.models import Quote, StayRequest
from app.availability.repository import AvailabilityRepository

logger = logging.getLogger(__name__)


@dataclass
class _InFlight:
    task: asyncio.Task[Quote]
    waiters: int = 0


class AvailabilityService:
    """
    Availability and price quotes for a hotel stay, memoized per query.

    Request flow: validation, cache lookup, capacity query, concurrent
    inventory/price lookup, aggregation, cache write. Validation errors
    are raised before any I/O; storage errors propagate unchanged.
    """

    def __init__(
        self,
        repository: AvailabilityRepository,
        cache: QuoteCache,
        *,
        currency: str = "VND",
        max_nights: int = DEFAULT_MAX_NIGHTS,
        key_prefix: str = DEFAULT_PREFIX,
        single_flight: bool = False,
    ) -> None:
        self._repository = repository
        self._cache = cache
        self._currency = currency
        self._max_nights = max_nights
        self._key_prefix = key_prefix
        self._single_flight = single_flight
        self._inflight: dict[str, _InFlight] = {}

    @property
    def cache(self) -> QuoteCache:
        return self._cache

    async def quote(self, request: StayRequest) -> Quote:
        """Return the quote for ``request``, from cache when an entry is present."""
        stay = self._validate(request)
        key = make_quote_cache_key(
            request.hotel_id,
            stay.check_in,
            stay.check_out,
            request.guests,
            prefix=self._key_prefix,
        )

        cached = await self._cache.get(key)
        if cached is not None:
            quote = self._decode_cached(key, cached)
            if quote is not None:
                logger.debug("Quote cache hit: %s", key)
                return quote
        logger.debug("Quote cache miss: %s", key)

        if not self._single_flight:
            return await self._compute(key, request, stay)
        return await self._join_inflight(key, request, stay)

    def _validate(self, request: StayRequest) -> StayRange:
        if not request.hotel_id or not request.hotel_id.strip():
            raise StayRequestError("hotelId is required")
        if request.guests < 1:
            raise StayRequestError("guests must be >= 1")
        return build_stay_range(request.check_in, request.check_out, max_nights=self._max_nights)

    @staticmethod
    def _decode_cached(key: str, payload: Any) -> Quote | None:
        try:
            return Quote.from_dict(payload)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Ignoring malformed quote cache entry %s: %r", key, exc)
            return None

    async def _join_inflight(self, key: str, request: StayRequest, stay: StayRange) -> Quote:
        """
        Share one computation between concurrent misses on ``key``.

        The computation is cancelled once every waiter has gone away.
        """
        entry = self._inflight.get(key)
        if entry is None or entry.task.done():
            entry = _InFlight(task=asyncio.ensure_future(self._compute(key, request, stay)))
            self._inflight[key] = entry
            entry.task.add_done_callback(lambda _done, key=key, entry=entry: self._forget(key, entry))
        else:
            logger.debug("Joining in-flight quote computation: %s", key)

        entry.waiters += 1
        try:
            return await asyncio.shield(entry.task)
        finally:
            entry.waiters -= 1
            if entry.waiters == 0 and not entry.task.done():
                logger.debug("Last waiter left, cancelling quote computation: %s", key)
                self._forget(key, entry)
                entry.task.cancel()

    def _forget(self, key: str, entry: _InFlight) -> None:
        if self._inflight.get(key) is entry:
            del self._inflight[key]

    async def _compute(self, key: str, request: StayRequest, stay: StayRange) -> Quote:
        """
        Build the quote from the store and write it to the cache.

        When no room type fits the guest count the inventory and price
        lookups are skipped; the empty quote is still cached.
        """
        room_types = await self._repository.room_types(request.hotel_id, min_capacity=request.guests)
        if not room_types:
            quote = empty_quote(stay, currency=self._currency)
        else:
            lookup = await load_nightly_lookup(self._repository, room_types, stay)
            quote = aggregate_quote(
                room_types,
                stay,
                lookup,
                guests=request.guests,
                currency=self._currency,
            )

        await self._cache.set(key, quote.as_dict())
        logger.info(
            "Quoted hotel=%s nights=%d guests=%d rooms=%d",
            request.hotel_id,
            quote.nights,
            request.guests,
            len(quote.rooms),
        )
        return quote


__all__ = ["AvailabilityService"]
