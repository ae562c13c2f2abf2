from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from app.api.v1.availability import get_availability_service
from app.availability.service import AvailabilityService
from app.core.security import verify_api_key
from app.db.pool import ping_pool

router = APIRouter(prefix="/admin", dependencies=[Depends(verify_api_key)])


@router.get("/health")
async def health() -> dict[str, bool]:
    return {"ok": True}


@router.get("/ready")
async def ready(
    request: Request,
    service: AvailabilityService = Depends(get_availability_service),
) -> dict[str, bool]:
    pool = getattr(request.app.state, "pool", None)
    postgres = await ping_pool(pool) if pool is not None else False
    cache = await service.cache.ping()
    return {"ok": postgres and cache, "postgres": postgres, "cache": cache}


@router.get("/cache/stats")
async def cache_stats(
    service: AvailabilityService = Depends(get_availability_service),
) -> dict[str, Any]:
    return service.cache.stats()


@router.delete("/cache/hotels/{hotel_id}")
async def invalidate_hotel(
    hotel_id: str,
    service: AvailabilityService = Depends(get_availability_service),
) -> dict[str, Any]:
    removed = await service.cache.invalidate_hotel(hotel_id)
    return {"hotelId": hotel_id, "removed": removed}


__all__ = ["router"]
