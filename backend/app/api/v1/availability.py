from __future__ import annotations

import asyncio
import re
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.availability.models import StayRequest
from app.availability.service import AvailabilityService
from app.core.config import get_settings

router = APIRouter(prefix="/availability", tags=["Availability"])

ISO_DATE_PREFIX = re.compile(r"\d{4}-\d{2}-\d{2}")


def get_availability_service(request: Request) -> AvailabilityService:
    return request.app.state.availability_service


class QuoteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hotel_id: str = Field(..., alias="hotelId", min_length=1)
    check_in: date = Field(..., alias="checkIn", examples=["2025-10-15"])
    check_out: date = Field(..., alias="checkOut", examples=["2025-10-18"])
    guests: int = Field(..., ge=1, examples=[2])

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def _require_iso_string(cls, value: object) -> object:
        # numbers and numeric strings would otherwise be read as Unix timestamps
        if isinstance(value, date):
            return value
        if isinstance(value, str) and ISO_DATE_PREFIX.match(value.strip()):
            return value.strip()
        raise ValueError("must be an ISO calendar date string (YYYY-MM-DD)")


class PriceBreakdown(BaseModel):
    date: str
    price: int


class RoomQuoteOut(BaseModel):
    roomTypeId: str
    name: str
    capacity: int
    total: int
    breakdown: list[PriceBreakdown]
    availableAllNights: bool


class QuoteResponse(BaseModel):
    nights: int
    rooms: list[RoomQuoteOut]
    currency: str


@router.post(
    "/quote",
    response_model=QuoteResponse,
    summary="Get availability & price quote for a stay",
    responses={400: {"description": "Invalid input"}},
)
async def quote_endpoint(
    payload: QuoteRequest,
    service: AvailabilityService = Depends(get_availability_service),
) -> QuoteResponse:
    settings = get_settings()
    stay = StayRequest(
        hotel_id=payload.hotel_id,
        check_in=payload.check_in,
        check_out=payload.check_out,
        guests=payload.guests,
    )
    try:
        quote = await asyncio.wait_for(service.quote(stay), timeout=settings.quote_timeout)
    except asyncio.TimeoutError:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail="Quote timed out")
    return QuoteResponse(**quote.as_dict())


__all__ = ["router", "get_availability_service", "QuoteRequest", "QuoteResponse"]
