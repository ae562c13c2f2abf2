from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.availability.errors import InvalidRangeError, StayRequestError

logger = logging.getLogger(__name__)

GENERIC_ERROR_DETAIL = "Internal server error"


async def stay_request_error_handler(request: Request, exc: StayRequestError) -> JSONResponse:
    content: dict[str, str] = {"detail": str(exc)}
    if isinstance(exc, InvalidRangeError):
        content["bound"] = exc.bound
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": GENERIC_ERROR_DETAIL},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StayRequestError, stay_request_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = ["GENERIC_ERROR_DETAIL", "register_exception_handlers"]
