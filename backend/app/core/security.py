from __future__ import annotations

import secrets

from fastapi import Header, HTTPException, Request, status

from app.core.config import get_settings


async def verify_api_key(
    request: Request,
    x_api_key: str | None = Header(default=None)
) -> None:
    # CORS preflight never carries the key
    if request.method == "OPTIONS":
        return

    expected = get_settings().admin_api_key
    if not expected:
        return
    if not x_api_key or not secrets.compare_digest(x_api_key.strip(), expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


__all__ = ["verify_api_key"]
