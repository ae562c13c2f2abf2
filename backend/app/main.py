from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import admin, availability
from app.availability.cache import create_quote_cache
from app.availability.repository import PostgresAvailabilityRepository
from app.availability.service import AvailabilityService
from app.core.config import get_settings
from app.core.errors import register_exception_handlers
from app.core.logging import setup_logging
from app.db.pool import close_pool, create_pool
from app.db.redis_client import close_redis_client, create_redis_client

logger = logging.getLogger(__name__)

settings = get_settings()
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    pool = await create_pool(settings)
    redis_client = create_redis_client(settings) if settings.use_redis_cache else None

    app.state.pool = pool
    app.state.redis = redis_client
    app.state.availability_service = AvailabilityService(
        PostgresAvailabilityRepository(pool),
        create_quote_cache(settings, redis_client),
        currency=settings.quote_currency,
        max_nights=settings.quote_max_nights,
        key_prefix=settings.quote_cache_prefix,
        single_flight=settings.quote_single_flight,
    )
    logger.info("Quote API started (env=%s)", settings.app_env)

    try:
        yield
    finally:
        await close_redis_client(redis_client)
        await close_pool(pool)


def create_app() -> FastAPI:
    app = FastAPI(title="Hotel Booking API", version="1.0.0", lifespan=lifespan)
    api_prefix = settings.api_prefix

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-API-Key"],
    )
    register_exception_handlers(app)

    app.include_router(availability.router, prefix=api_prefix)
    app.include_router(admin.router, prefix=api_prefix)
    return app


app = create_app()
