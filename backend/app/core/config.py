from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration read from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")
    db_pool_min_size: int = Field(1, alias="DB_POOL_MIN_SIZE")
    db_pool_max_size: int = Field(10, alias="DB_POOL_MAX_SIZE")
    db_connect_attempts: int = Field(3, alias="DB_CONNECT_ATTEMPTS")

    redis_url: str = Field("redis://127.0.0.1:6379/0", alias="REDIS_URL")
    use_redis_cache: bool = Field(
        True,
        alias="USE_REDIS_CACHE",
        description="Store quotes in Redis; otherwise in process memory",
    )

    quote_cache_ttl: int = Field(
        600,
        alias="QUOTE_CACHE_TTL",
        description="Quote cache TTL in seconds",
    )
    quote_cache_max_size: int = Field(1024, alias="QUOTE_CACHE_MAX_SIZE")
    quote_cache_prefix: str = Field("avail:", alias="QUOTE_CACHE_PREFIX")
    quote_currency: str = Field("VND", alias="QUOTE_CURRENCY")
    quote_max_nights: int = Field(30, alias="QUOTE_MAX_NIGHTS")
    quote_single_flight: bool = Field(
        False,
        alias="QUOTE_SINGLE_FLIGHT",
        description="Coalesce concurrent cache misses for the same key",
    )
    quote_timeout: float = Field(10.0, alias="QUOTE_TIMEOUT")

    admin_api_key: str | None = Field(None, alias="ADMIN_API_KEY")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], alias="CORS_ORIGINS"
    )

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    app_env: Literal["dev", "prod", "test"] = Field("dev", alias="APP_ENV")
    api_prefix: str = Field("/v1", alias="API_PREFIX")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
