from __future__ import annotations

import logging

from app.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once for the API process."""
    resolved = (level or get_settings().log_level).upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    if resolved == "DEBUG":
        # asyncpg and redis are chatty at DEBUG
        for noisy in ("asyncpg", "redis"):
            logging.getLogger(noisy).setLevel(logging.INFO)


__all__ = ["setup_logging"]
