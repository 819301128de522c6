"""Logging setup: one stream handler on the root logger, optionally JSON."""
from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

from app.core.config import Settings, get_settings

LOG_FORMAT = "%(levelname)s %(name)s %(message)s"


def setup_logging(settings: Settings | None = None) -> None:
    """Configure the root logger from settings (LOG_LEVEL, LOG_JSON)."""
    settings = settings or get_settings()
    handler = logging.StreamHandler()
    if settings.log_json:
        handler.setFormatter(JsonFormatter(LOG_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.handlers = [handler]
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    root.setLevel(level)
    # Access lines are noise unless debugging
    logging.getLogger("uvicorn.access").setLevel(logging.DEBUG if settings.debug else max(level, logging.WARNING))
