#!/usr/bin/env python3
"""
FastAPI application factory.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .env import load_environment
from .logging import configure_logging
from .settings import get_settings
from ..api import api_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    load_environment()
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="TCG Store Event Locator",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    if not settings.refresh_secret and not settings.is_development:
        logger.warning("CRON_SECRET is not set; the refresh endpoint will reject every request.")

    return app
