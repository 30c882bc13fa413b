#!/usr/bin/env python3
"""
Application settings and configuration helpers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from functools import lru_cache
import os
from pathlib import Path
from typing import List, Optional


_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]

_DEFAULT_LOCATOR_URL = "https://pokedata.ovh/events/tableapi/"


def _env_float(name: str, default: str) -> float:
    return float(os.getenv(name, default))


def _env_optional(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


@dataclass
class Settings:
    """Container for runtime configuration."""

    environment: str = field(default_factory=lambda: os.getenv("APP_ENV", "production").strip().lower())
    refresh_secret: str = field(default_factory=lambda: os.getenv("CRON_SECRET", ""))
    domain_name: str = field(default_factory=lambda: os.getenv("DOMAIN_NAME", "").strip())
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    cache_dir: Path = field(default_factory=lambda: Path(os.getenv("EVENT_CACHE_DIR", "./cache")))
    cache_ttl_minutes: float = field(default_factory=lambda: _env_float("CACHE_TTL_MINUTES", "60"))
    scraper_ttl_hours: float = field(default_factory=lambda: _env_float("SCRAPER_TTL_HOURS", "24"))
    firebase_credentials_path: Optional[str] = field(default_factory=lambda: _env_optional("FIREBASE_CREDENTIALS_PATH"))
    firestore_collection: str = field(default_factory=lambda: os.getenv("FIRESTORE_COLLECTION", "tcg_event_cache"))

    locator_url: str = field(default_factory=lambda: os.getenv("LOCATOR_URL", _DEFAULT_LOCATOR_URL))
    locator_timeout_seconds: float = field(default_factory=lambda: _env_float("LOCATOR_TIMEOUT_SECONDS", "20"))

    default_latitude: float = field(default_factory=lambda: _env_float("DEFAULT_LATITUDE", "37.52"))
    default_longitude: float = field(default_factory=lambda: _env_float("DEFAULT_LONGITUDE", "-122.2758"))
    default_radius_miles: float = field(default_factory=lambda: _env_float("DEFAULT_RADIUS_MILES", "100"))
    default_region: str = field(default_factory=lambda: os.getenv("DEFAULT_REGION", "California"))
    default_country: str = field(default_factory=lambda: os.getenv("DEFAULT_COUNTRY", "US"))

    _dev_origins: List[str] = field(default_factory=lambda: list(_DEV_ORIGINS))

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(minutes=self.cache_ttl_minutes)

    @property
    def scraper_ttl(self) -> timedelta:
        return timedelta(hours=self.scraper_ttl_hours)

    def allowed_origins(self) -> List[str]:
        """Compute allowed CORS origins."""
        if self.domain_name and self.domain_name not in {"your-domain.com", "localhost"}:
            return [
                f"http://{self.domain_name}",
                f"https://{self.domain_name}",
                f"https://www.{self.domain_name}",
            ]
        return list(self._dev_origins)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
