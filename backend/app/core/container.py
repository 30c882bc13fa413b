#!/usr/bin/env python3
"""
Service container for shared backend dependencies.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Optional

from .settings import Settings, get_settings
from ..firebase_config import get_firestore_client
from ..services.cache import CombinedCacheStore, ScraperSnapshotStore
from ..services.events import AggregationService, EventLocatorClient, EventProvider


class ServiceContainer:
    """Lazily initialised service container."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._firestore_loaded = False
        self._firestore_client: Optional[Any] = None
        self._cache_store: CombinedCacheStore | None = None
        self._snapshot_store: ScraperSnapshotStore | None = None
        self._event_provider: EventProvider | None = None
        self._aggregation_service: AggregationService | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def firestore_client(self) -> Optional[Any]:
        if not self._firestore_loaded:
            self._firestore_client = get_firestore_client(self._settings.firebase_credentials_path)
            self._firestore_loaded = True
        return self._firestore_client

    @property
    def cache_store(self) -> CombinedCacheStore:
        if self._cache_store is None:
            self._cache_store = CombinedCacheStore(
                cache_dir=self._settings.cache_dir,
                ttl=self._settings.cache_ttl,
                firestore_client=self.firestore_client,
                collection=self._settings.firestore_collection,
            )
        return self._cache_store

    @property
    def snapshot_store(self) -> ScraperSnapshotStore:
        if self._snapshot_store is None:
            self._snapshot_store = ScraperSnapshotStore(
                cache_dir=self._settings.cache_dir,
                firestore_client=self.firestore_client,
                collection=self._settings.firestore_collection,
            )
        return self._snapshot_store

    @property
    def event_provider(self) -> EventProvider:
        if self._event_provider is None:
            self._event_provider = EventLocatorClient(
                base_url=self._settings.locator_url,
                country=self._settings.default_country,
                timeout=self._settings.locator_timeout_seconds,
            )
        return self._event_provider

    @property
    def aggregation_service(self) -> AggregationService:
        if self._aggregation_service is None:
            self._aggregation_service = AggregationService(
                cache_store=self.cache_store,
                snapshot_store=self.snapshot_store,
                provider=self.event_provider,
                scraper_max_age=self._settings.scraper_ttl,
            )
        return self._aggregation_service


@lru_cache(maxsize=1)
def get_service_container() -> ServiceContainer:
    """Return the shared service container instance."""
    return ServiceContainer(get_settings())
