#!/usr/bin/env python3
"""
Cache-aware aggregation of scraper and locator listings.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from ..cache import CombinedCacheStore, ScraperSnapshotStore, is_scraper_data_fresh
from .merger import combine, filter_by_radius, summarize
from .models import CacheDocument, CacheLocation, CacheSummary, Event, Location, RawScraperRecord
from .provider_base import EventProvider

logger = logging.getLogger(__name__)


@dataclass
class AggregationResult:
    events: List[Event]
    from_cache: bool
    summary: CacheSummary
    last_updated: Optional[datetime] = None


class AggregationService:
    """Serves merged listings, rebuilding the combined cache when it is stale."""

    def __init__(
        self,
        *,
        cache_store: CombinedCacheStore,
        snapshot_store: ScraperSnapshotStore,
        provider: EventProvider,
        scraper_max_age: timedelta = timedelta(hours=24),
    ) -> None:
        self.cache_store = cache_store
        self.snapshot_store = snapshot_store
        self.provider = provider
        self.scraper_max_age = scraper_max_age
        self._rebuild_lock = asyncio.Lock()

    async def get_events(
        self,
        location: Location,
        radius_miles: float,
        region: str,
        use_cache: bool = True,
        *,
        country: Optional[str] = None,
    ) -> AggregationResult:
        if use_cache:
            cached = self._from_cache(location, radius_miles)
            if cached is not None:
                return cached

        async with self._rebuild_lock:
            # A concurrent request may have rebuilt while this one waited.
            if use_cache:
                cached = self._from_cache(location, radius_miles)
                if cached is not None:
                    return cached

            logger.info("Cache stale, rebuilding for region=%r radius=%smi", region, radius_miles)
            document = await self._rebuild(location, radius_miles, region, country=country)

        return AggregationResult(
            events=document.events,
            from_cache=False,
            summary=document.summary,
            last_updated=document.last_updated,
        )

    async def refresh(
        self,
        location: Location,
        radius_miles: float,
        region: str,
        scraper_records: Optional[Sequence[RawScraperRecord]] = None,
        *,
        country: Optional[str] = None,
    ) -> CacheDocument:
        """
        Administrative refresh: optionally store a new scraper batch, then rebuild.

        The TTL is bypassed. ``last_scraper_run`` is stamped only when a batch
        was supplied and persisted.
        """
        async with self._rebuild_lock:
            scraper_run: Optional[datetime] = None
            if scraper_records is not None:
                logger.info("Saving %d scraper records", len(scraper_records))
                if self.snapshot_store.write(scraper_records):
                    scraper_run = self.cache_store.clock()
            document = await self._rebuild(location, radius_miles, region, scraper_run=scraper_run, country=country)

        logger.info(
            "Cache refresh complete: total=%d scraper=%d third_party=%d",
            document.summary.total_events,
            document.summary.from_scraper,
            document.summary.from_third_party,
        )
        return document

    def scraper_data_fresh(self) -> bool:
        document = self.cache_store.read()
        return is_scraper_data_fresh(document, self.cache_store.clock(), self.scraper_max_age)

    def _from_cache(self, location: Location, radius_miles: float) -> Optional[AggregationResult]:
        if not self.cache_store.is_valid():
            return None
        document = self.cache_store.read()
        if document is None:
            return None

        events = filter_by_radius(document.events, location, radius_miles)
        logger.info("Returning %d cached events (of %d)", len(events), len(document.events))
        return AggregationResult(
            events=events,
            from_cache=True,
            summary=summarize(events),
            last_updated=document.last_updated,
        )

    async def _rebuild(
        self,
        location: Location,
        radius_miles: float,
        region: str,
        *,
        scraper_run: Optional[datetime] = None,
        country: Optional[str] = None,
    ) -> CacheDocument:
        scraper_records = self.snapshot_store.read() or []
        logger.info("Scraper snapshot: %d records", len(scraper_records))

        try:
            third_party_records = await self.provider.fetch(location, radius_miles, region, country=country)
        except Exception as exc:  # pragma: no cover - defensive
            logger.error("%s fetch failed: %s", self.provider.name, exc)
            third_party_records = []
        logger.info("%s: %d records", self.provider.name, len(third_party_records))

        events = combine(scraper_records, third_party_records, location, radius_miles)

        if scraper_run is None:
            previous = self.cache_store.read()
            scraper_run = previous.last_scraper_run if previous else None

        document = CacheDocument(
            last_updated=self.cache_store.clock(),
            last_scraper_run=scraper_run,
            location=CacheLocation(
                lat=location.latitude,
                lng=location.longitude,
                radius=radius_miles,
                region=region,
            ),
            summary=summarize(events),
            events=events,
        )
        return self.cache_store.write(document)
