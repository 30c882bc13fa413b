#!/usr/bin/env python3
"""
Event sourcing, merging and aggregation services.
"""

from __future__ import annotations

from .aggregator import AggregationResult, AggregationService
from .locator import EventLocatorClient
from .merger import combine, filter_by_radius, summarize
from .models import (
    CacheDocument,
    CacheLocation,
    CacheSummary,
    Event,
    EventCategory,
    EventSource,
    Location,
    RawScraperRecord,
    RawThirdPartyRecord,
)
from .provider_base import EventProvider

__all__ = [
    "AggregationResult",
    "AggregationService",
    "CacheDocument",
    "CacheLocation",
    "CacheSummary",
    "Event",
    "EventCategory",
    "EventLocatorClient",
    "EventProvider",
    "EventSource",
    "Location",
    "RawScraperRecord",
    "RawThirdPartyRecord",
    "combine",
    "filter_by_radius",
    "summarize",
]
