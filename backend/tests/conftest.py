#!/usr/bin/env python3

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from backend.app.services.events import Location, RawScraperRecord, RawThirdPartyRecord
from backend.app.services.events.provider_base import EventProvider

# Bay Area default origin; one degree of latitude is ~69.1 miles.
ORIGIN = Location(37.52, -122.2758)
MILES_PER_DEGREE_LAT = 69.09


def north_of_origin(miles: float) -> float:
    return ORIGIN.latitude + miles / MILES_PER_DEGREE_LAT


class FakeClock:
    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeProvider(EventProvider):
    name = "fake-locator"

    def __init__(self, records: Optional[List[RawThirdPartyRecord]] = None, error: Optional[Exception] = None):
        self.records = records or []
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def fetch(self, location, radius_miles, region, *, country=None):
        self.calls.append({"location": location, "radius": radius_miles, "region": region, "country": country})
        # Suspend like a real network call so concurrent callers interleave.
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return list(self.records)


def scraper_record(**overrides: Any) -> RawScraperRecord:
    data = {
        "id": "",
        "type": "League Cup",
        "name": "League Cup",
        "date": "Tuesday, January 13, 2026",
        "time": "6:00 PM",
        "shop": "Joe's Cards",
        "address": "1 Main St",
        "city": "San Mateo",
        "state": "CA",
        "country": "US",
    }
    data.update(overrides)
    return RawScraperRecord(**data)


def locator_record(**overrides: Any) -> RawThirdPartyRecord:
    data: Dict[str, Any] = {
        "guid": "",
        "type": "League Cup",
        "name": "League Cup",
        "date": "2026-01-13",
        "when": "2026-01-13 17:30:00",
        "shop": "JOES CARDS",
        "city": "San Mateo",
        "state": "CA",
        "country_code": "US",
        "street_address": "1 Main Street",
        "cost": "$15",
        "pokemon_url": "https://events.example/joes",
        "juniors": 0,
        "seniors": 2,
        "masters": 10,
        "latitude": north_of_origin(8),
        "longitude": ORIGIN.longitude,
    }
    data.update(overrides)
    return RawThirdPartyRecord(**data)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
