#!/usr/bin/env python3
"""
Record and event types shared by the aggregation pipeline.

Upstream payloads are parsed into ``RawScraperRecord`` / ``RawThirdPartyRecord``
as soon as they enter the process, and every merged listing is an ``Event``
carrying an explicit ``source`` tag.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class EventSource(str, Enum):
    SCRAPER = "scraper"
    THIRD_PARTY = "third_party"


class EventCategory(str, Enum):
    CUP = "League Cup"
    CHALLENGE = "League Challenge"


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _parse_timestamp(raw: Any) -> datetime:
    parsed = datetime.fromisoformat(str(raw))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class Location:
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass
class RawScraperRecord:
    """A listing as emitted by the out-of-process scraper."""

    id: str = ""
    type: str = ""
    name: str = ""
    date: str = ""
    time: str = ""
    shop: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawScraperRecord":
        return cls(
            id=_text(data.get("id")),
            type=_text(data.get("type")),
            name=_text(data.get("name")),
            date=_text(data.get("date")),
            time=_text(data.get("time")),
            shop=_text(data.get("shop")),
            address=_text(data.get("address")),
            city=_text(data.get("city")),
            state=_text(data.get("state")),
            country=_text(data.get("country")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RawThirdPartyRecord:
    """A listing as returned by the remote event locator."""

    guid: str = ""
    type: str = ""
    name: str = ""
    date: str = ""
    when: str = ""
    shop: str = ""
    city: str = ""
    state: str = ""
    country_code: str = ""
    street_address: str = ""
    cost: str = ""
    pokemon_url: str = ""
    juniors: int = 0
    seniors: int = 0
    masters: int = 0
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "RawThirdPartyRecord":
        return cls(
            guid=_text(data.get("guid")),
            type=_text(data.get("type")),
            name=_text(data.get("name")),
            date=_text(data.get("date")),
            when=_text(data.get("when")),
            shop=_text(data.get("shop")),
            city=_text(data.get("city")),
            state=_text(data.get("state")),
            country_code=_text(data.get("country_code") or data.get("country")),
            street_address=_text(data.get("street_address") or data.get("address")),
            cost=_text(data.get("cost")),
            pokemon_url=_text(data.get("pokemon_url")),
            juniors=_to_int(data.get("juniors")),
            seniors=_to_int(data.get("seniors")),
            masters=_to_int(data.get("masters")),
            latitude=_to_float(data.get("latitude")),
            longitude=_to_float(data.get("longitude")),
        )


@dataclass
class Event:
    """Canonical listing served to consumers."""

    source: EventSource
    category: EventCategory
    name: str
    date: str
    time: str = ""
    shop: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    distance_miles: Optional[float] = None
    id: str = ""
    display_date: str = ""
    cost: str = ""
    registration_url: str = ""
    has_juniors: bool = True
    has_seniors: bool = True
    has_masters: bool = True

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> Dict[str, Any]:
        # Imported lazily: normalizer depends on this module for EventCategory.
        from .normalizer import to_12_hour

        data = asdict(self)
        data["source"] = self.source.value
        data["category"] = self.category.value
        data["display_time"] = to_12_hour(self.time)
        if self.distance_miles is None:
            data.pop("distance_miles")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        return cls(
            source=EventSource(data["source"]),
            category=EventCategory(data["category"]),
            name=_text(data.get("name")),
            date=_text(data.get("date")),
            time=_text(data.get("time")),
            shop=_text(data.get("shop")),
            address=_text(data.get("address")),
            city=_text(data.get("city")),
            state=_text(data.get("state")),
            country=_text(data.get("country")),
            latitude=_to_float(data.get("latitude")),
            longitude=_to_float(data.get("longitude")),
            distance_miles=_to_float(data.get("distance_miles")),
            id=_text(data.get("id")),
            display_date=_text(data.get("display_date")),
            cost=_text(data.get("cost")),
            registration_url=_text(data.get("registration_url")),
            has_juniors=bool(data.get("has_juniors", True)),
            has_seniors=bool(data.get("has_seniors", True)),
            has_masters=bool(data.get("has_masters", True)),
        )


@dataclass
class CacheSummary:
    total_events: int = 0
    from_scraper: int = 0
    from_third_party: int = 0
    unique_stores: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheSummary":
        return cls(
            total_events=_to_int(data.get("total_events")),
            from_scraper=_to_int(data.get("from_scraper")),
            from_third_party=_to_int(data.get("from_third_party")),
            unique_stores=_to_int(data.get("unique_stores")),
        )


@dataclass
class CacheLocation:
    """Query parameters a cached collection was built for."""

    lat: Optional[float] = None
    lng: Optional[float] = None
    radius: float = 50
    region: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheLocation":
        radius = _to_float(data.get("radius"))
        return cls(
            lat=_to_float(data.get("lat")),
            lng=_to_float(data.get("lng")),
            radius=radius if radius is not None else 50,
            region=_text(data.get("region")),
        )


@dataclass
class CacheDocument:
    last_updated: datetime
    location: CacheLocation
    summary: CacheSummary
    events: List[Event] = field(default_factory=list)
    last_scraper_run: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "last_updated": self.last_updated.isoformat(),
            "last_scraper_run": self.last_scraper_run.isoformat() if self.last_scraper_run else None,
            "location": self.location.to_dict(),
            "summary": self.summary.to_dict(),
            "events": [event.to_dict() for event in self.events],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["CacheDocument"]:
        try:
            last_updated_raw = data.get("last_updated")
            if not last_updated_raw:
                return None
            last_run_raw = data.get("last_scraper_run")
            location = data.get("location") or {}
            summary = data.get("summary") or {}
            events = data.get("events") or []
            if not isinstance(location, dict) or not isinstance(summary, dict) or not isinstance(events, list):
                logger.warning("Cache document has malformed location, summary or events; ignoring it")
                return None
            return cls(
                last_updated=_parse_timestamp(last_updated_raw),
                last_scraper_run=_parse_timestamp(last_run_raw) if last_run_raw else None,
                location=CacheLocation.from_dict(location),
                summary=CacheSummary.from_dict(summary),
                events=[Event.from_dict(item) for item in events],
            )
        except Exception as exc:
            logger.warning("Failed to restore cache document: %s", exc)
            return None
