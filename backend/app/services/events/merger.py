#!/usr/bin/env python3
"""
Merge scraper and locator listings into one deduplicated collection.

Scraper listings are inserted first and win on dedup-key collisions; the
locator only contributes stores the scraper did not report.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import cmp_to_key
from typing import Iterable, List, Optional, Sequence, Set

from .geo import distance_miles
from .models import (
    CacheSummary,
    Event,
    EventSource,
    Location,
    RawScraperRecord,
    RawThirdPartyRecord,
)
from .normalizer import (
    classify_category,
    dedup_key,
    is_iso_date,
    is_premier_event_type,
    parse_long_form_date,
    time_from_when,
)

logger = logging.getLogger(__name__)


def _slug(*parts: str) -> str:
    return "-".join(part for part in parts if part).replace(" ", "-")


def normalize_scraper_record(record: RawScraperRecord) -> Optional[Event]:
    date = parse_long_form_date(record.date)
    if date is None:
        logger.debug("Dropping scraper record %r: unparseable date %r", record.id, record.date)
        return None
    if not record.shop:
        logger.debug("Dropping scraper record %r: missing shop", record.id)
        return None
    if not is_premier_event_type(record.type):
        logger.debug("Dropping scraper record %r: non-premier type %r", record.id, record.type)
        return None

    return Event(
        source=EventSource.SCRAPER,
        category=classify_category(record.type),
        name=record.name,
        date=date,
        time=record.time,
        shop=record.shop,
        address=record.address,
        city=record.city,
        state=record.state,
        country=record.country,
        id=record.id or _slug("scraper", record.shop, date),
        display_date=record.date,
    )


def normalize_third_party_record(record: RawThirdPartyRecord) -> Optional[Event]:
    if not is_iso_date(record.date):
        logger.debug("Dropping locator record %r: invalid date %r", record.guid, record.date)
        return None
    if not record.shop:
        logger.debug("Dropping locator record %r: missing shop", record.guid)
        return None
    if not is_premier_event_type(record.type):
        logger.debug("Dropping locator record %r: non-premier type %r", record.guid, record.type)
        return None

    return Event(
        source=EventSource.THIRD_PARTY,
        category=classify_category(record.type),
        name=record.name,
        date=record.date,
        time=time_from_when(record.when),
        shop=record.shop,
        address=record.street_address,
        city=record.city,
        state=record.state,
        country=record.country_code,
        latitude=record.latitude,
        longitude=record.longitude,
        id=record.guid or _slug("third_party", record.shop, record.date),
        display_date=record.date,
        cost=record.cost,
        registration_url=record.pokemon_url,
        has_juniors=record.juniors > 0,
        has_seniors=record.seniors > 0,
        has_masters=record.masters > 0,
    )


def _with_distance(event: Event, origin: Location) -> Event:
    if not event.has_coordinates:
        return replace(event, distance_miles=None)
    return replace(
        event,
        distance_miles=distance_miles(origin.latitude, origin.longitude, event.latitude, event.longitude),
    )


def _within_radius(event: Event, radius_miles: float) -> bool:
    if event.source is EventSource.SCRAPER:
        return True
    return event.distance_miles is not None and event.distance_miles <= radius_miles


def _compare(a: Event, b: Event) -> int:
    if a.date != b.date:
        return -1 if a.date < b.date else 1
    if a.distance_miles is not None and b.distance_miles is not None:
        if a.distance_miles != b.distance_miles:
            return -1 if a.distance_miles < b.distance_miles else 1
    return 0


def sort_events(events: Iterable[Event]) -> List[Event]:
    """Ascending date, then ascending distance where both events have one."""
    return sorted(events, key=cmp_to_key(_compare))


def filter_by_radius(
    events: Iterable[Event],
    origin: Optional[Location],
    radius_miles: float,
) -> List[Event]:
    """
    Annotate distances from ``origin`` and drop locator events outside the radius.

    Scraper events are never excluded by distance. Without an origin the
    events are returned unfiltered with their distances cleared.
    """
    if origin is None or not origin.has_coordinates:
        return sort_events(replace(event, distance_miles=None) for event in events)

    placed = (_with_distance(event, origin) for event in events)
    return sort_events(event for event in placed if _within_radius(event, radius_miles))


def combine(
    scraper_records: Sequence[RawScraperRecord],
    third_party_records: Sequence[RawThirdPartyRecord],
    origin: Optional[Location] = None,
    radius_miles: float = 50,
) -> List[Event]:
    seen: Set[str] = set()
    combined: List[Event] = []

    for record in scraper_records:
        event = normalize_scraper_record(record)
        if event is None:
            continue
        key = dedup_key(event.date, event.shop, event.category)
        if key in seen:
            continue
        seen.add(key)
        combined.append(event)

    has_origin = origin is not None and origin.has_coordinates
    duplicates = 0
    out_of_range = 0
    for record in third_party_records:
        event = normalize_third_party_record(record)
        if event is None:
            continue
        # Out-of-range listings must not claim a key a nearer listing could use.
        if has_origin:
            event = _with_distance(event, origin)
            if not _within_radius(event, radius_miles):
                out_of_range += 1
                continue
        key = dedup_key(event.date, event.shop, event.category)
        if key in seen:
            duplicates += 1
            continue
        seen.add(key)
        combined.append(event)

    if has_origin:
        combined = [_with_distance(event, origin) for event in combined]

    logger.info(
        "Merged %d events (%d scraper records, %d locator records, %d duplicates, %d out of range)",
        len(combined),
        len(scraper_records),
        len(third_party_records),
        duplicates,
        out_of_range,
    )
    return sort_events(combined)


def summarize(events: Sequence[Event]) -> CacheSummary:
    return CacheSummary(
        total_events=len(events),
        from_scraper=sum(1 for event in events if event.source is EventSource.SCRAPER),
        from_third_party=sum(1 for event in events if event.source is EventSource.THIRD_PARTY),
        unique_stores=len({event.shop for event in events}),
    )
