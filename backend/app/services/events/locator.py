#!/usr/bin/env python3
"""
Client for the pokedata.ovh event locator table API.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import requests

from .models import EventCategory, Location, RawThirdPartyRecord
from .provider_base import EventProvider

logger = logging.getLogger(__name__)


DEFAULT_LOCATOR_URL = "https://pokedata.ovh/events/tableapi/"

# The locator truncates every response, so cups and challenges are requested
# separately. Every other kind flag stays blank; ``ftcg`` blank excludes
# non-premier TCG events.
_CATEGORY_FLAGS: Dict[EventCategory, Dict[str, str]] = {
    EventCategory.CUP: {"cups": "1", "challenges": ""},
    EventCategory.CHALLENGE: {"cups": "", "challenges": "1"},
}

_DISABLED_KINDS = (
    "vcups",
    "vchallenges",
    "prereleases",
    "premier",
    "go",
    "gocup",
    "mss",
    "ftcg",
    "fvg",
    "fgo",
)


class EventLocatorClient(EventProvider):
    """Fetches League Cup and League Challenge listings for a region."""

    name = "pokedata"

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_LOCATOR_URL,
        country: str = "US",
        timeout: float = 20.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = base_url
        self._country = country
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json; charset=UTF-8",
            "User-Agent": "tcg-event-locator/1.0",
        })

    async def fetch(
        self,
        location: Location,
        radius_miles: float,
        region: str,
        *,
        country: Optional[str] = None,
    ) -> List[RawThirdPartyRecord]:
        payload = self.build_payload(region, country=country or self._country)
        cups, challenges = await asyncio.gather(
            asyncio.to_thread(self._fetch_category, EventCategory.CUP, payload),
            asyncio.to_thread(self._fetch_category, EventCategory.CHALLENGE, payload),
        )
        logger.info(
            "Locator returned %d cups and %d challenges for region=%r (radius=%smi)",
            len(cups),
            len(challenges),
            region,
            radius_miles,
        )
        return cups + challenges

    def build_payload(self, region: str, *, country: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "past": "",
            "country": country,
            "city": "",
            "shop": "",
            "league": "",
            "states": json.dumps([region]) if region else "[]",
            "postcode": "",
            "latitude": "",
            "longitude": "",
            "radius": "",
            "unit": "mi",
            "width": 1200,
        }
        for kind in _DISABLED_KINDS:
            payload[kind] = ""
        return payload

    def _fetch_category(self, category: EventCategory, base_payload: Dict[str, Any]) -> List[RawThirdPartyRecord]:
        payload = {**base_payload, **_CATEGORY_FLAGS[category]}
        try:
            response = self._session.post(self._base_url, json=payload, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.error("Locator request for %s failed: %s", category.value, exc)
            return []

        if not response.ok:
            logger.warning(
                "Locator returned %s for %s: %s",
                response.status_code,
                category.value,
                response.text[:200],
            )
            return []

        try:
            data = response.json()
        except ValueError as exc:
            logger.warning("Locator returned non-JSON body for %s: %s", category.value, exc)
            return []

        if not isinstance(data, list):
            logger.warning("Locator returned %s instead of a list for %s", type(data).__name__, category.value)
            return []

        return [RawThirdPartyRecord.from_payload(item) for item in data if isinstance(item, dict)]
