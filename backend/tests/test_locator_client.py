#!/usr/bin/env python3

from __future__ import annotations

import json
import threading
from typing import Any, Dict, List

import pytest
import requests

from backend.app.services.events.locator import EventLocatorClient

from conftest import ORIGIN


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text or json.dumps(payload)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Routes requests by category flag: ``cups`` or ``challenges``."""

    def __init__(self, responses: Dict[str, Any]):
        self.headers: Dict[str, str] = {}
        self.responses = responses
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def post(self, url: str, json: Dict[str, Any], timeout: float):
        with self._lock:
            self.calls.append({"url": url, "json": json, "timeout": timeout})
        category = "cups" if json["cups"] == "1" else "challenges"
        outcome = self.responses[category]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def cup_payload() -> List[Dict[str, Any]]:
    return [{
        "guid": "cup-1",
        "type": "League Cup",
        "name": "January Cup",
        "date": "2026-01-13",
        "when": "2026-01-13 17:30:00",
        "shop": "Joe's Cards",
        "street_address": "1 Main St",
        "country_code": "US",
        "juniors": "3",
        "latitude": "37.6",
        "longitude": "-122.3",
    }]


def challenge_payload() -> List[Dict[str, Any]]:
    return [{"guid": "ch-1", "type": "League Challenge", "date": "2026-01-14", "shop": "Game Kastle"}]


@pytest.mark.asyncio
async def test_fetch_requests_each_category_and_concatenates() -> None:
    session = FakeSession({
        "cups": FakeResponse(payload=cup_payload()),
        "challenges": FakeResponse(payload=challenge_payload()),
    })
    client = EventLocatorClient(base_url="https://locator.test/api", timeout=7, session=session)

    records = await client.fetch(ORIGIN, 50, "California")

    assert [record.guid for record in records] == ["cup-1", "ch-1"]
    assert records[0].latitude == pytest.approx(37.6)
    assert records[0].juniors == 3
    assert records[1].latitude is None

    assert len(session.calls) == 2
    flags = sorted((call["json"]["cups"], call["json"]["challenges"]) for call in session.calls)
    assert flags == [("", "1"), ("1", "")]
    for call in session.calls:
        assert call["url"] == "https://locator.test/api"
        assert call["timeout"] == 7
        assert call["json"]["states"] == '["California"]'
        assert call["json"]["country"] == "US"
        for kind in ("vcups", "vchallenges", "prereleases", "go", "gocup", "ftcg", "fvg", "fgo"):
            assert call["json"][kind] == ""


@pytest.mark.asyncio
async def test_failed_category_does_not_void_the_other() -> None:
    session = FakeSession({
        "cups": requests.ConnectionError("connection refused"),
        "challenges": FakeResponse(payload=challenge_payload()),
    })
    client = EventLocatorClient(session=session)

    records = await client.fetch(ORIGIN, 50, "California")

    assert [record.guid for record in records] == ["ch-1"]


@pytest.mark.asyncio
async def test_error_status_and_bad_bodies_yield_no_records() -> None:
    session = FakeSession({
        "cups": FakeResponse(status_code=503, payload={"error": "down"}),
        "challenges": FakeResponse(payload={"events": []}),
    })
    client = EventLocatorClient(session=session)

    assert await client.fetch(ORIGIN, 50, "California") == []


@pytest.mark.asyncio
async def test_non_json_body_yields_no_records() -> None:
    session = FakeSession({
        "cups": FakeResponse(payload=ValueError("no json"), text="<html>"),
        "challenges": FakeResponse(payload=[]),
    })
    client = EventLocatorClient(session=session)

    assert await client.fetch(ORIGIN, 50, "California") == []


def test_payload_without_region_and_with_country_override() -> None:
    client = EventLocatorClient(session=FakeSession({}))

    payload = client.build_payload("", country="CA")

    assert payload["states"] == "[]"
    assert payload["country"] == "CA"
    assert payload["unit"] == "mi"
