#!/usr/bin/env python3
"""
Normalisation helpers for heterogeneous upstream event fields.

Every function here is total: unparseable input yields an empty/``None``
sentinel and the caller decides whether that disqualifies the record.
"""

from __future__ import annotations

import re
from typing import Optional

from .models import EventCategory

SHOP_KEY_LENGTH = 15

_MONTHS = {
    "january": "01",
    "february": "02",
    "march": "03",
    "april": "04",
    "may": "05",
    "june": "06",
    "july": "07",
    "august": "08",
    "september": "09",
    "october": "10",
    "november": "11",
    "december": "12",
}

_LONG_DATE_RE = re.compile(
    r"^\s*(?:[A-Za-z]+,\s*)?(" + "|".join(_MONTHS) + r")\s+(\d{1,2}),\s*(\d{4})\s*$",
    re.IGNORECASE,
)
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_24H_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*$")
_MERIDIEM_RE = re.compile(r"\b[ap]\.?m\.?\b", re.IGNORECASE)

# Kinds the locator and scraper can report that are not TCG premier events.
_NON_TCG_MARKERS = ("vgc", "video game", "pokemon go", "pokémon go", "go cup", "go challenge")


def normalize_shop_name(raw: Optional[str]) -> str:
    """Uppercase alphanumeric prefix used to match one store across sources."""
    if not raw:
        return ""
    return re.sub(r"[^A-Z0-9]", "", raw.upper())[:SHOP_KEY_LENGTH]


def is_premier_event_type(raw_type: Optional[str]) -> bool:
    if not raw_type:
        return False
    lowered = raw_type.lower()
    if any(marker in lowered for marker in _NON_TCG_MARKERS):
        return False
    return "cup" in lowered or "challenge" in lowered


def classify_category(raw_type: Optional[str]) -> EventCategory:
    if raw_type and "cup" in raw_type.lower():
        return EventCategory.CUP
    return EventCategory.CHALLENGE


def parse_long_form_date(raw: Optional[str]) -> Optional[str]:
    """
    Convert ``"Tuesday, January 13, 2026"`` (weekday optional) to ``"2026-01-13"``.

    Returns ``None`` when the text does not match; callers drop the record.
    """
    if not raw:
        return None
    match = _LONG_DATE_RE.match(raw)
    if not match:
        return None
    month = _MONTHS[match.group(1).lower()]
    day = int(match.group(2))
    if not 1 <= day <= 31:
        return None
    return f"{match.group(3)}-{month}-{day:02d}"


def is_iso_date(raw: Optional[str]) -> bool:
    return bool(raw) and bool(_ISO_DATE_RE.match(raw))


def time_from_when(raw: Optional[str]) -> str:
    """Extract ``HH:MM`` from the locator's ``"2026-01-11 17:30:00"`` field."""
    if not raw:
        return ""
    parts = raw.strip().split(" ")
    if len(parts) < 2:
        return ""
    return parts[1][:5]


def to_12_hour(raw: Optional[str]) -> str:
    if not raw:
        return ""
    if _MERIDIEM_RE.search(raw):
        return raw
    match = _TIME_24H_RE.match(raw)
    if not match:
        return raw
    hour = int(match.group(1))
    minutes = match.group(2)
    if hour > 23 or int(minutes) > 59:
        return raw
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12:02d}:{minutes} {suffix}"


def dedup_key(date: str, shop: str, category: EventCategory) -> str:
    return f"{date}|{normalize_shop_name(shop)}|{category.value}"
