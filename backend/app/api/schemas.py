#!/usr/bin/env python3
"""
Pydantic schemas for API requests and responses.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_QUERY_RADIUS_MILES = 50.0
MAX_RADIUS_MILES = 1000.0


def coerce_radius(value: Any, default: Optional[float]) -> Optional[float]:
    """Unusable radii fall back to ``default``; oversized ones are clamped."""
    try:
        radius = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(radius) or radius <= 0:
        return default
    return min(radius, MAX_RADIUS_MILES)


class EventQueryRequest(BaseModel):
    country: Optional[str] = Field(default=None, description="ISO country code, e.g. 'US'")
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    radius: float = Field(default=DEFAULT_QUERY_RADIUS_MILES, description="Search radius in miles")
    state: Optional[str] = Field(default=None, description="Region/state name, e.g. 'California'")
    use_cache: bool = True

    @field_validator("radius", mode="before")
    @classmethod
    def _radius_or_default(cls, value: Any) -> float:
        return coerce_radius(value, DEFAULT_QUERY_RADIUS_MILES)


class EventSummary(BaseModel):
    total_events: int = 0
    from_scraper: int = 0
    from_third_party: int = 0
    unique_stores: int = 0


class EventQueryResponse(BaseModel):
    events: List[Dict[str, Any]] = []
    total: int = 0
    from_cache: bool = False
    summary: EventSummary
    sources: Dict[str, int] = {}
    last_updated: Optional[datetime] = None


class ScraperRecordIn(BaseModel):
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


class ScraperBatch(BaseModel):
    events: List[ScraperRecordIn] = []


class RefreshRequest(BaseModel):
    scraper_results: Optional[ScraperBatch] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    radius: Optional[float] = None
    state: Optional[str] = None
    country: Optional[str] = None

    @field_validator("radius", mode="before")
    @classmethod
    def _radius_or_unset(cls, value: Any) -> Optional[float]:
        return coerce_radius(value, None)


class RefreshResponse(BaseModel):
    success: bool
    message: str
    summary: EventSummary
    timestamp: datetime
