#!/usr/bin/env python3
"""
Event listing and cache refresh endpoints.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ...core.container import ServiceContainer
from ...services.events import AggregationResult, CacheDocument, CacheSummary, Location, RawScraperRecord
from ..auth import verify_refresh_secret
from ..schemas import (
    EventQueryRequest,
    EventQueryResponse,
    EventSummary,
    RefreshRequest,
    RefreshResponse,
)
from .system import get_container

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["Events"])


def _summary(summary: CacheSummary) -> EventSummary:
    return EventSummary(**summary.to_dict())


def _query_response(result: AggregationResult) -> EventQueryResponse:
    return EventQueryResponse(
        events=[event.to_dict() for event in result.events],
        total=len(result.events),
        from_cache=result.from_cache,
        summary=_summary(result.summary),
        sources={
            "scraper": result.summary.from_scraper,
            "third_party": result.summary.from_third_party,
        },
        last_updated=result.last_updated,
    )


def _resolve_location(
    container: ServiceContainer,
    latitude: Optional[float],
    longitude: Optional[float],
) -> Location:
    settings = container.settings
    if latitude is None or longitude is None:
        return Location(settings.default_latitude, settings.default_longitude)
    return Location(latitude, longitude)


@router.post(
    "/combined",
    response_model=EventQueryResponse,
    summary="List League Cups and Challenges near a location",
)
async def combined_events(
    query: EventQueryRequest,
    container: ServiceContainer = Depends(get_container),
) -> EventQueryResponse:
    """
    Merged scraper and locator listings within ``radius`` miles.

    Served from the combined cache while it is fresh. Upstream or storage
    failures shrink the result instead of failing the request.
    """
    settings = container.settings
    location = _resolve_location(container, query.latitude, query.longitude)
    region = query.state or settings.default_region

    try:
        result = await container.aggregation_service.get_events(
            location,
            query.radius,
            region,
            use_cache=query.use_cache,
            country=query.country or settings.default_country,
        )
    except Exception as exc:
        logger.error("Combined event query failed: %s", exc, exc_info=True)
        return EventQueryResponse(summary=EventSummary())

    return _query_response(result)


async def _run_refresh(container: ServiceContainer, payload: Optional[RefreshRequest]) -> RefreshResponse:
    settings = container.settings
    payload = payload or RefreshRequest()

    records = None
    if payload.scraper_results is not None:
        records = [RawScraperRecord.from_dict(item.model_dump()) for item in payload.scraper_results.events]

    try:
        document: CacheDocument = await container.aggregation_service.refresh(
            _resolve_location(container, payload.latitude, payload.longitude),
            payload.radius or settings.default_radius_miles,
            payload.state or settings.default_region,
            scraper_records=records,
            country=payload.country or settings.default_country,
        )
    except Exception as exc:
        logger.error("Cache refresh failed: %s", exc, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Cache refresh failed: {exc}",
        )

    message = "Cache updated with new scraper data" if records is not None else "Cache refresh complete"
    return RefreshResponse(
        success=True,
        message=message,
        summary=_summary(document.summary),
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/refresh",
    response_model=RefreshResponse,
    dependencies=[Depends(verify_refresh_secret)],
    summary="Rebuild the combined cache (scheduler entry point)",
)
async def refresh_cache(container: ServiceContainer = Depends(get_container)) -> RefreshResponse:
    return await _run_refresh(container, None)


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    dependencies=[Depends(verify_refresh_secret)],
    summary="Upload a scraper batch and rebuild the combined cache",
)
async def upload_and_refresh(
    payload: Optional[RefreshRequest] = Body(default=None),
    container: ServiceContainer = Depends(get_container),
) -> RefreshResponse:
    return await _run_refresh(container, payload)
