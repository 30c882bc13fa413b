#!/usr/bin/env python3
"""
System and diagnostics endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ...core.container import ServiceContainer, get_service_container

router = APIRouter()

logger = logging.getLogger(__name__)


def get_container() -> ServiceContainer:
    return get_service_container()


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": "1.0.0",
    }


@router.get("/api/cache/status")
async def cache_status(container: ServiceContainer = Depends(get_container)):
    """Report combined cache age and scraper snapshot freshness."""
    cache_store = container.cache_store
    service = container.aggregation_service
    document = cache_store.read()
    if document is None:
        return {"success": True, "cached": False, "valid": False, "scraper_fresh": False}

    age = cache_store.age(document)
    return {
        "success": True,
        "cached": True,
        "valid": cache_store.is_valid(),
        "last_updated": document.last_updated.isoformat(),
        "age_minutes": round(age.total_seconds() / 60, 1) if age is not None else None,
        "ttl_minutes": cache_store.ttl.total_seconds() / 60,
        "last_scraper_run": document.last_scraper_run.isoformat() if document.last_scraper_run else None,
        "scraper_fresh": service.scraper_data_fresh(),
        "location": document.location.to_dict(),
        "summary": document.summary.to_dict(),
    }
