#!/usr/bin/env python3
"""
Event provider base definitions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from .models import Location, RawThirdPartyRecord


class EventProvider(ABC):
    """Abstract base class for live event sources."""

    name: str

    @abstractmethod
    async def fetch(
        self,
        location: Location,
        radius_miles: float,
        region: str,
        *,
        country: Optional[str] = None,
    ) -> List[RawThirdPartyRecord]:
        """Fetch raw listings near ``location``; never raises for upstream failures."""
