#!/usr/bin/env python3
"""
Persistence for the combined event cache and the raw scraper snapshot.

Each store owns one JSON document written wholesale to disk and, when a
Firestore client is configured, mirrored to a Firestore document. Reads
prefer the disk copy and fall back to Firestore.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from .events.models import CacheDocument, RawScraperRecord

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

CACHE_FILE_NAME = "events-cache.json"
SCRAPER_FILE_NAME = "scraper-results.json"
DEFAULT_COLLECTION = "tcg_event_cache"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JsonDocument:
    """A single JSON blob on disk with an optional Firestore mirror."""

    def __init__(
        self,
        *,
        path: Path,
        document_id: str,
        firestore_client: Any = None,
        collection: str = DEFAULT_COLLECTION,
    ) -> None:
        self.path = path
        self.document_id = document_id
        self.firestore_client = firestore_client
        self.collection = collection

        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> Optional[Dict[str, Any]]:
        data = self._load_from_disk()
        if data is not None:
            return data
        return self._load_from_firestore()

    def save(self, data: Dict[str, Any]) -> bool:
        """Persist ``data``; returns False when no backend accepted the write."""
        saved_to_disk = self._save_to_disk(data)
        saved_to_firestore = self._save_to_firestore(data)
        return saved_to_disk or saved_to_firestore

    def _load_from_disk(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, ValueError) as exc:
            logger.error("Failed to read %s: %s", self.path, exc)
            return None

    def _save_to_disk(self, data: Dict[str, Any]) -> bool:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2)
            tmp_path.replace(self.path)
            return True
        except OSError as exc:
            logger.error("Failed to write %s: %s", self.path, exc)
            return False

    def _load_from_firestore(self) -> Optional[Dict[str, Any]]:
        if self.firestore_client is None:
            return None
        try:
            doc = self.firestore_client.collection(self.collection).document(self.document_id).get()
            if not doc.exists:
                return None
            return doc.to_dict()
        except Exception as exc:  # pragma: no cover - best-effort
            logger.warning("Unable to load Firestore document %s: %s", self.document_id, exc)
            return None

    def _save_to_firestore(self, data: Dict[str, Any]) -> bool:
        if self.firestore_client is None:
            return False
        try:
            self.firestore_client.collection(self.collection).document(self.document_id).set(data)
            return True
        except Exception as exc:  # pragma: no cover - best-effort
            logger.warning("Failed to store Firestore document %s: %s", self.document_id, exc)
            return False


class CombinedCacheStore:
    """Time-bounded store for the merged event collection."""

    def __init__(
        self,
        *,
        cache_dir: Path,
        ttl: timedelta = timedelta(hours=1),
        firestore_client: Any = None,
        collection: str = DEFAULT_COLLECTION,
        clock: Clock = utc_now,
    ) -> None:
        self.ttl = ttl
        self.clock = clock
        self._document = JsonDocument(
            path=cache_dir / CACHE_FILE_NAME,
            document_id="combined_events",
            firestore_client=firestore_client,
            collection=collection,
        )

    @property
    def path(self) -> Path:
        return self._document.path

    def read(self) -> Optional[CacheDocument]:
        data = self._document.load()
        if not isinstance(data, dict) or not data:
            return None
        return CacheDocument.from_dict(data)

    def write(self, document: CacheDocument) -> CacheDocument:
        """
        Overwrite the cache with ``document``.

        ``last_updated`` is stamped here and never moves backwards relative to
        the document being replaced.
        """
        stamped = self.clock()
        previous = self.read()
        if previous is not None and previous.last_updated > stamped:
            stamped = previous.last_updated
        document.last_updated = stamped

        if self._document.save(document.to_dict()):
            logger.info("Cache written: %d events", len(document.events))
        else:
            logger.error("Cache write failed; serving %d events from memory only", len(document.events))
        return document

    def age(self, document: Optional[CacheDocument] = None) -> Optional[timedelta]:
        document = document or self.read()
        if document is None:
            return None
        return self.clock() - document.last_updated

    def is_valid(self) -> bool:
        age = self.age()
        return age is not None and age < self.ttl


class ScraperSnapshotStore:
    """Stores the last batch uploaded by the out-of-process scraper."""

    def __init__(
        self,
        *,
        cache_dir: Path,
        firestore_client: Any = None,
        collection: str = DEFAULT_COLLECTION,
        clock: Clock = utc_now,
    ) -> None:
        self.clock = clock
        self._document = JsonDocument(
            path=cache_dir / SCRAPER_FILE_NAME,
            document_id="scraper_snapshot",
            firestore_client=firestore_client,
            collection=collection,
        )

    @property
    def path(self) -> Path:
        return self._document.path

    def read(self) -> Optional[List[RawScraperRecord]]:
        data = self._document.load()
        if data is None:
            return None
        if isinstance(data, dict):
            data = data.get("events") or []
        if not isinstance(data, list):
            return None
        return [RawScraperRecord.from_dict(item) for item in data if isinstance(item, dict)]

    def write(self, records: Sequence[RawScraperRecord]) -> bool:
        saved = self._document.save({
            "saved_at": self.clock().isoformat(),
            "events": [record.to_dict() for record in records],
        })
        if saved:
            logger.info("Scraper snapshot saved: %d records", len(records))
        else:
            logger.error("Scraper snapshot write failed (%d records)", len(records))
        return saved


def is_scraper_data_fresh(
    document: Optional[CacheDocument],
    now: Optional[datetime] = None,
    max_age: timedelta = timedelta(hours=24),
) -> bool:
    """Whether the snapshot behind ``document`` is recent enough to skip a re-scrape."""
    if document is None or document.last_scraper_run is None:
        return False
    now = now or utc_now()
    return now - document.last_scraper_run < max_age
