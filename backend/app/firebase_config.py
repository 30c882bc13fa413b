#!/usr/bin/env python3
"""
Optional Firestore client used to mirror the persisted cache documents.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, firestore

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_firestore_client(credentials_path: Optional[str]) -> Optional[Any]:
    """
    Return a Firestore client, or None when no credentials are configured.

    Without Firestore the stores persist to local disk only.
    """
    if not credentials_path:
        logger.info("FIREBASE_CREDENTIALS_PATH not set. Firestore mirror disabled.")
        return None

    try:
        firebase_admin.get_app()
    except ValueError:
        try:
            firebase_admin.initialize_app(credentials.Certificate(credentials_path))
        except (OSError, ValueError) as exc:
            logger.error("Unable to initialise Firebase from %s: %s", credentials_path, exc)
            return None

    return firestore.client()
