#!/usr/bin/env python3
"""
Shared-secret authentication for the administrative refresh endpoint.
"""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyQuery, HTTPAuthorizationCredentials, HTTPBearer

from ..core.settings import Settings, get_settings

logger = logging.getLogger(__name__)


bearer_scheme = HTTPBearer(auto_error=False)
secret_query = APIKeyQuery(name="secret", auto_error=False)


def secret_matches(supplied: Optional[str], expected: str) -> bool:
    """Constant-time comparison; an unset expected secret never matches."""
    if not supplied or not expected:
        return False
    return secrets.compare_digest(supplied.encode(), expected.encode())


async def verify_refresh_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    query_secret: Optional[str] = Security(secret_query),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Dependency guarding the refresh endpoint.

    The secret may be sent as ``Authorization: Bearer <secret>`` or as the
    ``secret`` query parameter. Development mode skips the check.

    Raises:
        HTTPException: 401 when the secret is missing or does not match.
    """
    if settings.is_development:
        return

    supplied = query_secret or (credentials.credentials if credentials else None)
    if secret_matches(supplied, settings.refresh_secret):
        return

    logger.warning("Rejected refresh request with %s secret", "invalid" if supplied else "missing")
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
    )
