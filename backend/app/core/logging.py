#!/usr/bin/env python3
"""
Logging utilities for the backend application.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """
    Configure the root logger once.

    Parameters
    ----------
    level:
        Level number or name (``"DEBUG"``). Defaults to INFO; unknown names
        fall back to INFO as well.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=_FORMAT)
    else:
        root.setLevel(level)
    # Keep per-request connection chatter out of the service log.
    logging.getLogger("urllib3").setLevel(max(level, logging.WARNING))
