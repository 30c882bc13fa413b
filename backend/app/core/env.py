#!/usr/bin/env python3
"""
Environment loading helpers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from dotenv import load_dotenv


_DEFAULT_ENV_PATHS: Iterable[Path] = (
    Path(".env"),
    Path("backend/.env"),
    Path(".env.local"),
)


def load_environment(paths: Iterable[Path] = _DEFAULT_ENV_PATHS) -> bool:
    """
    Load variables from the first existing candidate ``.env`` file.

    Variables already present in the process environment win. Returns True
    when one of ``paths`` was loaded.
    """
    for path in paths:
        if path.is_file() and load_dotenv(path, override=False):
            return True

    load_dotenv(override=False)
    return False
