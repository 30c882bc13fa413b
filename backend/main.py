#!/usr/bin/env python3
"""
ASGI entry point: ``uvicorn backend.main:app`` from the repository root.
"""

from __future__ import annotations

import os

import uvicorn

from backend.app.core.app import create_app

app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
