# brewshare_backend/app/config/__init__.py
from __future__ import annotations

# Re-export config surface expected by callers across the app.

# Env settings live in manifest.py
from .manifest import (
    APP_ENV,
    DEBUG_MODE,
    LOG_LEVEL,
    MAX_INPUT_CHARS,
    CORS_ORIGINS,
)

__all__ = [
    "APP_ENV",
    "DEBUG_MODE",
    "LOG_LEVEL",
    "MAX_INPUT_CHARS",
    "CORS_ORIGINS",
]
