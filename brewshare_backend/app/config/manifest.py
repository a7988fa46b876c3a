# brewshare_backend/app/config/manifest.py
from __future__ import annotations

import os
from typing import List

# ---- Environment mode ----
APP_ENV: str = os.getenv("APP_ENV", "development")
DEBUG_MODE: bool = os.getenv("DEBUG", "0") not in ("", "0", "false", "False")

# ---- Logging ----
LOG_LEVEL: str = (os.getenv("BREWSHARE_LOG_LEVEL", "").strip() or ("DEBUG" if DEBUG_MODE else "INFO")).upper()

# ---- Import limits ----
# Pasted payloads above this size are refused by the HTTP layer before parsing.
def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if raw.isdigit():
        return max(1, int(raw))
    return default

MAX_INPUT_CHARS: int = _int_env("BREWSHARE_MAX_INPUT_CHARS", 200_000)

# ---- CORS (share/import UI dev servers) ----
def _csv_env(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name, "")
    items = [s.strip() for s in raw.split(",") if s.strip()]
    return items or default

CORS_ORIGINS: List[str] = _csv_env(
    "BREWSHARE_CORS_ORIGINS",
    ["http://localhost:5173", "http://127.0.0.1:5173"],
)


__all__ = ["APP_ENV", "DEBUG_MODE", "LOG_LEVEL", "MAX_INPUT_CHARS", "CORS_ORIGINS"]
