# brewshare_backend/app/utils/logs.py
from __future__ import annotations

import logging

from brewshare_backend.app.config import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# What it does:
# Named "brewshare.*" logger with a stream handler on the package root,
# level taken from BREWSHARE_LOG_LEVEL.
def get_logger(name: str) -> logging.Logger:
    root = logging.getLogger("brewshare")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
        root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    return logging.getLogger(f"brewshare.{name}")

# What it does:
# Short, single-line preview of pasted input for log messages.
def preview(text: str, limit: int = 60) -> str:
    s = (text or "").strip().replace("\n", " ")
    return s if len(s) <= limit else s[:limit] + "…"
