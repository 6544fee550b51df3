from __future__ import annotations

import logging
import os


def max_sessions() -> int:
    raw = (os.getenv("WATERMAP_MAX_SESSIONS") or "256").strip()
    try:
        return max(1, int(raw))
    except ValueError:
        return 256


def cors_origins() -> list[str]:
    raw = os.getenv("WATERMAP_CORS_ORIGINS") or "http://localhost:3000"
    return [o.strip() for o in raw.split(",") if o.strip()]


def log_level() -> int:
    name = (os.getenv("WATERMAP_LOG_LEVEL") or "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO
