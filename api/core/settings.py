"""
Environment-driven settings.

Each value is read on call so tests can monkeypatch the environment.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return raw not in {"0", "false", "False", "no", "off"}


def content_dir() -> Path:
    return Path(os.environ.get("CONTENT_DIR", "").strip() or "content")


def sync_on_startup() -> bool:
    return _env_bool("CONTENT_SYNC_ON_STARTUP", True)


def admin_token() -> str:
    # Empty means the sync endpoint is disabled.
    return os.environ.get("CONTENT_ADMIN_TOKEN", "").strip()


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def db_pool_min() -> int:
    return max(1, _env_int("DB_POOL_MIN", 1))


def db_pool_max() -> int:
    return max(db_pool_min(), _env_int("DB_POOL_MAX", 5))
