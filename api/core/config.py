"""
Environment-backed settings.

Read once at startup (see `api/main.py`) and handed to the pieces that need
them. Feature code never reads `os.environ` directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    items = tuple(part.strip() for part in raw.split(",") if part.strip())
    return items or default


def cors_allow_origins() -> tuple[str, ...]:
    return _env_list("CORS_ALLOW_ORIGINS", ("*",))


@dataclass(frozen=True)
class Settings:
    database_url: str
    host: str = "0.0.0.0"
    port: int = 8080
    pool_min_size: int = 1
    pool_max_size: int = 5
    # None disables the per-query deadline.
    query_timeout_s: float | None = 10.0
    cors_allow_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"
    shutdown_timeout_s: int = 10


def load_settings() -> Settings:
    """
    Build settings from the environment.

    `DATABASE_URL` wins over the older `DB_URL` name.
    """
    database_url = os.environ.get("DATABASE_URL", "").strip() or os.environ.get("DB_URL", "").strip()
    if not database_url:
        raise RuntimeError("DATABASE_URL is not set.")

    timeout = _env_float("DB_QUERY_TIMEOUT_S", 10.0)
    pool_min = max(0, _env_int("DB_POOL_MIN_SIZE", 1))
    pool_max = max(1, _env_int("DB_POOL_MAX_SIZE", 5))

    return Settings(
        database_url=database_url,
        host=_env_str("HOST", "0.0.0.0"),
        port=_env_int("PORT", 8080),
        pool_min_size=min(pool_min, pool_max),
        pool_max_size=pool_max,
        query_timeout_s=timeout if timeout > 0 else None,
        cors_allow_origins=cors_allow_origins(),
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        shutdown_timeout_s=_env_int("SHUTDOWN_TIMEOUT_S", 10),
    )
