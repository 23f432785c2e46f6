"""
Async database access helpers (raw SQL) using asyncpg.

The pool is created by the app lifespan (see `api/main.py`) and passed to the
repositories that need it. There is no module-level pool.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Every helper acquires one connection for the duration of a single statement
and gives it back on every exit path (success, error, timeout, cancellation).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from .config import Settings
from .errors import Cancelled, StoreError

logger = logging.getLogger(__name__)


def sanitize_database_url(url: str) -> str:
    """
    Drop `sslmode` from the DSN query string; asyncpg rejects it.
    """
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


async def create_pool(settings: Settings) -> asyncpg.Pool:
    # create_pool opens min_size connections, so a bad DSN fails here.
    pool = await asyncpg.create_pool(
        dsn=sanitize_database_url(settings.database_url),
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )
    logger.info(
        "db_pool_open min_size=%s max_size=%s",
        settings.pool_min_size,
        settings.pool_max_size,
    )
    return pool


async def close_pool(pool: asyncpg.Pool | None) -> None:
    if pool is None:
        return None
    await pool.close()
    logger.info("db_pool_closed")


async def _driver_call(coro: Any) -> Any:
    try:
        return await coro
    except asyncio.TimeoutError as exc:
        # Driver-side timeout (connect, reconnect, acquire): a store failure.
        raise StoreError(exc) from exc


async def _with_deadline(coro: Any, timeout: float | None) -> Any:
    if timeout is None:
        return await _driver_call(coro)
    try:
        return await asyncio.wait_for(_driver_call(coro), timeout)
    except asyncio.TimeoutError as exc:
        raise Cancelled("deadline exceeded") from exc


async def fetch_one(
    pool: asyncpg.Pool,
    sql: str,
    args: Sequence[Any] = (),
    *,
    timeout: float | None = None,
) -> asyncpg.Record | None:
    """
    Run a query and return its first row (or None).

    `timeout` bounds connection acquisition plus execution; on expiry
    `Cancelled` is raised and the connection is released. A timeout raised
    by the driver itself surfaces as `StoreError`.
    """

    async def _run() -> asyncpg.Record | None:
        async with pool.acquire() as conn:
            return await conn.fetchrow(sql, *args)

    return await _with_deadline(_run(), timeout)


async def fetch_all(
    pool: asyncpg.Pool,
    sql: str,
    args: Sequence[Any] = (),
    *,
    timeout: float | None = None,
) -> list[asyncpg.Record]:
    """
    Run a query and return all rows.
    """

    async def _run() -> list[asyncpg.Record]:
        async with pool.acquire() as conn:
            return await conn.fetch(sql, *args)

    return await _with_deadline(_run(), timeout)
