"""
Province / city persistence (raw SQL over asyncpg).

Tables:
- tb_provinces (id, code, name, name_english)
- tb_cities    (id, province_id -> tb_provinces.id, name, name_english)

Failures leave this module as one of: NotFound (single-row lookup only),
Cancelled (deadline exceeded), StoreError (everything else). Task
cancellation (asyncio.CancelledError) passes through untouched.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, TypeVar

import asyncpg

from core import db, query
from core.errors import Cancelled, NotFound, StoreError
from core.rows import RowMappingError, decode

from .entities import City, Province, decode_city, decode_province

PROVINCES_TABLE = "tb_provinces"
CITIES_TABLE = "tb_cities"

# Order must match decode_province / decode_city.
PROVINCE_COLUMNS = ("id", "name", "name_english", "code")
CITY_COLUMNS = ("id", "name", "name_english")

_UNSET: Any = object()

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ProvinceRepository:
    def __init__(self, pool: asyncpg.Pool, *, query_timeout: float | None = None) -> None:
        self._pool = pool
        self._query_timeout = query_timeout

    def _timeout(self, timeout: float | None) -> float | None:
        return self._query_timeout if timeout is _UNSET else timeout

    async def _run(self, q: query.Query, call: Callable[[], Awaitable[T]]) -> T:
        logger.debug("query sql=%r args=%r", q.sql, q.args)
        try:
            return await call()
        except (Cancelled, StoreError):
            raise
        except Exception as exc:
            raise StoreError(exc) from exc

    async def list_all(self, *, timeout: float | None = _UNSET) -> list[Province]:
        """
        All provinces, without cities. Empty table -> [].
        """
        q = query.select_all(PROVINCES_TABLE, PROVINCE_COLUMNS)
        rows = await self._run(
            q,
            lambda: db.fetch_all(self._pool, q.sql, q.args, timeout=self._timeout(timeout)),
        )
        try:
            return [decode(row, decode_province) for row in rows]
        except RowMappingError as exc:
            raise StoreError(exc) from exc

    async def get_by_id(self, province_id: int, *, timeout: float | None = _UNSET) -> Province:
        q = query.select_one(PROVINCES_TABLE, PROVINCE_COLUMNS, "id", province_id)
        row = await self._run(
            q,
            lambda: db.fetch_one(self._pool, q.sql, q.args, timeout=self._timeout(timeout)),
        )
        if row is None:
            raise NotFound("province", province_id)
        try:
            return decode(row, decode_province)
        except RowMappingError as exc:
            raise StoreError(exc) from exc

    async def list_children_of(self, province_id: int, *, timeout: float | None = _UNSET) -> list[City]:
        """
        Cities of one province, in store order. No cities -> [].
        """
        q = query.select_children(CITIES_TABLE, CITY_COLUMNS, "province_id", province_id)
        rows = await self._run(
            q,
            lambda: db.fetch_all(self._pool, q.sql, q.args, timeout=self._timeout(timeout)),
        )
        try:
            return [decode(row, lambda r: decode_city(r, province_id=province_id)) for row in rows]
        except RowMappingError as exc:
            raise StoreError(exc) from exc
