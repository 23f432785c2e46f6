"""
Province business logic (orchestration).

`get_province_by_id` composes a province with its cities from two separate
reads. The reads are not in one transaction: a city changed between them is
an accepted, unhandled inconsistency.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Awaitable, Sequence, TypeVar

from core.errors import Cancelled

from .entities import City, Province
from .repository import ProvinceRepository

T = TypeVar("T")

logger = logging.getLogger(__name__)


def assemble(province: Province, cities: Sequence[City]) -> Province:
    return dataclasses.replace(province, cities=tuple(cities))


async def _within(coro: Awaitable[T], deadline: float | None) -> T:
    if deadline is None:
        return await coro
    try:
        return await asyncio.wait_for(coro, deadline)
    except asyncio.TimeoutError as exc:
        raise Cancelled("deadline exceeded") from exc


class ProvinceService:
    def __init__(self, repository: ProvinceRepository) -> None:
        self._repository = repository

    async def get_provinces(self, *, deadline: float | None = None) -> list[Province]:
        """
        Flat listing; cities are never loaded here.
        """
        return await _within(self._repository.list_all(), deadline)

    async def get_province_by_id(self, province_id: int, *, deadline: float | None = None) -> Province:
        """
        One province with its cities.

        `deadline` (seconds) bounds both reads together. Any failure of the
        province read (NotFound included) skips the cities read.
        """
        return await _within(self._get_province_with_cities(province_id), deadline)

    async def _get_province_with_cities(self, province_id: int) -> Province:
        province = await self._repository.get_by_id(province_id)
        cities = await self._repository.list_children_of(province_id)
        logger.debug("province_assembled id=%s cities=%s", province_id, len(cities))
        return assemble(province, cities)
