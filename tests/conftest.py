from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable

import pytest

JAKARTA = {"id": 1, "code": "JK", "name": "DKI Jakarta", "name_english": "Jakarta"}
BALI = {"id": 2, "code": "BA", "name": "Bali", "name_english": "Bali"}
SOUTH_JAKARTA = {"id": 11, "province_id": 1, "name": "Jakarta Selatan", "name_english": "South Jakarta"}
EAST_JAKARTA = {"id": 12, "province_id": 1, "name": "Jakarta Timur", "name_english": "East Jakarta"}
DENPASAR = {"id": 21, "province_id": 2, "name": "Kota Denpasar", "name_english": "Denpasar"}

Responder = Callable[[str, tuple], Awaitable[list[tuple]]]


class FakeConnection:
    def __init__(self, pool: "FakePool") -> None:
        self._pool = pool

    async def fetch(self, sql: str, *args: Any) -> list[tuple]:
        self._pool.executed.append((sql, args))
        return await self._pool.responder(sql, args)

    async def fetchrow(self, sql: str, *args: Any) -> tuple | None:
        rows = await self.fetch(sql, *args)
        return rows[0] if rows else None


class FakePool:
    """
    Stands in for asyncpg.Pool: same acquire() contract, records every
    statement and tracks how many connections are checked out.
    """

    def __init__(self, responder: Responder) -> None:
        self.responder = responder
        self.executed: list[tuple[str, tuple]] = []
        self.in_use = 0
        self.closed = False

    @asynccontextmanager
    async def acquire(self):
        self.in_use += 1
        try:
            yield FakeConnection(self)
        finally:
            self.in_use -= 1

    async def close(self) -> None:
        self.closed = True


def table_responder(provinces: list[dict], cities: list[dict]) -> Responder:
    """
    Answers the repository's SELECTs from in-memory rows, returning tuples
    in SELECT-list order.
    """

    async def respond(sql: str, args: tuple) -> list[tuple]:
        if "FROM tb_provinces" in sql:
            rows = provinces if not args else [p for p in provinces if p["id"] == args[0]]
            return [(p["id"], p["name"], p["name_english"], p["code"]) for p in rows]
        if "FROM tb_cities" in sql:
            rows = [c for c in cities if c["province_id"] == args[0]]
            return [(c["id"], c["name"], c["name_english"]) for c in rows]
        raise AssertionError(f"unexpected sql: {sql}")

    return respond


@pytest.fixture()
def store_pool() -> FakePool:
    return FakePool(
        table_responder(
            provinces=[JAKARTA, BALI],
            cities=[SOUTH_JAKARTA, EAST_JAKARTA, DENPASAR],
        )
    )


@pytest.fixture()
def empty_pool() -> FakePool:
    return FakePool(table_responder(provinces=[], cities=[]))
