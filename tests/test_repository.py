from __future__ import annotations

import asyncio

import pytest

from conftest import FakePool
from core.errors import Cancelled, ErrorKind, NotFound, StoreError
from provinces.entities import City, Province
from provinces.repository import ProvinceRepository


def test_list_all_maps_rows(store_pool):
    repo = ProvinceRepository(store_pool)
    provinces = asyncio.run(repo.list_all())
    assert provinces == [
        Province(id=1, code="JK", name="DKI Jakarta", name_english="Jakarta"),
        Province(id=2, code="BA", name="Bali", name_english="Bali"),
    ]
    assert all(p.cities is None for p in provinces)
    assert store_pool.executed == [("SELECT id, name, name_english, code FROM tb_provinces", ())]


def test_list_all_empty_table_is_empty_list(empty_pool):
    repo = ProvinceRepository(empty_pool)
    assert asyncio.run(repo.list_all()) == []


def test_get_by_id(store_pool):
    repo = ProvinceRepository(store_pool)
    province = asyncio.run(repo.get_by_id(2))
    assert province == Province(id=2, code="BA", name="Bali", name_english="Bali")
    assert store_pool.executed == [
        ("SELECT id, name, name_english, code FROM tb_provinces WHERE id = $1", (2,)),
    ]


def test_get_by_id_missing_is_not_found(store_pool):
    repo = ProvinceRepository(store_pool)
    with pytest.raises(NotFound) as excinfo:
        asyncio.run(repo.get_by_id(999))
    assert excinfo.value.kind is ErrorKind.NOT_FOUND
    assert excinfo.value.key == 999


def test_list_children_of(store_pool):
    repo = ProvinceRepository(store_pool)
    cities = asyncio.run(repo.list_children_of(1))
    assert sorted(cities, key=lambda c: c.id) == [
        City(id=11, name="Jakarta Selatan", name_english="South Jakarta", province_id=1),
        City(id=12, name="Jakarta Timur", name_english="East Jakarta", province_id=1),
    ]
    assert store_pool.executed == [
        ("SELECT id, name, name_english FROM tb_cities WHERE province_id = $1", (1,)),
    ]


def test_list_children_of_childless_parent_is_empty(store_pool):
    repo = ProvinceRepository(store_pool)
    assert asyncio.run(repo.list_children_of(42)) == []


def test_driver_error_becomes_store_error():
    boom = ConnectionResetError("connection reset by peer")

    async def respond(sql, args):
        raise boom

    pool = FakePool(respond)
    repo = ProvinceRepository(pool)
    with pytest.raises(StoreError) as excinfo:
        asyncio.run(repo.get_by_id(1))
    assert excinfo.value.cause is boom
    assert excinfo.value.kind is ErrorKind.STORE_ERROR
    assert pool.in_use == 0


def test_driver_timeout_without_deadline_is_store_error():
    boom = TimeoutError("connect to db:5432 timed out")

    async def respond(sql, args):
        raise boom

    pool = FakePool(respond)
    repo = ProvinceRepository(pool, query_timeout=None)
    with pytest.raises(StoreError) as excinfo:
        asyncio.run(repo.get_by_id(1))
    assert excinfo.value.cause is boom
    assert pool.in_use == 0


def test_driver_timeout_within_deadline_is_store_error():
    async def respond(sql, args):
        raise TimeoutError("connection was closed in the middle of operation")

    repo = ProvinceRepository(FakePool(respond), query_timeout=5)
    with pytest.raises(StoreError):
        asyncio.run(repo.list_children_of(1))


def test_mapping_error_becomes_store_error():
    async def respond(sql, args):
        return [(1, "DKI Jakarta", "Jakarta")]

    repo = ProvinceRepository(FakePool(respond))
    with pytest.raises(StoreError):
        asyncio.run(repo.list_all())


def test_deadline_yields_cancelled_and_releases_connection():
    async def respond(sql, args):
        await asyncio.sleep(5)
        return []

    pool = FakePool(respond)
    repo = ProvinceRepository(pool, query_timeout=0.05)
    with pytest.raises(Cancelled) as excinfo:
        asyncio.run(repo.list_all())
    assert excinfo.value.reason == "deadline exceeded"
    assert pool.in_use == 0


def test_per_call_timeout_overrides_default():
    async def respond(sql, args):
        await asyncio.sleep(5)
        return []

    pool = FakePool(respond)
    repo = ProvinceRepository(pool, query_timeout=None)
    with pytest.raises(Cancelled):
        asyncio.run(repo.list_children_of(1, timeout=0.05))
    assert pool.in_use == 0


def test_task_cancellation_propagates_and_releases_connection():
    started = None

    async def respond(sql, args):
        started.set()
        await asyncio.sleep(5)
        return []

    pool = FakePool(respond)
    repo = ProvinceRepository(pool)

    async def scenario():
        nonlocal started
        started = asyncio.Event()
        task = asyncio.create_task(repo.get_by_id(1))
        await started.wait()
        assert pool.in_use == 1
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())
    assert pool.in_use == 0


def test_rows_are_filtered_by_parent(store_pool):
    repo = ProvinceRepository(store_pool)
    cities = asyncio.run(repo.list_children_of(2))
    assert [c.id for c in cities] == [21]
    assert {c.province_id for c in cities} == {2}

