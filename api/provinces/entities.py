"""
Province / city values as read from the store.

Column order contract with the repository SELECT lists:
- province: (id, name, name_english, code)
- city:     (id, name, name_english)
"""

from __future__ import annotations

from dataclasses import dataclass

from core.rows import RowReader


@dataclass(frozen=True)
class City:
    id: int
    name: str
    name_english: str
    # Owning province; internal only, never serialized.
    province_id: int | None = None


@dataclass(frozen=True)
class Province:
    id: int
    code: str
    name: str
    name_english: str
    # None: children were not requested. (): requested, none exist.
    cities: tuple[City, ...] | None = None


def decode_province(reader: RowReader) -> Province:
    id_ = reader.read(int)
    name = reader.read(str)
    name_english = reader.read(str)
    code = reader.read(str)
    return Province(id=id_, code=code, name=name, name_english=name_english)


def decode_city(reader: RowReader, *, province_id: int | None = None) -> City:
    return City(
        id=reader.read(int),
        name=reader.read(str),
        name_english=reader.read(str),
        province_id=province_id,
    )
