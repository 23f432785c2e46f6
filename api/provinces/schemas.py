"""
Province API schemas (response models).
"""

from __future__ import annotations

from pydantic import BaseModel

from .entities import City, Province


class CityResponse(BaseModel):
    id: int
    name: str
    name_english: str


class ProvinceSummaryResponse(BaseModel):
    id: int
    code: str
    name: str
    name_english: str


class ProvinceResponse(ProvinceSummaryResponse):
    cities: list[CityResponse]


def to_city_response(city: City) -> CityResponse:
    return CityResponse(id=city.id, name=city.name, name_english=city.name_english)


def to_province_summary(province: Province) -> ProvinceSummaryResponse:
    return ProvinceSummaryResponse(
        id=province.id,
        code=province.code,
        name=province.name,
        name_english=province.name_english,
    )


def to_province_response(province: Province) -> ProvinceResponse:
    return ProvinceResponse(
        id=province.id,
        code=province.code,
        name=province.name,
        name_english=province.name_english,
        cities=[to_city_response(c) for c in province.cities or ()],
    )
