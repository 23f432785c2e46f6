"""
Province API endpoints.
"""

from __future__ import annotations

import re

from fastapi import APIRouter, Depends, Request

from core.errors import InvalidParameter

from . import schemas
from .service import ProvinceService

router = APIRouter(prefix="/api/v1")

_BASE10_INT = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def parse_int_param(name: str, raw: str) -> int:
    """
    Strict base-10 integer: optional sign, ASCII digits, nothing else,
    within the signed 64-bit range.
    """
    if not _BASE10_INT.fullmatch(raw or ""):
        raise InvalidParameter(name, raw)
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise InvalidParameter(name, raw)
    return value


def get_province_service(request: Request) -> ProvinceService:
    return request.app.state.province_service


@router.get("/provinces", response_model=list[schemas.ProvinceSummaryResponse])
async def list_provinces(
    service: ProvinceService = Depends(get_province_service),
) -> list[schemas.ProvinceSummaryResponse]:
    provinces = await service.get_provinces()
    return [schemas.to_province_summary(p) for p in provinces]


@router.get("/provinces/{province_id}", response_model=schemas.ProvinceResponse)
async def get_province(
    province_id: str,
    service: ProvinceService = Depends(get_province_service),
) -> schemas.ProvinceResponse:
    # Validate before touching the store; FastAPI's int coercion would 422.
    pid = parse_int_param("id", province_id)
    province = await service.get_province_by_id(pid)
    return schemas.to_province_response(province)
