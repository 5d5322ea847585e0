"""
도시 API 라우터
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from bunyod_tour.schemas import CityPayload
from bunyod_tour.serializers import serialize_city
from bunyod_tour.services.reference_service import CITIES, ReferenceService
from bunyod_tour.utils import ResponseMode, create_standard_response, get_response_mode, shape_response

from .reference_crud import reference_service_factory, register_crud_routes

router = APIRouter(prefix="/cities", tags=["Cities"])

city_service = reference_service_factory(CITIES)


@router.get("")
async def get_cities(
    country_id: Optional[int] = Query(None, alias="countryId", description="국가 ID 필터"),
    mode: ResponseMode = Depends(get_response_mode),
    service: ReferenceService = Depends(city_service),
) -> Dict[str, Any]:
    """도시 목록 조회"""
    cities = service.get_all({"country_id": country_id})
    data = [serialize_city(city, include_country=True) for city in cities]
    return create_standard_response(
        success=True,
        data=shape_response(data, mode),
        language=mode.language,
    )


@router.get("/country/{country_id}")
async def get_cities_by_country(
    country_id: int,
    mode: ResponseMode = Depends(get_response_mode),
    service: ReferenceService = Depends(city_service),
) -> Dict[str, Any]:
    """국가별 도시 목록"""
    cities = service.get_all({"country_id": country_id})
    data = [serialize_city(city) for city in cities]
    return create_standard_response(
        success=True,
        data=shape_response(data, mode),
        language=mode.language,
    )


register_crud_routes(router, CITIES, CityPayload, lambda city: serialize_city(city, include_country=True))
