"""
국가 API 라우터
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from bunyod_tour.schemas import CountryPayload
from bunyod_tour.serializers import serialize_country
from bunyod_tour.services.reference_service import COUNTRIES, ReferenceService
from bunyod_tour.utils import ResponseMode, create_standard_response, get_response_mode, shape_response

from .reference_crud import reference_service_factory, register_crud_routes

router = APIRouter(prefix="/countries", tags=["Countries"])


@router.get("")
async def get_countries(
    include_cities: bool = Query(True, alias="includeCities", description="도시 목록 포함 여부"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    mode: ResponseMode = Depends(get_response_mode),
    service: ReferenceService = Depends(reference_service_factory(COUNTRIES)),
) -> Dict[str, Any]:
    """국가 목록 조회"""
    countries = service.get_all({"is_active": is_active})
    data = [serialize_country(country, include_cities=include_cities) for country in countries]
    return create_standard_response(
        success=True,
        data=shape_response(data, mode),
        language=mode.language,
    )


register_crud_routes(router, COUNTRIES, CountryPayload, lambda country: serialize_country(country, include_cities=True))
