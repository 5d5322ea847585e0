"""
운전기사 API 라우터
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from bunyod_tour.schemas import DriverPayload
from bunyod_tour.serializers import serialize_driver
from bunyod_tour.services.reference_service import DRIVERS, ReferenceService
from bunyod_tour.utils import ResponseMode, create_standard_response, get_response_mode, shape_response

from .reference_crud import reference_service_factory, register_crud_routes

router = APIRouter(prefix="/drivers", tags=["Drivers"])


@router.get("")
async def get_drivers(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    mode: ResponseMode = Depends(get_response_mode),
    service: ReferenceService = Depends(reference_service_factory(DRIVERS)),
) -> Dict[str, Any]:
    """운전기사 목록 조회"""
    drivers = service.get_all({"is_active": is_active})
    return create_standard_response(
        success=True,
        data=shape_response([serialize_driver(driver) for driver in drivers], mode),
        language=mode.language,
    )


register_crud_routes(router, DRIVERS, DriverPayload, serialize_driver)
