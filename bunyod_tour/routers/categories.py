"""
카테고리 API 라우터
투어/호텔 카테고리 조회 및 관리
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from bunyod_tour.schemas import CategoryPayload
from bunyod_tour.serializers import serialize_category
from bunyod_tour.services.reference_service import CATEGORIES, ReferenceService
from bunyod_tour.utils import ResponseMode, create_standard_response, get_response_mode, shape_response

from .reference_crud import reference_service_factory, register_crud_routes

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("")
async def get_categories(
    type: Optional[str] = Query(None, pattern="^(tour|hotel)$", description="tour | hotel"),
    mode: ResponseMode = Depends(get_response_mode),
    service: ReferenceService = Depends(reference_service_factory(CATEGORIES)),
) -> Dict[str, Any]:
    """카테고리 목록 조회"""
    categories = service.get_all({"type": type})
    return create_standard_response(
        success=True,
        data=shape_response([serialize_category(category) for category in categories], mode),
        language=mode.language,
    )


register_crud_routes(router, CATEGORIES, CategoryPayload, serialize_category)
