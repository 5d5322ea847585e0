"""
가이드 API 라우터
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from bunyod_tour.schemas import GuidePayload
from bunyod_tour.serializers import serialize_guide
from bunyod_tour.services.reference_service import GUIDES, ReferenceService
from bunyod_tour.utils import ResponseMode, create_standard_response, get_response_mode, shape_response

from .reference_crud import reference_service_factory, register_crud_routes

router = APIRouter(prefix="/guides", tags=["Guides"])


@router.get("")
async def get_guides(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    mode: ResponseMode = Depends(get_response_mode),
    service: ReferenceService = Depends(reference_service_factory(GUIDES)),
) -> Dict[str, Any]:
    """가이드 목록 조회"""
    guides = service.get_all({"is_active": is_active})
    return create_standard_response(
        success=True,
        data=shape_response([serialize_guide(guide) for guide in guides], mode),
        language=mode.language,
    )


register_crud_routes(router, GUIDES, GuidePayload, serialize_guide)
