"""
투어 블록 API 라우터
메인 페이지 섹션과 섹션별 투어 목록
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bunyod_tour.database import get_db
from bunyod_tour.models import Tour, TourBlockAssignment
from bunyod_tour.schemas import TourBlockPayload
from bunyod_tour.serializers import serialize_tour, serialize_tour_block
from bunyod_tour.services.reference_service import TOUR_BLOCKS, ReferenceService
from bunyod_tour.utils import ResponseMode, create_standard_response, get_response_mode, shape_response

from .reference_crud import reference_service_factory, register_crud_routes

router = APIRouter(prefix="/tour-blocks", tags=["Tour Blocks"])

block_service = reference_service_factory(TOUR_BLOCKS)


@router.get("")
async def get_tour_blocks(
    mode: ResponseMode = Depends(get_response_mode),
    service: ReferenceService = Depends(block_service),
) -> Dict[str, Any]:
    """투어 블록 목록 (정렬 순서)"""
    blocks = service.get_all()
    return create_standard_response(
        success=True,
        data=shape_response([serialize_tour_block(block) for block in blocks], mode),
        language=mode.language,
    )


@router.get("/{item_id}/tours")
async def get_block_tours(
    item_id: int,
    mode: ResponseMode = Depends(get_response_mode),
    service: ReferenceService = Depends(block_service),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """블록에 속한 공개 투어 목록"""
    service.get(item_id)
    tours = (
        db.query(Tour)
        .filter(
            Tour.is_draft.is_(False),
            Tour.tour_block_assignments.any(TourBlockAssignment.tour_block_id == item_id),
        )
        .order_by(Tour.created_at.desc(), Tour.id.desc())
        .all()
    )
    data = [serialize_tour(tour, list_view=True) for tour in tours]
    return create_standard_response(
        success=True,
        data=shape_response(data, mode),
        language=mode.language,
    )


register_crud_routes(router, TOUR_BLOCKS, TourBlockPayload, serialize_tour_block)
