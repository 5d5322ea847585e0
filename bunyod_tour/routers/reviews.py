"""
리뷰 API 라우터
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from bunyod_tour.dependencies import review_service_dependency
from bunyod_tour.schemas import ReviewCreate, ReviewModeration
from bunyod_tour.serializers import serialize_review
from bunyod_tour.services.review_service import ReviewService
from bunyod_tour.utils import ResponseMode, create_standard_response, get_response_mode, shape_response

router = APIRouter(prefix="/tours/reviews", tags=["Reviews"])


@router.post("", status_code=201)
async def create_review(
    payload: ReviewCreate,
    mode: ResponseMode = Depends(get_response_mode),
    service: ReviewService = Depends(review_service_dependency),
) -> Dict[str, Any]:
    """리뷰 작성 (승인 후 공개)"""
    review = service.create_review(payload.provided())
    return create_standard_response(
        success=True,
        data=shape_response(serialize_review(review), mode),
        message="Review created successfully. It will be visible after moderation.",
    )


@router.get("")
async def get_reviews(
    mode: ResponseMode = Depends(get_response_mode),
    service: ReviewService = Depends(review_service_dependency),
) -> Dict[str, Any]:
    """전체 리뷰 목록 (관리자)"""
    data = [serialize_review(review) for review in service.list_reviews()]
    return create_standard_response(
        success=True,
        data=shape_response(data, mode),
        language=mode.language,
    )


@router.put("/{review_id}")
async def update_review(
    review_id: int,
    payload: ReviewModeration,
    mode: ResponseMode = Depends(get_response_mode),
    service: ReviewService = Depends(review_service_dependency),
) -> Dict[str, Any]:
    """리뷰 승인 상태 변경 (관리자)"""
    review = service.set_moderation(review_id, payload.is_moderated)
    return create_standard_response(
        success=True,
        data=shape_response(serialize_review(review), mode),
        message="Review updated successfully",
    )
