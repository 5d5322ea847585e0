"""
투어 API 라우터
목록/검색/상세 조회, 생성/수정, 공개, 복제, 삭제
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse

from bunyod_tour.dependencies import review_service_dependency, tour_service_dependency
from bunyod_tour.exceptions import ValidationError
from bunyod_tour.schemas import TourPayload
from bunyod_tour.serializers import serialize_review, serialize_tour
from bunyod_tour.services.review_service import ReviewService
from bunyod_tour.services.tour_service import SUGGESTION_MIN_LENGTH, TourService
from bunyod_tour.utils import ResponseMode, create_standard_response, get_response_mode, shape_response

router = APIRouter(prefix="/tours", tags=["Tours"])


def _tour_response(tour, service: TourService, mode: ResponseMode, message: Optional[str] = None) -> Dict[str, Any]:
    data = serialize_tour(tour, catalogue=service.get_price_catalogue())
    return create_standard_response(
        success=True,
        data=shape_response(data, mode),
        message=message,
        language=mode.language,
    )


@router.get("")
async def get_tours(
    limit: Optional[int] = Query(None, ge=1, description="최대 개수"),
    status: Optional[str] = Query(None, pattern="^(published|draft)$", description="published | draft"),
    mode: ResponseMode = Depends(get_response_mode),
    service: TourService = Depends(tour_service_dependency),
) -> Dict[str, Any]:
    """투어 목록 조회 (이미지 제외)"""
    tours = service.list_tours(limit=limit, status=status)
    data = [serialize_tour(tour, list_view=True) for tour in tours]
    return create_standard_response(
        success=True,
        data=shape_response(data, mode),
        language=mode.language,
    )


@router.get("/search")
async def search_tours(
    query: Optional[str] = Query(None, description="검색어 (제목/설명)"),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    country_id: Optional[int] = Query(None, alias="countryId"),
    city_id: Optional[int] = Query(None, alias="cityId"),
    duration: Optional[str] = Query(None, description="1 | 2-5 | 6+"),
    is_featured: Optional[bool] = Query(None, alias="isFeatured"),
    is_promotion: Optional[bool] = Query(None, alias="isPromotion"),
    limit: int = Query(50, ge=1, le=200),
    mode: ResponseMode = Depends(get_response_mode),
    service: TourService = Depends(tour_service_dependency),
) -> Dict[str, Any]:
    """공개 투어 검색"""
    tours = service.search_tours(
        query=query,
        category_id=category_id,
        country_id=country_id,
        city_id=city_id,
        duration=duration,
        is_featured=is_featured,
        is_promotion=is_promotion,
        limit=limit,
    )
    data = [serialize_tour(tour, list_view=True) for tour in tours]
    return create_standard_response(
        success=True,
        data=shape_response(data, mode),
        language=mode.language,
        count=len(data),
    )


@router.get("/suggestions")
async def get_search_suggestions(
    query: Optional[str] = Query(None, description="검색어 (2자 이상)"),
    service: TourService = Depends(tour_service_dependency),
) -> Dict[str, Any]:
    """검색 자동완성 (투어, 국가, 도시, 카테고리, 투어 유형, 호텔)"""
    if not query or not query.strip():
        raise ValidationError("Query parameter is required", details=[{"field": "query"}])
    suggestions = service.get_search_suggestions(query)
    if len(query.strip()) < SUGGESTION_MIN_LENGTH:
        return create_standard_response(success=True, data=suggestions, message="Query too short")
    return create_standard_response(
        success=True,
        data=suggestions,
        message="Search suggestions retrieved successfully",
    )


@router.get("/{tour_id}")
async def get_tour(
    tour_id: int,
    mode: ResponseMode = Depends(get_response_mode),
    service: TourService = Depends(tour_service_dependency),
) -> Dict[str, Any]:
    """투어 상세 조회"""
    return _tour_response(service.get_tour(tour_id), service, mode)


@router.get("/{tour_id}/main-image")
async def get_tour_main_image(
    tour_id: int,
    service: TourService = Depends(tour_service_dependency),
) -> RedirectResponse:
    """대표 이미지로 리다이렉트"""
    return RedirectResponse(url=service.get_main_image(tour_id), status_code=302)


@router.get("/{tour_id}/reviews")
async def get_tour_reviews(
    tour_id: int,
    mode: ResponseMode = Depends(get_response_mode),
    tours: TourService = Depends(tour_service_dependency),
    reviews: ReviewService = Depends(review_service_dependency),
) -> Dict[str, Any]:
    """승인된 리뷰 목록"""
    tours.get_tour(tour_id)
    data = [serialize_review(review, include_tour=False) for review in reviews.list_public_reviews(tour_id)]
    return create_standard_response(
        success=True,
        data=shape_response(data, mode),
        language=mode.language,
    )


@router.get("/{tour_id}/reviews/stats")
async def get_tour_review_stats(
    tour_id: int,
    tours: TourService = Depends(tour_service_dependency),
    reviews: ReviewService = Depends(review_service_dependency),
) -> Dict[str, Any]:
    """승인된 리뷰 통계 (평균 평점, 개수, 평점 분포)"""
    tours.get_tour(tour_id)
    return create_standard_response(success=True, data=reviews.get_review_stats(tour_id))


@router.post("", status_code=201)
async def create_tour(
    payload: TourPayload,
    mode: ResponseMode = Depends(get_response_mode),
    service: TourService = Depends(tour_service_dependency),
) -> Dict[str, Any]:
    """투어 생성 (isDraft=true 이면 필수 항목 검증 생략)"""
    tour = service.create_tour(payload.provided())
    return _tour_response(tour, service, mode, "Tour created successfully")


@router.put("/{tour_id}")
async def update_tour(
    tour_id: int,
    payload: TourPayload,
    mode: ResponseMode = Depends(get_response_mode),
    service: TourService = Depends(tour_service_dependency),
) -> Dict[str, Any]:
    """투어 부분 수정"""
    tour = service.update_tour(tour_id, payload.provided())
    return _tour_response(tour, service, mode, "Tour updated successfully")


@router.post("/{tour_id}/publish")
async def publish_tour(
    tour_id: int,
    mode: ResponseMode = Depends(get_response_mode),
    service: TourService = Depends(tour_service_dependency),
) -> Dict[str, Any]:
    """초안 투어 공개"""
    tour = service.publish_tour(tour_id)
    return _tour_response(tour, service, mode, "Tour published successfully")


@router.post("/{tour_id}/duplicate", status_code=201)
async def duplicate_tour(
    tour_id: int,
    mode: ResponseMode = Depends(get_response_mode),
    service: TourService = Depends(tour_service_dependency),
) -> Dict[str, Any]:
    """투어 복제 (초안으로 생성)"""
    tour = service.duplicate_tour(tour_id)
    return _tour_response(tour, service, mode, "Tour duplicated successfully")


@router.delete("/{tour_id}")
async def delete_tour(
    tour_id: int,
    service: TourService = Depends(tour_service_dependency),
) -> Dict[str, Any]:
    """투어 삭제"""
    service.delete_tour(tour_id)
    return create_standard_response(success=True, message="Tour deleted successfully")
