"""
예약 요청 API 라우터
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from bunyod_tour.dependencies import booking_service_dependency, get_booking_notifier
from bunyod_tour.logging_config import get_logger
from bunyod_tour.schemas import BookingRequestCreate, BookingStatusUpdate
from bunyod_tour.serializers import serialize_booking_request
from bunyod_tour.services.booking_service import BookingService
from bunyod_tour.services.email_service import BookingNotifier
from bunyod_tour.utils import ResponseMode, create_standard_response, get_response_mode, shape_response

logger = get_logger("routers.bookings")

router = APIRouter(prefix="/tours/booking-requests", tags=["Booking Requests"])


@router.post("", status_code=201)
async def create_booking_request(
    payload: BookingRequestCreate,
    mode: ResponseMode = Depends(get_response_mode),
    service: BookingService = Depends(booking_service_dependency),
    notifier: BookingNotifier = Depends(get_booking_notifier),
) -> Dict[str, Any]:
    """예약 요청 생성 (이메일 알림 실패는 응답에 영향 없음)"""
    booking = service.create_booking_request(payload.provided())
    data = serialize_booking_request(booking)

    try:
        await notifier.notify(booking)
    except Exception as e:
        logger.error(f"Booking {booking.id}: notification step failed: {e}", exc_info=True)

    return create_standard_response(
        success=True,
        data=shape_response(data, mode),
        message="Booking request submitted successfully",
        language=mode.language,
    )


@router.get("")
async def get_booking_requests(
    status: Optional[str] = Query(None, description="pending | confirmed | cancelled"),
    mode: ResponseMode = Depends(get_response_mode),
    service: BookingService = Depends(booking_service_dependency),
) -> Dict[str, Any]:
    """예약 요청 목록 (관리자)"""
    data = [serialize_booking_request(booking) for booking in service.list_booking_requests(status)]
    return create_standard_response(
        success=True,
        data=shape_response(data, mode),
        language=mode.language,
    )


@router.get("/{booking_id}")
async def get_booking_request(
    booking_id: int,
    mode: ResponseMode = Depends(get_response_mode),
    service: BookingService = Depends(booking_service_dependency),
) -> Dict[str, Any]:
    """예약 요청 상세"""
    data = serialize_booking_request(service.get_booking_request(booking_id))
    return create_standard_response(
        success=True,
        data=shape_response(data, mode),
        language=mode.language,
    )


@router.put("/{booking_id}/status")
async def update_booking_status(
    booking_id: int,
    payload: BookingStatusUpdate,
    mode: ResponseMode = Depends(get_response_mode),
    service: BookingService = Depends(booking_service_dependency),
) -> Dict[str, Any]:
    """예약 상태 변경 (관리자)"""
    booking = service.update_booking_status(booking_id, payload.status)
    return create_standard_response(
        success=True,
        data=shape_response(serialize_booking_request(booking), mode),
        message="Booking status updated successfully",
    )


@router.delete("/{booking_id}")
async def delete_booking_request(
    booking_id: int,
    service: BookingService = Depends(booking_service_dependency),
) -> Dict[str, Any]:
    """예약 요청 삭제 (관리자)"""
    service.delete_booking_request(booking_id)
    return create_standard_response(success=True, message="Booking request deleted successfully")
