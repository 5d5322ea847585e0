from typing import Any, Optional

from .base import CamelModel


class BookingRequestCreate(CamelModel):
    """예약 요청 생성 스키마

    Presence rules are checked by the booking service so the error message
    can name the missing field in plain words.
    """

    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    preferred_date: Optional[str] = None
    number_of_people: Optional[Any] = None
    comments: Optional[str] = None
    tour_id: Optional[Any] = None


class BookingStatusUpdate(CamelModel):
    """예약 상태 변경 스키마"""

    status: str
