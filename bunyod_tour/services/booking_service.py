"""
예약 요청 서비스 계층
"""

from typing import Any, Optional

from sqlalchemy.orm import Session, selectinload

from bunyod_tour.database import db_transaction
from bunyod_tour.exceptions import NotFoundError, ValidationError
from bunyod_tour.logging_config import get_logger
from bunyod_tour.models import BookingRequest, BookingStatus, Tour
from bunyod_tour.validators import CommonValidators

logger = get_logger("booking_service")


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class BookingService:
    """예약 요청 관련 서비스 클래스"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(BookingRequest).options(
            selectinload(BookingRequest.tour).selectinload(Tour.tour_category_assignments)
        )

    def create_booking_request(self, payload: dict[str, Any]) -> BookingRequest:
        """
        예약 요청 생성

        Args:
            payload: 요청 본문 (snake_case)

        Returns:
            저장된 BookingRequest

        Raises:
            ValidationError: 필수 항목 누락 또는 존재하지 않는 투어
        """
        customer_name = (payload.get("customer_name") or "").strip()
        if not customer_name:
            raise ValidationError("Customer name is required", details=[{"field": "customerName"}])

        customer_email = (payload.get("customer_email") or "").strip()
        if not customer_email:
            raise ValidationError("Customer email is required", details=[{"field": "customerEmail"}])
        try:
            customer_email = CommonValidators.validate_email(customer_email)
        except ValueError as e:
            raise ValidationError(str(e), details=[{"field": "customerEmail"}])

        preferred_date = payload.get("preferred_date")
        if not preferred_date:
            raise ValidationError("Preferred date is required", details=[{"field": "preferredDate"}])

        number_of_people = _to_int(payload.get("number_of_people"))
        if number_of_people is None or number_of_people < 1:
            raise ValidationError(
                "Number of people must be at least 1", details=[{"field": "numberOfPeople"}]
            )

        if payload.get("tour_id") in (None, ""):
            raise ValidationError("Tour ID is required", details=[{"field": "tourId"}])
        tour_id = _to_int(payload.get("tour_id"))
        if tour_id is None or self.db.get(Tour, tour_id) is None:
            raise ValidationError("Invalid tour ID", details=[{"field": "tourId"}])

        with db_transaction(self.db):
            booking = BookingRequest(
                customer_name=customer_name,
                customer_email=customer_email,
                customer_phone=payload.get("customer_phone"),
                preferred_date=str(preferred_date),
                number_of_people=number_of_people,
                comments=payload.get("comments"),
                tour_id=tour_id,
                status=BookingStatus.PENDING.value,
            )
            self.db.add(booking)

        logger.info(f"Booking request {booking.id} created for tour {tour_id}")
        return self.get_booking_request(booking.id)

    def get_booking_request(self, booking_id: int) -> BookingRequest:
        booking = self._query().filter(BookingRequest.id == booking_id).first()
        if booking is None:
            raise NotFoundError("Booking request not found")
        return booking

    def list_booking_requests(self, status: Optional[str] = None) -> list[BookingRequest]:
        """예약 요청 목록 (최신순)"""
        query = self._query()
        if status:
            query = query.filter(BookingRequest.status == status)
        return query.order_by(BookingRequest.created_at.desc(), BookingRequest.id.desc()).all()

    def update_booking_status(self, booking_id: int, status: str) -> BookingRequest:
        allowed = {item.value for item in BookingStatus}
        if status not in allowed:
            raise ValidationError(
                f"Status must be one of: {', '.join(sorted(allowed))}",
                details=[{"field": "status"}],
            )
        booking = self.get_booking_request(booking_id)
        with db_transaction(self.db):
            booking.status = status
        logger.info(f"Booking request {booking_id} status -> {status}")
        return self.get_booking_request(booking_id)

    def delete_booking_request(self, booking_id: int) -> None:
        booking = self.get_booking_request(booking_id)
        with db_transaction(self.db):
            self.db.delete(booking)
        logger.info(f"Booking request {booking_id} deleted")


def get_booking_service(db: Session) -> BookingService:
    """BookingService 인스턴스 생성"""
    return BookingService(db)
