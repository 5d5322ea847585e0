"""
FastAPI 의존성

Shared objects (settings, database, email service) live on ``app.state``
and are handed to routers through these functions.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from bunyod_tour.config import Settings
from bunyod_tour.database import get_db
from bunyod_tour.services.booking_service import BookingService, get_booking_service
from bunyod_tour.services.email_service import BookingNotifier, EmailService
from bunyod_tour.services.price_calculator_service import (
    PriceCalculatorService,
    get_price_calculator_service,
)
from bunyod_tour.services.review_service import ReviewService, get_review_service
from bunyod_tour.services.tour_service import TourService, get_tour_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_booking_notifier(
    email_service: EmailService = Depends(get_email_service),
    settings: Settings = Depends(get_app_settings),
) -> BookingNotifier:
    return BookingNotifier(email_service, settings)


def tour_service_dependency(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> TourService:
    return get_tour_service(db, settings.city_country_policy)


def booking_service_dependency(db: Session = Depends(get_db)) -> BookingService:
    return get_booking_service(db)


def review_service_dependency(db: Session = Depends(get_db)) -> ReviewService:
    return get_review_service(db)


def price_calculator_service_dependency(db: Session = Depends(get_db)) -> PriceCalculatorService:
    return get_price_calculator_service(db)
