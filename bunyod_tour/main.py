from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bunyod_tour.config import Settings, get_settings
from bunyod_tour.database import Database
from bunyod_tour.exception_handlers import register_exception_handlers
from bunyod_tour.logging_config import get_logger
from bunyod_tour.middleware.request_logging import REQUEST_ID_HEADER, RequestLoggingMiddleware
from bunyod_tour.routers import (
    bookings,
    categories,
    cities,
    countries,
    drivers,
    guides,
    hotels,
    price_calculator,
    reviews,
    system,
    tour_blocks,
    tours,
)
from bunyod_tour.services.email_service import EmailService

logger = get_logger()


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    email_service: Optional[EmailService] = None,
) -> FastAPI:
    """
    애플리케이션 생성

    Args:
        settings: 설정 (없으면 환경 변수에서 로드)
        database: 데이터베이스 (없으면 settings.database_url 로 생성)
        email_service: 이메일 서비스 (테스트에서 교체 가능)

    Returns:
        FastAPI 앱
    """
    settings = settings or get_settings()
    database = database or Database.from_settings(settings)
    email_service = email_service or EmailService(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifecycle management"""
        logger.info(f"Starting {settings.app_name} ({settings.environment})...")
        db_ok, db_message = database.check_connection()
        if db_ok:
            logger.info(db_message)
            database.create_all()
        else:
            logger.warning(f"{db_message} - requests will fail until the database is reachable")
        if not email_service.is_configured:
            logger.warning("Email credentials missing - booking notifications are disabled")

        yield

        database.dispose()
        logger.info(f"Shutting down {settings.app_name}...")

    app = FastAPI(
        title=settings.app_name,
        description="Bunyod-Tour backend: multilingual tour catalogue, booking requests and reviews",
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.email_service = email_service

    # Register global exception handlers
    register_exception_handlers(app)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    # 라우터 포함 - /api prefix
    # booking-requests / reviews 는 /tours/{tour_id} 보다 먼저 등록
    app.include_router(bookings.router, prefix="/api")
    app.include_router(reviews.router, prefix="/api")
    app.include_router(tours.router, prefix="/api")
    app.include_router(countries.router, prefix="/api")
    app.include_router(cities.router, prefix="/api")
    app.include_router(categories.router, prefix="/api")
    app.include_router(hotels.router, prefix="/api")
    app.include_router(guides.router, prefix="/api")
    app.include_router(drivers.router, prefix="/api")
    app.include_router(tour_blocks.router, prefix="/api")
    app.include_router(price_calculator.router, prefix="/api")
    app.include_router(system.router)

    return app
