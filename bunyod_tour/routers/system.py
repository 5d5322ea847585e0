"""
시스템 API 라우터 (헬스체크)
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from bunyod_tour.config import Settings
from bunyod_tour.database import Database, get_database
from bunyod_tour.dependencies import get_app_settings
from bunyod_tour.utils import create_standard_response

router = APIRouter(tags=["System"])


@router.get("/")
async def root(settings: Settings = Depends(get_app_settings)):
    return {"message": f"{settings.app_name} is running!"}


@router.get("/health")
async def health_check(
    request: Request,
    database: Database = Depends(get_database),
    settings: Settings = Depends(get_app_settings),
):
    """서비스 및 데이터베이스 상태 확인"""
    db_ok, db_message = database.check_connection()
    email_configured = request.app.state.email_service.is_configured
    content = create_standard_response(
        success=db_ok,
        data={
            "status": "healthy" if db_ok else "unhealthy",
            "version": settings.app_version,
            "environment": settings.environment,
            "database": db_message,
            "email": "configured" if email_configured else "not configured",
        },
    )
    return JSONResponse(status_code=200 if db_ok else 503, content=content)
