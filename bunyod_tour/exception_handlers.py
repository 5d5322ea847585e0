"""
글로벌 예외 핸들러

Every failure leaves the API as ``{"success": false, "error": ..., "code": ...}``.
Client errors carry a readable message; database and unexpected errors are
logged with a traceback and answered with an opaque 500.
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from bunyod_tour.exceptions import BaseAPIException
from bunyod_tour.logging_config import get_logger
from bunyod_tour.utils.common import create_error_response

logger = get_logger("exception_handlers")

OPAQUE_SERVER_ERROR = "Internal server error"

# HTTP 상태 코드 -> 에러 코드
HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    500: "INTERNAL_SERVER_ERROR",
}


def _request_context(request: Request) -> dict:
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": getattr(request.state, "request_id", None),
    }


def _error_json(status_code: int, code: str, message: str, details=None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=create_error_response(code=code, message=message, details=details),
        headers=headers,
    )


async def api_exception_handler(request: Request, exc: BaseAPIException) -> JSONResponse:
    """서비스 계층 예외 (ValidationError, NotFoundError 등)"""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"{exc.code}: {exc.message}",
        extra={**_request_context(request), "error_code": exc.code, "details": exc.details},
    )
    return _error_json(exc.status_code, exc.code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """라우팅 404, 405 등 Starlette HTTPException"""
    logger.warning(
        f"HTTP {exc.status_code}: {exc.detail}",
        extra={**_request_context(request), "status_code": exc.status_code},
    )
    return _error_json(
        exc.status_code,
        HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


def _field_of(error: dict) -> str:
    # ("body", "price") -> "price", ("query", "lang") -> "lang"
    location = [str(part) for part in error.get("loc", ())]
    return ".".join(location[1:]) or ".".join(location)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """잘못된 요청 본문/쿼리 -> 400, 첫 번째 문제 필드를 error 에 표시"""
    details = [
        {"field": _field_of(error), "message": error.get("msg", "invalid value")}
        for error in exc.errors()
    ]
    logger.warning("Request validation failed", extra={**_request_context(request), "errors": details})

    if not details:
        return _error_json(400, "VALIDATION_ERROR", "Invalid request data")
    first = details[0]
    message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
    return _error_json(400, "VALIDATION_ERROR", message, details)


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        f"Database error: {type(exc).__name__}",
        extra=_request_context(request),
        exc_info=exc,
    )
    return _error_json(500, "DATABASE_ERROR", OPAQUE_SERVER_ERROR)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__}: {exc}",
        extra=_request_context(request),
        exc_info=exc,
    )
    return _error_json(500, "INTERNAL_SERVER_ERROR", OPAQUE_SERVER_ERROR)


def register_exception_handlers(app) -> None:
    """FastAPI 앱에 예외 핸들러 등록"""
    app.add_exception_handler(BaseAPIException, api_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
