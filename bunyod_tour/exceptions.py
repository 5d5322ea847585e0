"""
사용자 정의 예외 클래스들

Services raise these; ``exception_handlers`` turns them into the error envelope.
Subclasses only pick a status code and default message/code.
"""
from typing import Any, Dict, List, Optional


class BaseAPIException(Exception):
    """기본 API 예외 클래스"""

    status_code = 500
    default_message = "Internal server error"
    default_code = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or []
        super().__init__(self.message)


class ValidationError(BaseAPIException):
    """잘못된 입력 (400)"""

    status_code = 400
    default_message = "Invalid input data"
    default_code = "VALIDATION_ERROR"


class NotFoundError(BaseAPIException):
    """리소스 없음 (404)"""

    status_code = 404
    default_message = "Resource not found"
    default_code = "NOT_FOUND"


class ConflictError(BaseAPIException):
    """중복 또는 참조 중인 리소스 (409)"""

    status_code = 409
    default_message = "Resource already exists"
    default_code = "CONFLICT"


class DatabaseError(BaseAPIException):
    """재시도 후에도 DB 에 연결할 수 없음 (500)"""

    default_code = "DATABASE_ERROR"


class TourNotFoundError(NotFoundError):
    default_code = "TOUR_NOT_FOUND"

    def __init__(self, tour_id: Any = None):
        details = [{"field": "id", "value": tour_id}] if tour_id is not None else None
        super().__init__("Tour not found", details=details)
