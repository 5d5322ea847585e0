"""
공통 유틸리티 함수들
"""

from typing import Any


def create_standard_response(
    success: bool,
    data: Any | None = None,
    message: str | None = None,
    error: str | None = None,
    language: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """
    표준 API 응답 형식을 생성합니다.

    Keys whose value is None are left out, so a successful read is
    ``{"success": true, "data": ...}`` and a failure is
    ``{"success": false, "error": "..."}``.

    Args:
        success: 성공 여부
        data: 응답 데이터
        message: 사람이 읽을 수 있는 메시지
        error: 에러 메시지
        language: 응답에 사용된 언어
        **extra: 추가 최상위 키 (count, code, details 등)

    Returns:
        표준 응답 형식의 딕셔너리
    """
    response: dict[str, Any] = {"success": success}
    for key, value in (
        ("data", data),
        ("message", message),
        ("error", error),
        ("language", language),
        *extra.items(),
    ):
        if value is not None:
            response[key] = value
    return response


def create_error_response(
    code: str, message: str, details: list[dict[str, Any]] | None = None
) -> dict[str, Any]:
    """
    표준 에러 응답을 생성합니다.

    Args:
        code: 에러 코드
        message: 에러 메시지
        details: 상세 에러 정보

    Returns:
        표준 에러 응답 형식
    """
    return create_standard_response(
        success=False, error=message, code=code, details=details or None
    )
