"""
요청 언어 결정
"""

from dataclasses import dataclass

from fastapi import Request

from bunyod_tour.utils.multilingual import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES


@dataclass(frozen=True)
class ResponseMode:
    """응답 언어 및 raw 모드 여부"""

    language: str = DEFAULT_LANGUAGE
    include_raw: bool = False


def normalize_language(value: str | None) -> str:
    """지원하지 않는 값은 기본 언어(ru)로 처리"""
    if not value:
        return DEFAULT_LANGUAGE
    candidate = value.strip().lower()
    return candidate if candidate in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def resolve_language(request: Request) -> str:
    """``?lang=`` 쿼리 파라미터에서 언어 결정"""
    return normalize_language(request.query_params.get("lang"))


def resolve_include_raw(request: Request) -> bool:
    value = request.query_params.get("includeRaw", "")
    return value.strip().lower() in ("true", "1")


def get_response_mode(request: Request) -> ResponseMode:
    """FastAPI dependency"""
    return ResponseMode(
        language=resolve_language(request),
        include_raw=resolve_include_raw(request),
    )
