"""
공통 Validation 규칙 정의
Pydantic 스키마와 서비스 계층에서 공통으로 사용하는 함수들
"""

from typing import Any, Optional

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from bunyod_tour.logging_config import get_logger

logger = get_logger("validators")

PRICE_TYPE_ALIASES = {
    "per_person": "per_person",
    "за человека": "per_person",
    "per person": "per_person",
    "per_group": "per_group",
    "за группу": "per_group",
    "per group": "per_group",
}

TOUR_TYPE_ALIASES = {
    "individual": "individual",
    "персональный": "individual",
    "индивидуальный": "individual",
    "group_private": "group_private",
    "групповой персональный": "group_private",
    "group_shared": "group_shared",
    "групповой общий": "group_shared",
}

EMAIL_ADAPTER = TypeAdapter(EmailStr)


class CommonValidators:
    """공통 validation 규칙들"""

    @staticmethod
    def validate_email(email: str) -> str:
        """이메일 유효성 검증"""
        if not email or not email.strip():
            raise ValueError("Invalid email address")
        try:
            normalized = EMAIL_ADAPTER.validate_python(email.strip())
        except PydanticValidationError:
            raise ValueError("Invalid email address")
        return normalized.lower()

    @staticmethod
    def validate_rating(rating: Any) -> int:
        """평점 검증 (1~5)"""
        try:
            value = int(rating)
        except (TypeError, ValueError):
            raise ValueError("Rating must be between 1 and 5")
        if value < 1 or value > 5:
            raise ValueError("Rating must be between 1 and 5")
        return value

    @staticmethod
    def normalize_price_type(price_type: Optional[str]) -> str:
        """가격 유형 정규화 (러시아어 라벨 허용, 기본값 per_person)"""
        if not price_type:
            return "per_person"
        normalized = PRICE_TYPE_ALIASES.get(price_type.strip().lower())
        if normalized is None:
            logger.warning(f"Unknown priceType '{price_type}', falling back to per_person")
            return "per_person"
        return normalized

    @staticmethod
    def normalize_tour_type(tour_type: Optional[str]) -> Optional[str]:
        """투어 유형 정규화"""
        if not tour_type:
            return None
        normalized = TOUR_TYPE_ALIASES.get(tour_type.strip().lower())
        if normalized is None:
            logger.warning(f"Unknown tourType '{tour_type}', stored as-is")
            return tour_type.strip()
        return normalized
