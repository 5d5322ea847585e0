from typing import Any, Optional, Union

from .base import CamelModel


class ReviewCreate(CamelModel):
    """리뷰 작성 스키마 (isModerated 는 받지 않음)"""

    reviewer_name: Optional[str] = None
    rating: Optional[Any] = None
    text: Optional[str] = None
    tour_id: Optional[Any] = None
    photos: Optional[Union[list[Any], str]] = None


class ReviewModeration(CamelModel):
    """리뷰 승인 상태 변경 스키마

    ``is_moderated`` is typed loosely and checked by the service: only a real
    JSON boolean is accepted, never "true" or 1.
    """

    is_moderated: Any = None
