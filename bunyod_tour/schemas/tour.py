from typing import Any, Optional, Union

from pydantic import AliasChoices, Field, field_validator

from ..validators import CommonValidators
from .base import CamelModel, MultilingualInput


class TourPayload(CamelModel):
    """투어 생성/수정 요청 스키마

    Every field is optional at the schema level: drafts may be saved
    half-filled, and updates only touch the keys present in the body.
    Required-field rules for published tours live in the tour service.
    """

    title: Optional[MultilingualInput] = None
    description: Optional[MultilingualInput] = None
    short_desc: Optional[MultilingualInput] = Field(
        None, validation_alias=AliasChoices("shortDescription", "shortDesc", "short_desc")
    )
    price: Optional[float] = None
    price_type: Optional[str] = None
    original_price: Optional[float] = None
    duration_days: Optional[int] = None
    difficulty: Optional[str] = None
    max_people: Optional[int] = None
    min_people: Optional[int] = None
    tour_type: Optional[str] = None
    main_image: Optional[str] = None
    images: Optional[Union[list[Any], str]] = None
    services: Optional[Union[list[Any], str]] = None
    itinerary: Optional[Union[list[Any], str]] = None
    highlights: Optional[MultilingualInput] = None
    map_points: Optional[Union[list[Any], str]] = None
    included: Optional[MultilingualInput] = Field(
        None, validation_alias=AliasChoices("included", "includes")
    )
    excluded: Optional[MultilingualInput] = None
    pickup_info: Optional[MultilingualInput] = None
    # 예전 관리자 화면은 영어 픽업 안내를 별도 필드로 보냄
    pickup_info_en: Optional[str] = None
    start_time_options: Optional[Union[list[Any], str]] = None
    languages: Optional[Union[list[Any], str]] = None
    available_months: Optional[Union[list[Any], str]] = None
    available_days: Optional[Union[list[Any], str]] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_promotion: Optional[bool] = None
    discount_percent: Optional[float] = Field(None, ge=0, le=100)
    is_draft: Optional[bool] = None
    is_featured: Optional[bool] = None
    rating: Optional[float] = None
    reviews_count: Optional[int] = None

    # 연관 관계 (단일 ID 와 배열 모두 허용)
    category_id: Optional[int] = None
    categories_ids: Optional[list[int]] = None
    country_id: Optional[int] = None
    countries_ids: Optional[list[int]] = None
    city_id: Optional[int] = None
    cities_ids: Optional[list[int]] = None
    city_nights: Optional[dict[str, int]] = None
    tour_block_id: Optional[int] = None
    tour_block_ids: Optional[list[int]] = None
    hotel_ids: Optional[list[int]] = None
    guide_ids: Optional[list[int]] = None
    driver_ids: Optional[list[int]] = None

    @field_validator("price_type", mode="before")
    @classmethod
    def normalize_price_type(cls, v):
        if v is None:
            return v
        return CommonValidators.normalize_price_type(str(v))

    @field_validator("tour_type", mode="before")
    @classmethod
    def normalize_tour_type(cls, v):
        if v is None:
            return v
        return CommonValidators.normalize_tour_type(str(v))
