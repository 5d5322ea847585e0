from typing import Any, Optional, Union

from pydantic import field_validator

from bunyod_tour.models import CategoryType

from .base import CamelModel, MultilingualInput


class CategoryPayload(CamelModel):
    name: Optional[MultilingualInput] = None
    type: Optional[str] = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        if v is None:
            return v
        allowed = {item.value for item in CategoryType}
        if v not in allowed:
            raise ValueError("Category type must be 'tour' or 'hotel'")
        return v


class CountryPayload(CamelModel):
    name: Optional[MultilingualInput] = None
    code: Optional[str] = None
    is_active: Optional[bool] = None


class CityPayload(CamelModel):
    name: Optional[MultilingualInput] = None
    country_id: Optional[int] = None
    is_active: Optional[bool] = None


class HotelPayload(CamelModel):
    name: Optional[MultilingualInput] = None
    description: Optional[MultilingualInput] = None
    address: Optional[MultilingualInput] = None
    stars: Optional[int] = None
    rating: Optional[float] = None
    images: Optional[Union[list[Any], str]] = None
    amenities: Optional[Union[list[Any], str]] = None
    country_id: Optional[int] = None
    city_id: Optional[int] = None
    is_active: Optional[bool] = None
    is_draft: Optional[bool] = None


class GuidePayload(CamelModel):
    name: Optional[MultilingualInput] = None
    description: Optional[MultilingualInput] = None
    languages: Optional[Union[list[Any], str]] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = None


class DriverPayload(CamelModel):
    name: Optional[MultilingualInput] = None
    phone: Optional[str] = None
    vehicle_type: Optional[str] = None
    license_number: Optional[str] = None
    is_active: Optional[bool] = None


class TourBlockPayload(CamelModel):
    title: Optional[MultilingualInput] = None
    description: Optional[MultilingualInput] = None
    slug: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None
