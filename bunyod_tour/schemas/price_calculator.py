from typing import Optional

from pydantic import Field

from .base import CamelModel, MultilingualInput


class PriceComponentPayload(CamelModel):
    """가격 구성요소 생성/수정 스키마"""

    key: Optional[str] = None
    category: Optional[str] = None
    name: Optional[MultilingualInput] = None
    name_en: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = None
    description: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class PriceCalculationItem(CamelModel):
    key: str
    quantity: float = 1


class PriceCalculationRequest(CamelModel):
    components: list[PriceCalculationItem]
