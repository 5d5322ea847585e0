from .base import CamelModel, MultilingualInput
from .booking import BookingRequestCreate, BookingStatusUpdate
from .price_calculator import (
    PriceCalculationItem,
    PriceCalculationRequest,
    PriceComponentPayload,
)
from .reference import (
    CategoryPayload,
    CityPayload,
    CountryPayload,
    DriverPayload,
    GuidePayload,
    HotelPayload,
    TourBlockPayload,
)
from .review import ReviewCreate, ReviewModeration
from .tour import TourPayload
