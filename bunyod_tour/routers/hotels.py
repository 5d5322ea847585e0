"""
호텔 API 라우터
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from bunyod_tour.database import get_db
from bunyod_tour.models import TourHotel
from bunyod_tour.schemas import HotelPayload
from bunyod_tour.serializers import serialize_hotel
from bunyod_tour.services.reference_service import HOTELS, ReferenceService
from bunyod_tour.utils import ResponseMode, create_standard_response, get_response_mode, shape_response

from .reference_crud import reference_service_factory, register_crud_routes

router = APIRouter(prefix="/hotels", tags=["Hotels"])


@router.get("")
async def get_hotels(
    tour_id: Optional[int] = Query(None, alias="tourId", description="투어에 연결된 호텔만 조회"),
    country_id: Optional[int] = Query(None, alias="countryId"),
    city_id: Optional[int] = Query(None, alias="cityId"),
    mode: ResponseMode = Depends(get_response_mode),
    service: ReferenceService = Depends(reference_service_factory(HOTELS)),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """호텔 목록 조회 (tourId 지정 시 1박 요금, 기본값 여부 포함)"""
    if tour_id is not None:
        links = (
            db.query(TourHotel)
            .filter(TourHotel.tour_id == tour_id)
            .order_by(TourHotel.is_default.desc(), TourHotel.id)
            .all()
        )
        data = []
        for link in links:
            hotel = serialize_hotel(link.hotel)
            hotel["pricePerNight"] = link.price_per_night
            hotel["isDefault"] = link.is_default
            data.append(hotel)
    else:
        hotels = service.get_all({"country_id": country_id, "city_id": city_id})
        data = [serialize_hotel(hotel) for hotel in hotels]

    return create_standard_response(
        success=True,
        data=shape_response(data, mode),
        language=mode.language,
    )


register_crud_routes(router, HOTELS, HotelPayload, serialize_hotel)
