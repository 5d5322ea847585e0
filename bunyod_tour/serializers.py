"""
ORM 객체 -> API 딕셔너리 변환

Multilingual columns are emitted as parsed ``{ru, en}`` objects; the
response shaper turns them into strings (public mode) or keeps them (raw
mode) afterwards. Keys are camelCase to match the frontend.
"""

from typing import Any, Optional

from bunyod_tour.models import (
    BookingRequest,
    Category,
    City,
    Country,
    Driver,
    Guide,
    Hotel,
    PriceCalculatorComponent,
    Review,
    Tour,
    TourBlock,
)
from bunyod_tour.utils.multilingual import parse_field, parse_json_list
from bunyod_tour.utils.response_shaper import MULTILINGUAL_FIELDS

# price component descriptions are plain text
PRICE_COMPONENT_FIELDS = MULTILINGUAL_FIELDS - {"description"}


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _multilingual(value: Any) -> Optional[dict]:
    return parse_field(value) if value is not None else None


def serialize_category(category: Optional[Category]) -> Optional[dict]:
    if category is None:
        return None
    return {
        "id": category.id,
        "name": _multilingual(category.name),
        "type": category.type,
        "createdAt": _iso(category.created_at),
        "updatedAt": _iso(category.updated_at),
    }


def serialize_country(country: Optional[Country], include_cities: bool = False) -> Optional[dict]:
    if country is None:
        return None
    data = {
        "id": country.id,
        "name": _multilingual(country.name),
        "code": country.code,
        "isActive": country.is_active,
    }
    if include_cities:
        data["cities"] = [serialize_city(city) for city in country.cities]
    return data


def serialize_city(city: Optional[City], include_country: bool = False) -> Optional[dict]:
    if city is None:
        return None
    data = {
        "id": city.id,
        "name": _multilingual(city.name),
        "countryId": city.country_id,
        "isActive": city.is_active,
    }
    if include_country:
        data["country"] = serialize_country(city.country)
    return data


def serialize_hotel(hotel: Optional[Hotel]) -> Optional[dict]:
    if hotel is None:
        return None
    return {
        "id": hotel.id,
        "name": _multilingual(hotel.name),
        "description": _multilingual(hotel.description),
        "address": _multilingual(hotel.address),
        "stars": hotel.stars,
        "rating": hotel.rating,
        "images": parse_json_list(hotel.images),
        "amenities": parse_json_list(hotel.amenities),
        "countryId": hotel.country_id,
        "cityId": hotel.city_id,
        "country": serialize_country(hotel.country),
        "city": serialize_city(hotel.city),
        "isActive": hotel.is_active,
        "isDraft": hotel.is_draft,
    }


def serialize_guide(guide: Optional[Guide]) -> Optional[dict]:
    if guide is None:
        return None
    return {
        "id": guide.id,
        "name": _multilingual(guide.name),
        "description": _multilingual(guide.description),
        "languages": parse_json_list(guide.languages),
        "phone": guide.phone,
        "email": guide.email,
        "isActive": guide.is_active,
    }


def serialize_driver(driver: Optional[Driver]) -> Optional[dict]:
    if driver is None:
        return None
    return {
        "id": driver.id,
        "name": _multilingual(driver.name),
        "phone": driver.phone,
        "vehicleType": driver.vehicle_type,
        "licenseNumber": driver.license_number,
        "isActive": driver.is_active,
    }


def serialize_tour_block(block: Optional[TourBlock]) -> Optional[dict]:
    if block is None:
        return None
    return {
        "id": block.id,
        "title": _multilingual(block.title),
        "description": _multilingual(block.description),
        "slug": block.slug,
        "sortOrder": block.sort_order,
        "isActive": block.is_active,
    }


def serialize_price_component(component: PriceCalculatorComponent) -> dict:
    return {
        "id": component.id,
        "key": component.key,
        "category": component.category,
        "name": _multilingual(component.name),
        "price": component.price,
        "unit": component.unit,
        "description": component.description,
        "sortOrder": component.sort_order,
        "isActive": component.is_active,
    }


def _enrich_services(services: list, catalogue: dict[str, PriceCalculatorComponent]) -> list:
    """서비스 항목에 가격 계산기 구성요소 정보 병합 (key 기준)"""
    enriched = []
    for service in services:
        if isinstance(service, dict) and service.get("key") in catalogue:
            component = catalogue[service["key"]]
            merged = {
                "name": _multilingual(component.name),
                "price": component.price,
                "unit": component.unit,
                "category": component.category,
            }
            merged.update({k: v for k, v in service.items() if v is not None})
            merged["name"] = _multilingual(merged["name"])
            enriched.append(merged)
        else:
            enriched.append(service)
    return enriched


def serialize_tour(
    tour: Tour,
    list_view: bool = False,
    catalogue: Optional[dict[str, PriceCalculatorComponent]] = None,
) -> dict:
    """
    투어 직렬화

    Args:
        tour: Tour ORM 객체
        list_view: 목록용이면 이미지 필드 제외
        catalogue: 가격 계산기 구성요소 (key -> component)

    Returns:
        camelCase 딕셔너리. 연결 목록, ID 배열, 레거시 단일 ID 를 모두 포함
    """
    primary_category = next(
        (row.category for row in tour.tour_category_assignments if row.is_primary),
        tour.tour_category_assignments[0].category if tour.tour_category_assignments else None,
    )
    primary_country = next(
        (row.country for row in tour.tour_countries if row.is_primary),
        tour.tour_countries[0].country if tour.tour_countries else None,
    )
    primary_city = next(
        (row.city for row in tour.tour_cities if row.is_primary),
        tour.tour_cities[0].city if tour.tour_cities else None,
    )
    images = parse_json_list(tour.images)
    services = parse_json_list(tour.services)
    if catalogue:
        services = _enrich_services(services, catalogue)

    data = {
        "id": tour.id,
        "title": _multilingual(tour.title),
        "description": _multilingual(tour.description),
        "shortDesc": _multilingual(tour.short_desc),
        "price": tour.price,
        "priceType": tour.price_type,
        "originalPrice": tour.original_price,
        "durationDays": tour.duration_days,
        "difficulty": tour.difficulty,
        "maxPeople": tour.max_people,
        "minPeople": tour.min_people,
        "tourType": tour.tour_type,
        "services": services,
        "itinerary": parse_json_list(tour.itinerary),
        "highlights": _multilingual(tour.highlights),
        "mapPoints": parse_json_list(tour.map_points),
        "included": _multilingual(tour.included),
        "excluded": _multilingual(tour.excluded),
        "pickupInfo": _multilingual(tour.pickup_info),
        "startTimeOptions": parse_json_list(tour.start_time_options),
        "languages": parse_json_list(tour.languages),
        "availableMonths": parse_json_list(tour.available_months),
        "availableDays": parse_json_list(tour.available_days),
        "startDate": tour.start_date,
        "endDate": tour.end_date,
        "isPromotion": tour.is_promotion,
        "discountPercent": tour.discount_percent,
        "isDraft": tour.is_draft,
        "isActive": tour.is_active,
        "isFeatured": tour.is_featured,
        "rating": tour.rating,
        "reviewsCount": tour.reviews_count,
        "createdAt": _iso(tour.created_at),
        "updatedAt": _iso(tour.updated_at),
        # 레거시 단일 ID (primary 연결에서 계산)
        "categoryId": tour.category_id,
        "countryId": tour.country_id,
        "cityId": tour.city_id,
        "tourBlockId": tour.tour_block_id,
        # ID 배열
        "categoriesIds": [row.category_id for row in tour.tour_category_assignments],
        "countriesIds": [row.country_id for row in tour.tour_countries],
        "citiesIds": [row.city_id for row in tour.tour_cities],
        "tourBlockIds": [row.tour_block_id for row in tour.tour_block_assignments],
        "hotelIds": [row.hotel_id for row in tour.tour_hotels],
        "guideIds": [row.guide_id for row in tour.tour_guides],
        "driverIds": [row.driver_id for row in tour.tour_drivers],
        "cityNights": {
            str(row.city_id): row.nights_count
            for row in tour.tour_cities
            if row.nights_count is not None
        },
        # primary 객체
        "category": serialize_category(primary_category),
        "country": serialize_country(primary_country),
        "city": serialize_city(primary_city),
        "categories": [serialize_category(row.category) for row in tour.tour_category_assignments],
        # 연결 목록
        "tourCountries": [
            {"id": row.id, "countryId": row.country_id, "isPrimary": row.is_primary,
             "country": serialize_country(row.country)}
            for row in tour.tour_countries
        ],
        "tourCities": [
            {"id": row.id, "cityId": row.city_id, "isPrimary": row.is_primary,
             "nightsCount": row.nights_count, "city": serialize_city(row.city)}
            for row in tour.tour_cities
        ],
        "tourCategoryAssignments": [
            {"id": row.id, "categoryId": row.category_id, "isPrimary": row.is_primary,
             "category": serialize_category(row.category)}
            for row in tour.tour_category_assignments
        ],
        "tourBlockAssignments": [
            {"id": row.id, "tourBlockId": row.tour_block_id, "isPrimary": row.is_primary,
             "tourBlock": serialize_tour_block(row.tour_block)}
            for row in tour.tour_block_assignments
        ],
        "tourHotels": [
            {"id": row.id, "hotelId": row.hotel_id, "isDefault": row.is_default,
             "pricePerNight": row.price_per_night, "hotel": serialize_hotel(row.hotel)}
            for row in tour.tour_hotels
        ],
        "tourGuides": [
            {"id": row.id, "guideId": row.guide_id, "isDefault": row.is_default,
             "guide": serialize_guide(row.guide)}
            for row in tour.tour_guides
        ],
        "tourDrivers": [
            {"id": row.id, "driverId": row.driver_id, "isDefault": row.is_default,
             "driver": serialize_driver(row.driver)}
            for row in tour.tour_drivers
        ],
    }

    if list_view:
        data["hasImages"] = bool(images or tour.main_image)
    else:
        data["mainImage"] = tour.main_image
        data["images"] = images
    return data


def serialize_tour_summary(tour: Optional[Tour]) -> Optional[dict]:
    """예약/리뷰 응답에 포함되는 간단한 투어 정보"""
    if tour is None:
        return None
    category = tour.tour_category_assignments[0].category if tour.tour_category_assignments else None
    return {
        "id": tour.id,
        "title": _multilingual(tour.title),
        "description": _multilingual(tour.description),
        "price": tour.price,
        "priceType": tour.price_type,
        "durationDays": tour.duration_days,
        "category": serialize_category(category),
    }


def serialize_booking_request(booking: BookingRequest) -> dict:
    return {
        "id": booking.id,
        "customerName": booking.customer_name,
        "customerEmail": booking.customer_email,
        "customerPhone": booking.customer_phone,
        "preferredDate": booking.preferred_date,
        "numberOfPeople": booking.number_of_people,
        "comments": booking.comments,
        "status": booking.status,
        "tourId": booking.tour_id,
        "tour": serialize_tour_summary(booking.tour),
        "createdAt": _iso(booking.created_at),
        "updatedAt": _iso(booking.updated_at),
    }


def serialize_review(review: Review, include_tour: bool = True) -> dict:
    data = {
        "id": review.id,
        "tourId": review.tour_id,
        "reviewerName": review.reviewer_name,
        "rating": review.rating,
        "text": review.text,
        "photos": parse_json_list(review.photos),
        "isModerated": review.is_moderated,
        "createdAt": _iso(review.created_at),
    }
    if include_tour:
        data["tour"] = serialize_tour_summary(review.tour)
    return data
