"""
투어 서비스 계층

Lifecycle: a tour is created either as a draft (``isDraft: true``, no
required-field checks) or published. ``draft -> published`` is one-way and
re-validates everything drafts were allowed to skip. ``is_active`` is
derived from ``is_draft`` on the model, so the two flags always flip
together.
"""

from typing import Any, Optional

from sqlalchemy.orm import Session, selectinload

from bunyod_tour.database import db_transaction
from bunyod_tour.exceptions import NotFoundError, TourNotFoundError, ValidationError
from bunyod_tour.logging_config import get_logger
from bunyod_tour.models import (
    Category,
    City,
    Country,
    Hotel,
    PriceCalculatorComponent,
    Tour,
    TourCategoryAssignment,
    TourCity,
    TourCountry,
)
from bunyod_tour.services.association_service import (
    CITY_POLICY_WARN,
    copy_tour_associations,
    reconcile_tour_associations,
)
from bunyod_tour.utils.multilingual import (
    MultilingualText,
    dump_json_list,
    normalize_multilingual_input,
    parse_field,
    parse_json_list,
)

logger = get_logger("tour_service")

MULTILINGUAL_COLUMNS = (
    "title",
    "description",
    "short_desc",
    "highlights",
    "included",
    "excluded",
    "pickup_info",
)
JSON_LIST_COLUMNS = (
    "images",
    "services",
    "itinerary",
    "map_points",
    "start_time_options",
    "languages",
    "available_months",
    "available_days",
)
SCALAR_COLUMNS = (
    "price",
    "price_type",
    "original_price",
    "duration_days",
    "difficulty",
    "max_people",
    "min_people",
    "tour_type",
    "main_image",
    "start_date",
    "end_date",
    "is_promotion",
    "discount_percent",
    "is_featured",
    "rating",
    "reviews_count",
)
# NOT NULL 컬럼: null 은 "변경 없음"으로 처리
NON_NULLABLE_KEYS = frozenset(
    {"title", "is_promotion", "discount_percent", "is_featured", "rating", "reviews_count"}
)
RESET_ON_COPY = ("is_featured", "rating", "reviews_count")

COPY_SUFFIX = {"ru": " (Копия)", "en": " (Copy)"}

DURATION_BUCKETS = {
    "1": lambda days: days == 1,
    "2-5": lambda days: 2 <= days <= 5,
    "6+": lambda days: days >= 6,
}

# 자동완성 제안 유형 라벨 (프런트엔드 표시용)
SUGGESTION_TOUR = "тур"
SUGGESTION_COUNTRY = "страна"
SUGGESTION_CITY = "город"
SUGGESTION_CATEGORY = "категория"
SUGGESTION_TOUR_TYPE = "тип тура"
SUGGESTION_HOTEL = "отель"

TOUR_TYPE_LABELS = (
    {"ru": "Персональный", "en": "Individual"},
    {"ru": "Групповой персональный", "en": "Private Group"},
    {"ru": "Групповой общий", "en": "Shared Group"},
)

SUGGESTION_MIN_LENGTH = 2
SUGGESTION_LIMIT = 8


def _eager_options():
    return (
        selectinload(Tour.tour_countries).selectinload(TourCountry.country),
        selectinload(Tour.tour_cities).selectinload(TourCity.city),
        selectinload(Tour.tour_category_assignments).selectinload(TourCategoryAssignment.category),
        selectinload(Tour.tour_block_assignments),
        selectinload(Tour.tour_hotels),
        selectinload(Tour.tour_guides),
        selectinload(Tour.tour_drivers),
    )


def _without_nulls_for_required(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        key: value
        for key, value in payload.items()
        if not (key in NON_NULLABLE_KEYS and value is None)
    }


def _require_bilingual(value: Any, label: str, prefix: str = "") -> None:
    text = MultilingualText.from_stored(value)
    if not (text.has("ru") and text.has("en")):
        raise ValidationError(
            f"{prefix}{label} must include both Russian and English",
            details=[{"field": label.lower()}],
        )


class TourService:
    """투어 관련 서비스 클래스"""

    def __init__(self, db: Session, city_country_policy: str = CITY_POLICY_WARN):
        self.db = db
        self.city_country_policy = city_country_policy

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------

    def get_tour(self, tour_id: int) -> Tour:
        """투어 조회 (없으면 404)"""
        tour = (
            self.db.query(Tour)
            .options(*_eager_options())
            .filter(Tour.id == tour_id)
            .first()
        )
        if tour is None:
            raise TourNotFoundError(tour_id)
        return tour

    def list_tours(self, limit: Optional[int] = None, status: Optional[str] = None) -> list[Tour]:
        """투어 목록 (status: published | draft | None=전체)"""
        query = self.db.query(Tour).options(*_eager_options())
        if status == "published":
            query = query.filter(Tour.is_draft.is_(False))
        elif status == "draft":
            query = query.filter(Tour.is_draft.is_(True))
        query = query.order_by(Tour.created_at.desc(), Tour.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def search_tours(
        self,
        query: Optional[str] = None,
        category_id: Optional[int] = None,
        country_id: Optional[int] = None,
        city_id: Optional[int] = None,
        duration: Optional[str] = None,
        is_featured: Optional[bool] = None,
        is_promotion: Optional[bool] = None,
        limit: int = 50,
    ) -> list[Tour]:
        """공개된 투어 검색 (제목/설명 ru·en 텍스트 매칭)"""
        db_query = self.db.query(Tour).options(*_eager_options()).filter(Tour.is_draft.is_(False))
        if category_id is not None:
            db_query = db_query.filter(
                Tour.tour_category_assignments.any(TourCategoryAssignment.category_id == category_id)
            )
        if country_id is not None:
            db_query = db_query.filter(Tour.tour_countries.any(TourCountry.country_id == country_id))
        if city_id is not None:
            db_query = db_query.filter(Tour.tour_cities.any(TourCity.city_id == city_id))
        if is_featured is not None:
            db_query = db_query.filter(Tour.is_featured.is_(is_featured))
        if is_promotion is not None:
            db_query = db_query.filter(Tour.is_promotion.is_(is_promotion))

        tours = db_query.order_by(Tour.created_at.desc(), Tour.id.desc()).all()

        # JSON 컬럼은 DB 별로 검색 문법이 달라 메모리에서 필터링
        if query and query.strip():
            needle = query.strip().lower()

            def matches(tour: Tour) -> bool:
                haystack = list(parse_field(tour.title).values()) + list(
                    parse_field(tour.description).values()
                )
                return any(needle in text.lower() for text in haystack)

            tours = [tour for tour in tours if matches(tour)]

        if duration in DURATION_BUCKETS:
            bucket = DURATION_BUCKETS[duration]
            tours = [tour for tour in tours if tour.duration_days and bucket(tour.duration_days)]

        return tours[:limit]

    def get_search_suggestions(self, query: str) -> list[dict[str, Any]]:
        """
        검색 자동완성 제안

        Matches the ru and en names of published tours, active countries and
        cities, categories, tour types and active hotels. Each matching
        language yields one entry; duplicates (same text and type) are
        dropped and at most ``SUGGESTION_LIMIT`` entries are returned.

        Args:
            query: 검색어 (2자 미만이면 빈 목록)

        Returns:
            ``{"text", "textEn", "type", "id"}`` 목록
        """
        needle = (query or "").strip().lower()
        if len(needle) < SUGGESTION_MIN_LENGTH:
            return []

        sources: list[tuple[str, Any, Any]] = []
        sources += [
            (SUGGESTION_TOUR, tour.id, tour.title)
            for tour in self.db.query(Tour).filter(Tour.is_draft.is_(False)).order_by(Tour.id)
        ]
        sources += [
            (SUGGESTION_COUNTRY, country.id, country.name)
            for country in self.db.query(Country).filter(Country.is_active.is_(True)).order_by(Country.id)
        ]
        sources += [
            (SUGGESTION_CITY, city.id, city.name)
            for city in self.db.query(City).filter(City.is_active.is_(True)).order_by(City.id)
        ]
        sources += [
            (SUGGESTION_CATEGORY, category.id, category.name)
            for category in self.db.query(Category).order_by(Category.id)
        ]
        sources += [(SUGGESTION_TOUR_TYPE, None, label) for label in TOUR_TYPE_LABELS]
        sources += [
            (SUGGESTION_HOTEL, hotel.id, hotel.name)
            for hotel in self.db.query(Hotel).filter(Hotel.is_active.is_(True)).order_by(Hotel.id)
        ]

        suggestions: list[dict[str, Any]] = []
        seen: set[tuple[str, str]] = set()
        for kind, item_id, value in sources:
            names = parse_field(value)
            ru, en = names.get("ru", ""), names.get("en", "")
            candidates = [(ru, en)] if needle in ru.lower() else []
            if en and en != ru and needle in en.lower():
                candidates.append((en, en))
            for text, text_en in candidates:
                if (text, kind) in seen:
                    continue
                seen.add((text, kind))
                suggestions.append({"text": text, "textEn": text_en, "type": kind, "id": item_id})
                if len(suggestions) >= SUGGESTION_LIMIT:
                    return suggestions
        return suggestions

    def get_main_image(self, tour_id: int) -> str:
        """대표 이미지 URL (없으면 첫 번째 갤러리 이미지)"""
        tour = self.get_tour(tour_id)
        if tour.main_image:
            return tour.main_image
        images = parse_json_list(tour.images)
        if images:
            first = images[0]
            return first.get("url") if isinstance(first, dict) else str(first)
        raise NotFoundError("Tour image not found", "TOUR_IMAGE_NOT_FOUND")

    def get_price_catalogue(self) -> dict[str, PriceCalculatorComponent]:
        """서비스 항목 보강용 가격 구성요소 (key -> component)"""
        components = self.db.query(PriceCalculatorComponent).all()
        return {component.key: component for component in components}

    # ------------------------------------------------------------------
    # 검증
    # ------------------------------------------------------------------

    def _validate_for_create(self, payload: dict[str, Any]) -> None:
        title = payload.get("title")
        if not title:
            raise ValidationError("Title is required", details=[{"field": "title"}])
        _require_bilingual(title, "Title")
        if payload.get("description") is not None:
            _require_bilingual(payload["description"], "Description")
        if payload.get("price") is None:
            raise ValidationError("Price is required", details=[{"field": "price"}])
        if payload.get("duration_days") is None:
            raise ValidationError("Duration is required", details=[{"field": "durationDays"}])
        if not (payload.get("category_id") or payload.get("categories_ids")):
            raise ValidationError("Category is required", details=[{"field": "categoryId"}])

    def _validate_for_publish(self, tour: Tour) -> None:
        prefix = "Cannot publish: "
        _require_bilingual(tour.title, "Title", prefix)
        _require_bilingual(tour.description, "Description", prefix)
        for label, value, field in (
            ("Category", tour.category_id, "categoryId"),
            ("Country", tour.country_id, "countryId"),
            ("City", tour.city_id, "cityId"),
        ):
            if value is None:
                raise ValidationError(f"{prefix}{label} is required", details=[{"field": field}])

    # ------------------------------------------------------------------
    # 쓰기
    # ------------------------------------------------------------------

    def _apply_fields(self, tour: Tour, payload: dict[str, Any]) -> None:
        for column in MULTILINGUAL_COLUMNS:
            if column in payload:
                setattr(tour, column, normalize_multilingual_input(payload[column]))
        for column in JSON_LIST_COLUMNS:
            if column in payload:
                setattr(tour, column, dump_json_list(payload[column]))
        for column in SCALAR_COLUMNS:
            if column in payload:
                setattr(tour, column, payload[column])
        if payload.get("pickup_info_en") is not None:
            pickup = parse_field(tour.pickup_info)
            pickup["en"] = payload["pickup_info_en"]
            tour.pickup_info = pickup

    def create_tour(self, payload: dict[str, Any]) -> Tour:
        """
        투어 생성

        Args:
            payload: 요청 본문 중 실제로 전달된 필드 (snake_case)

        Returns:
            생성된 Tour
        """
        payload = _without_nulls_for_required(payload)
        is_draft = bool(payload.get("is_draft", False))
        if not is_draft:
            self._validate_for_create(payload)

        with db_transaction(self.db):
            tour = Tour(
                title=normalize_multilingual_input(payload.get("title")) or {"ru": "", "en": ""},
                description=normalize_multilingual_input(payload.get("description")) or {"ru": "", "en": ""},
                price_type=payload.get("price_type") or "per_person",
                is_draft=is_draft,
                is_featured=False,
                rating=0,
                reviews_count=0,
            )
            self._apply_fields(tour, {k: v for k, v in payload.items() if k not in ("title", "description")})
            self.db.add(tour)
            self.db.flush()
            reconcile_tour_associations(self.db, tour, payload, self.city_country_policy)

        logger.info(f"Tour {tour.id} created ({'draft' if is_draft else 'published'})")
        return self.get_tour(tour.id)

    def update_tour(self, tour_id: int, payload: dict[str, Any]) -> Tour:
        """
        투어 부분 수정

        Only keys present in ``payload`` change. ``isDraft: true`` on a
        published tour is refused; ``isDraft: false`` on a draft publishes it
        and runs the publish checks.
        """
        payload = _without_nulls_for_required(payload)
        tour = self.get_tour(tour_id)
        requested_draft = payload.get("is_draft")
        publishing = requested_draft is False and tour.is_draft

        if requested_draft is True and not tour.is_draft:
            raise ValidationError(
                "Published tours cannot be moved back to draft",
                details=[{"field": "isDraft"}],
            )

        if not tour.is_draft or publishing:
            if payload.get("title") is not None:
                _require_bilingual(payload["title"], "Title")
            if payload.get("description") is not None:
                _require_bilingual(payload["description"], "Description")

        with db_transaction(self.db):
            self._apply_fields(tour, payload)
            self.db.flush()
            reconcile_tour_associations(self.db, tour, payload, self.city_country_policy)
            if publishing:
                self._validate_for_publish(tour)
                tour.is_draft = False

        logger.info(f"Tour {tour_id} updated (fields: {sorted(payload)})")
        self.db.expire_all()
        return self.get_tour(tour_id)

    def publish_tour(self, tour_id: int) -> Tour:
        """초안 투어를 공개 (검증 실패 시 초안 유지)"""
        tour = self.get_tour(tour_id)
        if not tour.is_draft:
            raise ValidationError("Tour is already published", code="ALREADY_PUBLISHED")

        self._validate_for_publish(tour)

        with db_transaction(self.db):
            tour.is_draft = False

        logger.info(f"Tour {tour_id} published")
        return self.get_tour(tour_id)

    def duplicate_tour(self, tour_id: int) -> Tour:
        """투어 복제 (모든 연관 관계 포함, 초안으로 생성)"""
        source = self.get_tour(tour_id)

        title = parse_field(source.title)
        for lang, suffix in COPY_SUFFIX.items():
            title[lang] = f"{title.get(lang, '')}{suffix}"

        with db_transaction(self.db):
            copy = Tour(title=title, is_draft=True, is_featured=False, rating=0, reviews_count=0)
            for column in MULTILINGUAL_COLUMNS:
                value = getattr(source, column)
                if column != "title" and value is not None:
                    setattr(copy, column, parse_field(value))
            for column in JSON_LIST_COLUMNS:
                setattr(copy, column, getattr(source, column))
            for column in SCALAR_COLUMNS:
                if column not in RESET_ON_COPY:
                    setattr(copy, column, getattr(source, column))
            self.db.add(copy)
            self.db.flush()
            copy_tour_associations(self.db, source, copy)

        logger.info(f"Tour {tour_id} duplicated as {copy.id}")
        return self.get_tour(copy.id)

    def delete_tour(self, tour_id: int) -> None:
        """투어 삭제 (연결 행, 리뷰, 예약 요청 포함)"""
        tour = self.get_tour(tour_id)
        with db_transaction(self.db):
            self.db.delete(tour)
        logger.info(f"Tour {tour_id} deleted")


def get_tour_service(db: Session, city_country_policy: str = CITY_POLICY_WARN) -> TourService:
    """TourService 인스턴스 생성"""
    return TourService(db, city_country_policy)
