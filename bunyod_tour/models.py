"""
데이터베이스 모델 정의

Multilingual attributes (titles, names, descriptions) are JSON columns that
normally hold ``{"ru": ..., "en": ...}``. Older rows may contain a plain
string or a JSON-encoded string instead; readers go through
``bunyod_tour.utils.multilingual`` and never assume the shape.

Tour relations (countries, cities, categories, blocks) are stored only in
join tables carrying an ``is_primary`` flag. The legacy single-id view
(``Tour.country_id`` and friends) is computed from the primary row.
"""

from __future__ import annotations

import enum

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

MultilingualJSON = JSON().with_variant(JSONB(), "postgresql")


# ===========================================
# Enum 정의
# ===========================================


class CategoryType(str, enum.Enum):
    """카테고리 종류"""

    TOUR = "tour"
    HOTEL = "hotel"


class PriceType(str, enum.Enum):
    PER_PERSON = "per_person"
    PER_GROUP = "per_group"


class BookingStatus(str, enum.Enum):
    """예약 요청 상태"""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


# ===========================================
# 참조 데이터
# ===========================================


class Category(Base):
    """
    카테고리 테이블
    설명: 투어 및 호텔 분류 (type = tour | hotel)
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(MultilingualJSON, nullable=False)
    type = Column(String(20), nullable=False, default=CategoryType.TOUR.value)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Country(Base):
    """
    국가 테이블
    """

    __tablename__ = "countries"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(MultilingualJSON, nullable=False)
    code = Column(String(3), unique=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    cities = relationship(
        "City", back_populates="country", order_by="City.id", cascade="all, delete-orphan"
    )


class City(Base):
    """
    도시 테이블
    """

    __tablename__ = "cities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(MultilingualJSON, nullable=False)
    country_id = Column(Integer, ForeignKey("countries.id"), nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    country = relationship("Country", back_populates="cities")


class Hotel(Base):
    """
    호텔 테이블
    """

    __tablename__ = "hotels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(MultilingualJSON, nullable=False)
    description = Column(MultilingualJSON)
    address = Column(MultilingualJSON)
    stars = Column(Integer)
    rating = Column(Float)
    images = Column(Text)  # JSON array string
    amenities = Column(Text)  # JSON array string
    country_id = Column(Integer, ForeignKey("countries.id"))
    city_id = Column(Integer, ForeignKey("cities.id"))
    is_active = Column(Boolean, default=True, nullable=False)
    is_draft = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    country = relationship("Country")
    city = relationship("City")


class Guide(Base):
    """
    가이드 테이블
    """

    __tablename__ = "guides"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(MultilingualJSON, nullable=False)
    description = Column(MultilingualJSON)
    languages = Column(Text)  # JSON array string
    phone = Column(String(50))
    email = Column(String(255))
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Driver(Base):
    """
    운전기사 테이블
    """

    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(MultilingualJSON, nullable=False)
    phone = Column(String(50))
    vehicle_type = Column(String(100))
    license_number = Column(String(100))
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class TourBlock(Base):
    """
    투어 블록 테이블
    설명: 메인 페이지 섹션 (예: "Популярные туры")
    """

    __tablename__ = "tour_blocks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(MultilingualJSON, nullable=False)
    description = Column(MultilingualJSON)
    slug = Column(String(100), unique=True)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


# ===========================================
# 투어 및 연결 테이블
# ===========================================


def _primary_target_id(rows, attribute: str):
    """Primary row's target id; first row when none is flagged"""
    if not rows:
        return None
    for row in rows:
        if row.is_primary:
            return getattr(row, attribute)
    return getattr(rows[0], attribute)


class Tour(Base):
    """
    투어 테이블
    설명: 다국어 투어 정보. is_draft가 상태의 유일한 기준이며 is_active는 항상 not is_draft
    """

    __tablename__ = "tours"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(MultilingualJSON, nullable=False)
    description = Column(MultilingualJSON)
    short_desc = Column(MultilingualJSON)
    price = Column(Float)
    price_type = Column(String(20), default=PriceType.PER_PERSON.value)
    original_price = Column(Float)
    duration_days = Column(Integer)
    difficulty = Column(String(50))
    max_people = Column(Integer)
    min_people = Column(Integer)
    tour_type = Column(String(50))
    main_image = Column(String(500))
    images = Column(Text)  # JSON array string
    services = Column(Text)  # JSON array string
    itinerary = Column(Text)  # JSON array string
    highlights = Column(MultilingualJSON)
    map_points = Column(Text)  # JSON array string
    included = Column(MultilingualJSON)
    excluded = Column(MultilingualJSON)
    pickup_info = Column(MultilingualJSON)
    start_time_options = Column(Text)  # JSON array string
    languages = Column(Text)  # JSON array string
    available_months = Column(Text)  # JSON array string
    available_days = Column(Text)  # JSON array string
    start_date = Column(String(20))
    end_date = Column(String(20))
    is_promotion = Column(Boolean, default=False, nullable=False)
    discount_percent = Column(Float, default=0, nullable=False)
    is_draft = Column(Boolean, default=True, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    rating = Column(Float, default=0, nullable=False)
    reviews_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # 관계 설정 (primary 먼저, 그 다음 삽입 순서)
    tour_countries = relationship(
        "TourCountry",
        back_populates="tour",
        cascade="all, delete-orphan",
        order_by=lambda: [TourCountry.is_primary.desc(), TourCountry.id],
    )
    tour_cities = relationship(
        "TourCity",
        back_populates="tour",
        cascade="all, delete-orphan",
        order_by=lambda: [TourCity.is_primary.desc(), TourCity.id],
    )
    tour_category_assignments = relationship(
        "TourCategoryAssignment",
        back_populates="tour",
        cascade="all, delete-orphan",
        order_by=lambda: [TourCategoryAssignment.is_primary.desc(), TourCategoryAssignment.id],
    )
    tour_block_assignments = relationship(
        "TourBlockAssignment",
        back_populates="tour",
        cascade="all, delete-orphan",
        order_by=lambda: [TourBlockAssignment.is_primary.desc(), TourBlockAssignment.id],
    )
    tour_hotels = relationship(
        "TourHotel",
        back_populates="tour",
        cascade="all, delete-orphan",
        order_by=lambda: [TourHotel.is_default.desc(), TourHotel.id],
    )
    tour_guides = relationship(
        "TourGuide",
        back_populates="tour",
        cascade="all, delete-orphan",
        order_by=lambda: [TourGuide.is_default.desc(), TourGuide.id],
    )
    tour_drivers = relationship(
        "TourDriver",
        back_populates="tour",
        cascade="all, delete-orphan",
        order_by=lambda: [TourDriver.is_default.desc(), TourDriver.id],
    )
    booking_requests = relationship(
        "BookingRequest", back_populates="tour", cascade="all, delete-orphan"
    )
    reviews = relationship(
        "Review", back_populates="tour", cascade="all, delete-orphan", order_by="Review.id"
    )

    @hybrid_property
    def is_active(self):
        return not self.is_draft

    @is_active.expression
    def is_active(cls):
        return cls.is_draft.is_(False)

    # 레거시 단일 ID (primary 연결 행에서 계산)
    @property
    def country_id(self):
        return _primary_target_id(self.tour_countries, "country_id")

    @property
    def city_id(self):
        return _primary_target_id(self.tour_cities, "city_id")

    @property
    def category_id(self):
        return _primary_target_id(self.tour_category_assignments, "category_id")

    @property
    def tour_block_id(self):
        return _primary_target_id(self.tour_block_assignments, "tour_block_id")


class TourCountry(Base):
    __tablename__ = "tour_countries"
    __table_args__ = (UniqueConstraint("tour_id", "country_id", name="uq_tour_country"),)

    id = Column(Integer, primary_key=True, index=True)
    tour_id = Column(Integer, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True)
    country_id = Column(Integer, ForeignKey("countries.id"), nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False)

    tour = relationship("Tour", back_populates="tour_countries")
    country = relationship("Country")


class TourCity(Base):
    __tablename__ = "tour_cities"
    __table_args__ = (UniqueConstraint("tour_id", "city_id", name="uq_tour_city"),)

    id = Column(Integer, primary_key=True, index=True)
    tour_id = Column(Integer, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False)
    nights_count = Column(Integer)

    tour = relationship("Tour", back_populates="tour_cities")
    city = relationship("City")


class TourCategoryAssignment(Base):
    __tablename__ = "tour_category_assignments"
    __table_args__ = (UniqueConstraint("tour_id", "category_id", name="uq_tour_category"),)

    id = Column(Integer, primary_key=True, index=True)
    tour_id = Column(Integer, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False)

    tour = relationship("Tour", back_populates="tour_category_assignments")
    category = relationship("Category")


class TourBlockAssignment(Base):
    __tablename__ = "tour_block_assignments"
    __table_args__ = (UniqueConstraint("tour_id", "tour_block_id", name="uq_tour_block"),)

    id = Column(Integer, primary_key=True, index=True)
    tour_id = Column(Integer, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True)
    tour_block_id = Column(Integer, ForeignKey("tour_blocks.id"), nullable=False)
    is_primary = Column(Boolean, default=False, nullable=False)

    tour = relationship("Tour", back_populates="tour_block_assignments")
    tour_block = relationship("TourBlock")


class TourHotel(Base):
    __tablename__ = "tour_hotels"
    __table_args__ = (UniqueConstraint("tour_id", "hotel_id", name="uq_tour_hotel"),)

    id = Column(Integer, primary_key=True, index=True)
    tour_id = Column(Integer, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    price_per_night = Column(Float)

    tour = relationship("Tour", back_populates="tour_hotels")
    hotel = relationship("Hotel")


class TourGuide(Base):
    __tablename__ = "tour_guides"
    __table_args__ = (UniqueConstraint("tour_id", "guide_id", name="uq_tour_guide"),)

    id = Column(Integer, primary_key=True, index=True)
    tour_id = Column(Integer, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True)
    guide_id = Column(Integer, ForeignKey("guides.id"), nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)

    tour = relationship("Tour", back_populates="tour_guides")
    guide = relationship("Guide")


class TourDriver(Base):
    __tablename__ = "tour_drivers"
    __table_args__ = (UniqueConstraint("tour_id", "driver_id", name="uq_tour_driver"),)

    id = Column(Integer, primary_key=True, index=True)
    tour_id = Column(Integer, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)

    tour = relationship("Tour", back_populates="tour_drivers")
    driver = relationship("Driver")


# ===========================================
# 예약 및 리뷰
# ===========================================


class BookingRequest(Base):
    """
    예약 요청 테이블
    설명: 고객이 제출한 투어 예약 문의
    """

    __tablename__ = "booking_requests"

    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(50))
    preferred_date = Column(String(50), nullable=False)
    number_of_people = Column(Integer, nullable=False)
    comments = Column(Text)
    status = Column(String(20), default=BookingStatus.PENDING.value, nullable=False)
    tour_id = Column(Integer, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    tour = relationship("Tour", back_populates="booking_requests")


class Review(Base):
    """
    리뷰 테이블
    설명: 생성 시 항상 미승인 상태 (is_moderated = False)
    """

    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    tour_id = Column(Integer, ForeignKey("tours.id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_name = Column(String(255), nullable=False)
    rating = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
    photos = Column(Text)  # JSON array string
    is_moderated = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    tour = relationship("Tour", back_populates="reviews")


# ===========================================
# 가격 계산기
# ===========================================


class PriceCalculatorComponent(Base):
    """
    가격 계산기 구성요소 테이블
    설명: 숙박, 가이드, 교통 등 단가 목록 (TJS)
    """

    __tablename__ = "price_calculator_components"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, nullable=False, index=True)
    category = Column(String(50), nullable=False)
    name = Column(MultilingualJSON, nullable=False)
    price = Column(Float, nullable=False)
    unit = Column(String(50), nullable=False)
    description = Column(Text)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
