"""
참조 데이터 서비스 (국가, 도시, 카테고리, 호텔, 가이드, 기사, 투어 블록)

One generic service drives CRUD for every lookup table; a
``ReferenceResource`` describes which columns are multilingual, which hold
JSON arrays and which fields are required on create.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bunyod_tour.database import TRANSIENT_DB_ERRORS, db_transaction, with_retry
from bunyod_tour.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError
from bunyod_tour.logging_config import get_logger
from bunyod_tour.models import (
    Category,
    City,
    Country,
    Driver,
    Guide,
    Hotel,
    TourBlock,
)
from bunyod_tour.utils.multilingual import dump_json_list, normalize_multilingual_input

logger = get_logger("reference_service")


@dataclass(frozen=True)
class ReferenceResource:
    model: type
    label: str
    required: tuple[str, ...] = ("name",)
    multilingual: tuple[str, ...] = ("name",)
    json_lists: tuple[str, ...] = ()
    order_by: str = "id"


CATEGORIES = ReferenceResource(Category, "Category")
COUNTRIES = ReferenceResource(Country, "Country")
CITIES = ReferenceResource(City, "City", required=("name", "country_id"))
HOTELS = ReferenceResource(
    Hotel,
    "Hotel",
    multilingual=("name", "description", "address"),
    json_lists=("images", "amenities"),
)
GUIDES = ReferenceResource(
    Guide, "Guide", multilingual=("name", "description"), json_lists=("languages",)
)
DRIVERS = ReferenceResource(Driver, "Driver")
TOUR_BLOCKS = ReferenceResource(
    TourBlock,
    "Tour block",
    required=("title",),
    multilingual=("title", "description"),
    order_by="sort_order",
)


class ReferenceService:
    """참조 데이터 CRUD 서비스"""

    def __init__(
        self,
        db: Session,
        resource: ReferenceResource,
        retry_attempts: int = 3,
        retry_delay: float = 1.0,
    ):
        self.db = db
        self.resource = resource
        self.model = resource.model
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay

    def _read(self, operation: Callable[[], Any]) -> Any:
        try:
            return with_retry(operation, self.retry_attempts, self.retry_delay, db=self.db)
        except TRANSIENT_DB_ERRORS:
            raise DatabaseError()

    def get_all(self, filters: Optional[dict[str, Any]] = None) -> list:
        """목록 조회 (일시적 DB 오류 시 재시도)"""

        def query():
            q = self.db.query(self.model)
            for column, value in (filters or {}).items():
                if value is not None:
                    q = q.filter(getattr(self.model, column) == value)
            return q.order_by(
                getattr(self.model, self.resource.order_by), self.model.id
            ).all()

        return self._read(query)

    def get(self, item_id: int):
        item = self._read(lambda: self.db.get(self.model, item_id))
        if item is None:
            raise NotFoundError(f"{self.resource.label} not found")
        return item

    def _apply(self, item, payload: dict[str, Any]) -> None:
        for field, value in payload.items():
            if field in self.resource.multilingual:
                value = normalize_multilingual_input(value)
            elif field in self.resource.json_lists:
                value = dump_json_list(value)
            setattr(item, field, value)

    def _check_references(self, payload: dict[str, Any]) -> None:
        country_id = payload.get("country_id")
        if country_id is not None and self.db.get(Country, country_id) is None:
            raise ValidationError("Country not found", details=[{"field": "countryId"}])
        city_id = payload.get("city_id")
        if city_id is not None and self.db.get(City, city_id) is None:
            raise ValidationError("City not found", details=[{"field": "cityId"}])

    def _commit(self, item, action: str):
        try:
            with db_transaction(self.db):
                self.db.add(item)
        except IntegrityError as e:
            logger.warning(f"{self.resource.label} {action} rejected: {e.orig}")
            raise ConflictError(f"{self.resource.label} already exists")
        self.db.refresh(item)
        return item

    def create(self, payload: dict[str, Any]):
        """생성 (필수 항목 확인)"""
        for field in self.resource.required:
            if payload.get(field) in (None, "", {}):
                raise ValidationError(
                    f"{field.replace('_', ' ').capitalize()} is required",
                    details=[{"field": field}],
                )
        self._check_references(payload)
        item = self.model()
        self._apply(item, payload)
        item = self._commit(item, "create")
        logger.info(f"{self.resource.label} {item.id} created")
        return item

    def update(self, item_id: int, payload: dict[str, Any]):
        """부분 수정"""
        item = self.get(item_id)
        self._check_references(payload)
        self._apply(item, payload)
        item = self._commit(item, "update")
        logger.info(f"{self.resource.label} {item_id} updated")
        return item

    def delete(self, item_id: int) -> None:
        item = self.get(item_id)
        try:
            with db_transaction(self.db):
                self.db.delete(item)
        except IntegrityError as e:
            logger.warning(f"{self.resource.label} {item_id} delete rejected: {e.orig}")
            raise ConflictError(f"{self.resource.label} is still in use")
        logger.info(f"{self.resource.label} {item_id} deleted")


def get_reference_service(db: Session, resource: ReferenceResource, settings=None) -> ReferenceService:
    """ReferenceService 인스턴스 생성"""
    if settings is None:
        return ReferenceService(db, resource)
    return ReferenceService(
        db,
        resource,
        retry_attempts=settings.db_retry_attempts,
        retry_delay=settings.db_retry_delay_seconds,
    )
