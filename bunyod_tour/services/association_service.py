"""
투어 연관 관계 동기화 서비스

A tour links to countries, cities, categories and tour blocks through join
tables with an ``is_primary`` flag, and to hotels, guides and drivers through
join tables with an ``is_default`` flag. Write payloads may carry an id
array (``countriesIds``), a single legacy id (``countryId``), both, or
neither:

* array present (even empty): the join rows are replaced, index 0 primary
* only the single id: the primary row is updated or created
* neither: the relation is left untouched

All writes happen in the caller's transaction.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from sqlalchemy.orm import Session

from bunyod_tour.exceptions import ValidationError
from bunyod_tour.logging_config import get_logger
from bunyod_tour.models import (
    Category,
    City,
    Country,
    Driver,
    Guide,
    Hotel,
    Tour,
    TourBlock,
    TourBlockAssignment,
    TourCategoryAssignment,
    TourCity,
    TourCountry,
    TourDriver,
    TourGuide,
    TourHotel,
)

logger = get_logger("association_service")

CITY_POLICY_WARN = "warn"
CITY_POLICY_REJECT = "reject"


@dataclass(frozen=True)
class Association:
    """연관 관계 설정"""

    name: str
    join_model: type
    target_model: type
    target_column: str
    relationship: str
    ids_key: str
    scalar_key: Optional[str] = None
    flag_column: str = "is_primary"
    flag_first: bool = True


COUNTRIES = Association(
    name="countries",
    join_model=TourCountry,
    target_model=Country,
    target_column="country_id",
    relationship="tour_countries",
    ids_key="countries_ids",
    scalar_key="country_id",
)
CITIES = Association(
    name="cities",
    join_model=TourCity,
    target_model=City,
    target_column="city_id",
    relationship="tour_cities",
    ids_key="cities_ids",
    scalar_key="city_id",
)
CATEGORIES = Association(
    name="categories",
    join_model=TourCategoryAssignment,
    target_model=Category,
    target_column="category_id",
    relationship="tour_category_assignments",
    ids_key="categories_ids",
    scalar_key="category_id",
)
TOUR_BLOCKS = Association(
    name="tour_blocks",
    join_model=TourBlockAssignment,
    target_model=TourBlock,
    target_column="tour_block_id",
    relationship="tour_block_assignments",
    ids_key="tour_block_ids",
    scalar_key="tour_block_id",
)
# 호텔/가이드/기사는 기본값 플래그를 자동으로 지정하지 않음
HOTELS = Association(
    name="hotels",
    join_model=TourHotel,
    target_model=Hotel,
    target_column="hotel_id",
    relationship="tour_hotels",
    ids_key="hotel_ids",
    flag_column="is_default",
    flag_first=False,
)
GUIDES = Association(
    name="guides",
    join_model=TourGuide,
    target_model=Guide,
    target_column="guide_id",
    relationship="tour_guides",
    ids_key="guide_ids",
    flag_column="is_default",
    flag_first=False,
)
DRIVERS = Association(
    name="drivers",
    join_model=TourDriver,
    target_model=Driver,
    target_column="driver_id",
    relationship="tour_drivers",
    ids_key="driver_ids",
    flag_column="is_default",
    flag_first=False,
)

ASSOCIATIONS: tuple[Association, ...] = (
    CATEGORIES,
    COUNTRIES,
    CITIES,
    TOUR_BLOCKS,
    HOTELS,
    GUIDES,
    DRIVERS,
)


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def _unique(ids: Sequence[int]) -> list[int]:
    seen: set[int] = set()
    ordered = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


def _ensure_targets_exist(
    db: Session, association: Association, ids: Sequence[int], payload_key: str
) -> None:
    if not ids:
        return
    model = association.target_model
    found = {row[0] for row in db.query(model.id).filter(model.id.in_(ids)).all()}
    missing = [item for item in ids if item not in found]
    if missing:
        raise ValidationError(
            f"{_camel(payload_key)} references unknown {association.name}: {missing}",
            details=[{"field": _camel(payload_key), "missing": missing}],
        )


def _rows(db: Session, tour: Tour, association: Association) -> list:
    join = association.join_model
    flag = getattr(join, association.flag_column)
    return (
        db.query(join)
        .filter(join.tour_id == tour.id)
        .order_by(flag.desc(), join.id)
        .all()
    )


def _replace_rows(
    db: Session,
    tour: Tour,
    association: Association,
    ids: Sequence[int],
    extra: Optional[dict[int, dict[str, Any]]] = None,
) -> None:
    join = association.join_model
    for row in _rows(db, tour, association):
        db.delete(row)
    db.flush()

    for index, target_id in enumerate(_unique(ids)):
        values = {
            "tour_id": tour.id,
            association.target_column: target_id,
            association.flag_column: association.flag_first and index == 0,
        }
        if extra and target_id in extra:
            values.update(extra[target_id])
        db.add(join(**values))
    db.flush()


def _upsert_primary(db: Session, tour: Tour, association: Association, target_id: int) -> None:
    join = association.join_model
    flag = association.flag_column
    target_column = association.target_column
    rows = _rows(db, tour, association)

    primary = next((row for row in rows if getattr(row, flag)), None)
    same_target = next((row for row in rows if getattr(row, target_column) == target_id), None)

    if primary is not None and getattr(primary, target_column) == target_id:
        return

    if primary is not None:
        # 같은 대상을 가리키는 보조 행은 제거 후 primary 행을 갱신
        if same_target is not None:
            db.delete(same_target)
            db.flush()
        setattr(primary, target_column, target_id)
    elif same_target is not None:
        setattr(same_target, flag, True)
    else:
        db.add(join(**{"tour_id": tour.id, target_column: target_id, flag: True}))
    db.flush()


def reconcile_association(
    db: Session,
    tour: Tour,
    association: Association,
    scalar_id: Optional[int] = None,
    ids: Optional[Sequence[int]] = None,
    extra: Optional[dict[int, dict[str, Any]]] = None,
) -> list:
    """
    한 연관 관계를 요청 값에 맞게 동기화합니다.

    Args:
        db: 데이터베이스 세션 (호출자의 트랜잭션)
        tour: 대상 투어 (flush 되어 id 가 있어야 함)
        association: 연관 관계 설정
        scalar_id: 레거시 단일 ID
        ids: ID 배열. None 이 아니면 전체 교체 ([] 는 모두 삭제)
        extra: 대상 ID 별 추가 컬럼 값 (예: 도시별 숙박일 수)

    Returns:
        primary 가 먼저 오는 연결 행 목록
    """
    if ids is not None:
        unique_ids = _unique(ids)
        _ensure_targets_exist(db, association, unique_ids, association.ids_key)
        _replace_rows(db, tour, association, unique_ids, extra)
    elif scalar_id is not None and association.scalar_key:
        _ensure_targets_exist(db, association, [scalar_id], association.scalar_key)
        _upsert_primary(db, tour, association, scalar_id)
    else:
        return _rows(db, tour, association)

    db.expire(tour, [association.relationship])
    return _rows(db, tour, association)


def _city_extra(city_nights: Optional[dict]) -> Optional[dict[int, dict[str, Any]]]:
    if not city_nights:
        return None
    extra = {}
    for city_id, nights in city_nights.items():
        try:
            extra[int(city_id)] = {"nights_count": int(nights)}
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid nights value {nights!r} for city {city_id!r}")
    return extra


def _apply_city_nights(db: Session, tour: Tour, extra: dict[int, dict[str, Any]]) -> None:
    for row in _rows(db, tour, CITIES):
        if row.city_id in extra:
            row.nights_count = extra[row.city_id]["nights_count"]
    db.flush()


def check_city_membership(db: Session, tour: Tour, policy: str = CITY_POLICY_WARN) -> list[int]:
    """
    투어 도시가 선택된 국가에 속하는지 확인합니다.

    Returns:
        선택된 국가 밖에 있는 도시 ID 목록. policy 가 "reject" 이면
        ValidationError 를 발생시킵니다.
    """
    country_ids = {row.country_id for row in _rows(db, tour, COUNTRIES)}
    city_ids = [row.city_id for row in _rows(db, tour, CITIES)]
    if not country_ids or not city_ids:
        return []

    cities = db.query(City).filter(City.id.in_(city_ids)).all()
    outside = sorted(city.id for city in cities if city.country_id not in country_ids)
    if not outside:
        return []

    if policy == CITY_POLICY_REJECT:
        raise ValidationError(
            "Some cities do not belong to the selected countries",
            details=[{"field": "citiesIds", "cities": outside}],
        )
    logger.warning(
        f"Tour {tour.id}: cities {outside} are outside countries {sorted(country_ids)}"
    )
    return outside


def reconcile_tour_associations(
    db: Session, tour: Tour, payload: dict[str, Any], policy: str = CITY_POLICY_WARN
) -> None:
    """
    요청 본문(snake_case 키)에 포함된 모든 연관 관계를 동기화합니다.

    Keys absent from ``payload`` leave their relation untouched. An explicit
    ``null`` for a single id is treated the same as absence.
    """
    touched_geography = False
    city_extra = _city_extra(payload.get("city_nights"))

    for association in ASSOCIATIONS:
        ids_present = association.ids_key in payload and payload[association.ids_key] is not None
        scalar_value = payload.get(association.scalar_key) if association.scalar_key else None
        if not ids_present and scalar_value is None:
            continue

        reconcile_association(
            db,
            tour,
            association,
            scalar_id=scalar_value,
            ids=payload[association.ids_key] if ids_present else None,
            extra=city_extra if association is CITIES else None,
        )
        if association in (COUNTRIES, CITIES):
            touched_geography = True

    if city_extra and not (CITIES.ids_key in payload and payload[CITIES.ids_key] is not None):
        _apply_city_nights(db, tour, city_extra)
        db.expire(tour, [CITIES.relationship])

    if touched_geography:
        check_city_membership(db, tour, policy)


def copy_tour_associations(db: Session, source: Tour, target: Tour) -> None:
    """모든 연결 행을 순서와 플래그를 유지한 채 복사"""
    for association in ASSOCIATIONS:
        for row in _rows(db, source, association):
            values = {
                column.key: getattr(row, column.key)
                for column in association.join_model.__table__.columns
                if column.key not in ("id", "tour_id")
            }
            db.add(association.join_model(tour_id=target.id, **values))
    db.flush()
    db.expire(target, [association.relationship for association in ASSOCIATIONS])
