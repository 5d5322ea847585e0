"""
가격 계산기 서비스

Unit prices are in Tajik somoni (TJS). ``initialize_defaults`` seeds the
standard catalogue and never overwrites components that already exist.
"""

from typing import Any, Iterable

from sqlalchemy.orm import Session

from bunyod_tour.database import db_transaction
from bunyod_tour.exceptions import ConflictError, NotFoundError, ValidationError
from bunyod_tour.logging_config import get_logger
from bunyod_tour.models import PriceCalculatorComponent
from bunyod_tour.utils.multilingual import localize_field, normalize_multilingual_input

logger = get_logger("price_calculator_service")

CURRENCY = "TJS"

# (key, category, name ru, name en, price, unit, sort order)
DEFAULT_COMPONENTS = (
    ("accommodation_std", "accommodation", "Проживание, STD, базовая опция (хостел, гестхоусы)", "Accommodation, STD, base option (guesthouses)", 250.0, "человек/день", 1),
    ("guide_local", "guides", "Тур-гид, местный", "Tour Guide, local", 500.0, "единица", 1),
    ("guide_vip", "guides", "Тур-гид, VIP", "VIP Tour Guide", 1000.0, "единица", 2),
    ("guide_regional", "guides", "Тур-гид, региональный", "Regional Tour Guide", 600.0, "единица", 3),
    ("train_uzbekistan", "local_transport", "Билеты ЖД по Узбекистану", "Train tickets in Uzbekistan", 380.0, "человек/час", 1),
    ("ticket_rudaki", "local_transport", "Входной билет в комплекс Рудаки, Пенджикент", "Entrance ticket to Rudaki Complex, Panjakent", 30.0, "человек/час", 2),
    ("ticket_kuli", "local_transport", "Входной билет в Кули (аквапарк) Душанбе", "Entrance tickets to Kuli (Aquapark) Dushanbe", 150.0, "человек/час", 3),
    ("ticket_bokhtar", "local_transport", "Входные билеты в объектах г.Бохтар", "Entrance tickets to visiting objects of Bokhtar city", 40.0, "человек/час", 4),
    ("ticket_hisor", "local_transport", "Входные билеты в объектах Гиссарской Крепости", "Entrance tickets to objects of Hisor Fortress", 90.0, "человек/час", 5),
    ("ticket_dushanbe", "local_transport", "Входные билеты в объектах г.Душанбе", "Entrance tickets to objects of Dushanbe", 250.0, "человек/час", 6),
    ("ticket_istaravshan", "local_transport", "Входные билеты в объектах г.Истаравшан", "Entrance tickets to objects of Istaravshan", 50.0, "человек/час", 7),
    ("flight_khujand", "local_transport", "Авиабилет на внутренний рейс, Худжанд", "Flight tickets to domestic lines, Khujand", 450.0, "человек/час", 8),
    ("ticket_penjikent", "local_transport", "Входные билеты в объектах г.Пенджикент", "Entrance tickets to objects of Penjikent", 60.0, "человек/час", 9),
    ("ticket_dushanbe_4h", "local_transport", "Входные билеты в объектах г.Душанбе, тур на 4 часа", "Entrance tickets to objects of Dushanbe, 4 hour Tour", 120.0, "человек/час", 10),
    ("ticket_iskanderkul", "local_transport", "Входной билет в озеро Искандеркуль", "Entrance ticket to Iskanderkul Lake", 30.0, "человек/час", 11),
    ("ticket_nurek", "local_transport", "Входные билеты в объектах г.Нурек", "Entrance tickets to objects of Nurek", 40.0, "человек/час", 12),
    ("ticket_car", "local_transport", "Входные билеты в туристских объектах, ЦАР", "Entrance tickets to tourism objects, CAR", 50.0, "человек/час", 13),
    ("meal_hb", "meals", "Питание, обед, НВ", "Meals, Lunch, HB", 70.0, "человек/день", 1),
    ("meal_fb", "meals", "Питание, обед и ужин, FB", "Meals, Lunch & Dinner, FB", 130.0, "человек/день", 2),
    ("permit_gbao", "permits", "Разрешение на въезд в ГБАО", "GBAO Entry Permit", 250.0, "человек", 1),
    ("permit_nurek", "permits", "Разрешение на въезд на плотину Нурекской ГЭС", "Nurek HPP Dam Entry Permit", 500.0, "человек", 2),
    ("transport_4wd", "tour_transport", "Транспорт во время тура, 4WD", "Transport During Tour, 4WD", 1200.0, "единица/день", 1),
    ("transport_sedan", "tour_transport", "Транспорт во время тура, легковой", "Transport During the Tour, sedan", 400.0, "единица/день", 2),
    ("transport_van", "tour_transport", "Транспорт во время тура, миниавтобус", "Transport During the Tour, Van", 2000.0, "единица/день", 3),
    ("transfer_van", "transfer", "Трансфер от/до аэропорта, миниавтобус", "Transfer from/to airport, Van", 2000.0, "единица/день", 1),
    ("transfer_sedan", "transfer", "Трансфер от/до аэропорта, легковой автомобиль", "Transfer from/to airport, sedan", 500.0, "единица/день", 2),
)


def _component_name(payload: dict[str, Any]) -> Any:
    """name + name_en 입력을 다국어 딕셔너리로 병합"""
    name = normalize_multilingual_input(payload.get("name"))
    name_en = payload.get("name_en")
    if name_en:
        name = dict(name or {})
        name["en"] = name_en
        name.setdefault("ru", name_en)
    return name


class PriceCalculatorService:
    """가격 계산기 서비스 클래스"""

    def __init__(self, db: Session):
        self.db = db

    def get_components(self, include_inactive: bool = False) -> list[PriceCalculatorComponent]:
        query = self.db.query(PriceCalculatorComponent)
        if not include_inactive:
            query = query.filter(PriceCalculatorComponent.is_active.is_(True))
        return query.order_by(
            PriceCalculatorComponent.category,
            PriceCalculatorComponent.sort_order,
            PriceCalculatorComponent.id,
        ).all()

    def find_by_key(self, key: str) -> PriceCalculatorComponent | None:
        return self.db.query(PriceCalculatorComponent).filter(PriceCalculatorComponent.key == key).first()

    def get_by_key(self, key: str) -> PriceCalculatorComponent:
        component = self.find_by_key(key)
        if component is None:
            raise NotFoundError("Price component not found")
        return component

    def get_by_id(self, component_id: int) -> PriceCalculatorComponent:
        component = self.db.get(PriceCalculatorComponent, component_id)
        if component is None:
            raise NotFoundError("Price component not found")
        return component

    def create_component(self, payload: dict[str, Any]) -> PriceCalculatorComponent:
        for field in ("key", "category", "name", "price", "unit"):
            if payload.get(field) in (None, ""):
                raise ValidationError(
                    f"{field.capitalize()} is required", details=[{"field": field}]
                )
        if self.find_by_key(payload["key"]) is not None:
            raise ConflictError(f"Price component '{payload['key']}' already exists")

        with db_transaction(self.db):
            component = PriceCalculatorComponent(
                key=payload["key"],
                category=payload["category"],
                name=_component_name(payload),
                price=float(payload["price"]),
                unit=payload["unit"],
                description=payload.get("description"),
                sort_order=payload.get("sort_order") or 0,
                is_active=payload.get("is_active", True) is not False,
            )
            self.db.add(component)
        logger.info(f"Price component '{component.key}' created")
        return component

    def update_component(self, component_id: int, payload: dict[str, Any]) -> PriceCalculatorComponent:
        component = self.get_by_id(component_id)
        key = payload.get("key")
        if key and key != component.key and self.find_by_key(key) is not None:
            raise ConflictError(f"Price component '{key}' already exists")

        with db_transaction(self.db):
            if "name" in payload or "name_en" in payload:
                merged = dict(payload)
                if "name" not in merged:
                    merged["name"] = component.name
                component.name = _component_name(merged)
            for field in ("key", "category", "price", "unit", "description", "sort_order", "is_active"):
                if field in payload and payload[field] is not None:
                    setattr(component, field, payload[field])
        logger.info(f"Price component {component_id} updated")
        return component

    def delete_component(self, component_id: int) -> None:
        component = self.get_by_id(component_id)
        with db_transaction(self.db):
            self.db.delete(component)
        logger.info(f"Price component {component_id} deleted")

    def initialize_defaults(self) -> dict[str, Any]:
        """기본 구성요소 생성 (이미 있는 key 는 건너뜀)"""
        existing = {key for (key,) in self.db.query(PriceCalculatorComponent.key).all()}
        created = 0
        with db_transaction(self.db):
            for key, category, name_ru, name_en, price, unit, sort_order in DEFAULT_COMPONENTS:
                if key in existing:
                    continue
                self.db.add(
                    PriceCalculatorComponent(
                        key=key,
                        category=category,
                        name={"ru": name_ru, "en": name_en},
                        price=price,
                        unit=unit,
                        sort_order=sort_order,
                        is_active=True,
                    )
                )
                created += 1
        skipped = len(DEFAULT_COMPONENTS) - created
        logger.info(f"Price components initialised: {created} created, {skipped} skipped")
        return {"created": created, "skipped": skipped, "components": self.get_components()}

    def calculate(self, items: Iterable[dict[str, Any]], lang: str = "ru") -> dict[str, Any]:
        """
        구성요소 목록으로 총액 계산

        Args:
            items: ``{"key": ..., "quantity": ...}`` 목록 (없는 key 는 무시)
            lang: 구성요소 이름 언어

        Returns:
            totalPrice (소수점 2자리), currency, calculation 상세
        """
        total = 0.0
        calculation = []
        for item in items:
            component = self.find_by_key(item["key"])
            if component is None:
                logger.warning(f"Price calculation: unknown component '{item['key']}' ignored")
                continue
            quantity = item.get("quantity") or 1
            line_total = component.price * quantity
            total += line_total
            calculation.append(
                {
                    "key": component.key,
                    "component": localize_field(component.name, lang),
                    "price": component.price,
                    "quantity": quantity,
                    "unit": component.unit,
                    "total": round(line_total, 2),
                }
            )
        return {"totalPrice": round(total, 2), "currency": CURRENCY, "calculation": calculation}


def get_price_calculator_service(db: Session) -> PriceCalculatorService:
    """PriceCalculatorService 인스턴스 생성"""
    return PriceCalculatorService(db)
