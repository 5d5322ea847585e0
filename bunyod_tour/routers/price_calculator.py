"""
가격 계산기 API 라우터
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from bunyod_tour.dependencies import price_calculator_service_dependency
from bunyod_tour.schemas import PriceCalculationRequest, PriceComponentPayload
from bunyod_tour.serializers import PRICE_COMPONENT_FIELDS, serialize_price_component
from bunyod_tour.services.price_calculator_service import PriceCalculatorService
from bunyod_tour.utils import ResponseMode, create_standard_response, get_response_mode, shape_response

router = APIRouter(prefix="/price-calculator", tags=["Price Calculator"])


@router.get("")
async def get_components(
    include_inactive: bool = Query(False, alias="includeInactive"),
    mode: ResponseMode = Depends(get_response_mode),
    service: PriceCalculatorService = Depends(price_calculator_service_dependency),
) -> Dict[str, Any]:
    """가격 구성요소 목록"""
    data = [serialize_price_component(component) for component in service.get_components(include_inactive)]
    return create_standard_response(
        success=True,
        data=shape_response(data, mode, PRICE_COMPONENT_FIELDS),
        language=mode.language,
    )


@router.post("/initialize")
async def initialize_components(
    mode: ResponseMode = Depends(get_response_mode),
    service: PriceCalculatorService = Depends(price_calculator_service_dependency),
) -> Dict[str, Any]:
    """기본 구성요소 생성 (기존 항목 유지)"""
    result = service.initialize_defaults()
    data = [serialize_price_component(component) for component in result["components"]]
    return create_standard_response(
        success=True,
        data=shape_response(data, mode, PRICE_COMPONENT_FIELDS),
        message=f"Initialized: {result['created']} created, {result['skipped']} skipped",
        created=result["created"],
        skipped=result["skipped"],
    )


@router.post("/calculate")
async def calculate_price(
    payload: PriceCalculationRequest,
    mode: ResponseMode = Depends(get_response_mode),
    service: PriceCalculatorService = Depends(price_calculator_service_dependency),
) -> Dict[str, Any]:
    """구성요소 합계 계산 (TJS)"""
    items = [item.model_dump() for item in payload.components]
    return create_standard_response(success=True, data=service.calculate(items, mode.language))


@router.get("/id/{component_id}")
async def get_component_by_id(
    component_id: int,
    mode: ResponseMode = Depends(get_response_mode),
    service: PriceCalculatorService = Depends(price_calculator_service_dependency),
) -> Dict[str, Any]:
    """ID 로 구성요소 조회"""
    component = service.get_by_id(component_id)
    return create_standard_response(
        success=True,
        data=shape_response(serialize_price_component(component), mode, PRICE_COMPONENT_FIELDS),
    )


@router.get("/{key}")
async def get_component_by_key(
    key: str,
    mode: ResponseMode = Depends(get_response_mode),
    service: PriceCalculatorService = Depends(price_calculator_service_dependency),
) -> Dict[str, Any]:
    """key 로 구성요소 조회"""
    component = service.get_by_key(key)
    return create_standard_response(
        success=True,
        data=shape_response(serialize_price_component(component), mode, PRICE_COMPONENT_FIELDS),
    )


@router.post("", status_code=201)
async def create_component(
    payload: PriceComponentPayload,
    mode: ResponseMode = Depends(get_response_mode),
    service: PriceCalculatorService = Depends(price_calculator_service_dependency),
) -> Dict[str, Any]:
    """구성요소 생성"""
    component = service.create_component(payload.provided())
    return create_standard_response(
        success=True,
        data=shape_response(serialize_price_component(component), mode, PRICE_COMPONENT_FIELDS),
        message="Price component created successfully",
    )


@router.put("/{component_id}")
async def update_component(
    component_id: int,
    payload: PriceComponentPayload,
    mode: ResponseMode = Depends(get_response_mode),
    service: PriceCalculatorService = Depends(price_calculator_service_dependency),
) -> Dict[str, Any]:
    """구성요소 수정"""
    component = service.update_component(component_id, payload.provided())
    return create_standard_response(
        success=True,
        data=shape_response(serialize_price_component(component), mode, PRICE_COMPONENT_FIELDS),
        message="Price component updated successfully",
    )


@router.delete("/{component_id}")
async def delete_component(
    component_id: int,
    service: PriceCalculatorService = Depends(price_calculator_service_dependency),
) -> Dict[str, Any]:
    """구성요소 삭제"""
    service.delete_component(component_id)
    return create_standard_response(success=True, message="Price component deleted successfully")
