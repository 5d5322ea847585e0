"""
참조 데이터 라우터 공통 헬퍼
단건 조회, 생성, 수정, 삭제 엔드포인트를 라우터에 등록
"""

from typing import Any, Callable, Dict

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from bunyod_tour.database import get_db
from bunyod_tour.services.reference_service import (
    ReferenceResource,
    ReferenceService,
    get_reference_service,
)
from bunyod_tour.utils import ResponseMode, create_standard_response, get_response_mode, shape_response


def reference_service_factory(resource: ReferenceResource) -> Callable[..., ReferenceService]:
    """리소스별 ReferenceService 의존성 생성"""

    def dependency(request: Request, db: Session = Depends(get_db)) -> ReferenceService:
        return get_reference_service(db, resource, request.app.state.settings)

    return dependency


def register_crud_routes(
    router: APIRouter,
    resource: ReferenceResource,
    payload_model: type,
    serializer: Callable[[Any], dict],
) -> None:
    """GET /{id}, POST, PUT /{id}, DELETE /{id} 등록"""
    service_dependency = reference_service_factory(resource)
    label = resource.label

    async def get_item(
        item_id: int,
        mode: ResponseMode = Depends(get_response_mode),
        service: ReferenceService = Depends(service_dependency),
    ) -> Dict[str, Any]:
        return create_standard_response(
            success=True,
            data=shape_response(serializer(service.get(item_id)), mode),
            language=mode.language,
        )

    async def create_item(
        payload: payload_model,
        mode: ResponseMode = Depends(get_response_mode),
        service: ReferenceService = Depends(service_dependency),
    ) -> Dict[str, Any]:
        item = service.create(payload.provided())
        return create_standard_response(
            success=True,
            data=shape_response(serializer(item), mode),
            message=f"{label} created successfully",
        )

    async def update_item(
        item_id: int,
        payload: payload_model,
        mode: ResponseMode = Depends(get_response_mode),
        service: ReferenceService = Depends(service_dependency),
    ) -> Dict[str, Any]:
        item = service.update(item_id, payload.provided())
        return create_standard_response(
            success=True,
            data=shape_response(serializer(item), mode),
            message=f"{label} updated successfully",
        )

    async def delete_item(
        item_id: int,
        service: ReferenceService = Depends(service_dependency),
    ) -> Dict[str, Any]:
        service.delete(item_id)
        return create_standard_response(success=True, message=f"{label} deleted successfully")

    router.add_api_route("/{item_id}", get_item, methods=["GET"], summary=f"{label} 상세 조회")
    router.add_api_route("", create_item, methods=["POST"], status_code=201, summary=f"{label} 생성")
    router.add_api_route("/{item_id}", update_item, methods=["PUT"], summary=f"{label} 수정")
    router.add_api_route("/{item_id}", delete_item, methods=["DELETE"], summary=f"{label} 삭제")
