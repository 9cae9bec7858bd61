"""Maintenance request API routes."""

from fastapi import APIRouter, Query

from ...database import DB
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse, ListQuery
from ..realtime import Broker
from . import services
from .crud import maintenance_crud
from .models import MaintenancePriority, MaintenanceRequest, MaintenanceStatus
from .schemas import MaintenanceCreate, MaintenanceResponse, MaintenanceUpdate

router = APIRouter(tags=["Maintenance"])


def _request_response(
    request: MaintenanceRequest, room_name: str | None, tenant_name: str | None
) -> MaintenanceResponse:
    response = MaintenanceResponse.model_validate(request)
    response.room_name = room_name
    response.tenant_name = tenant_name
    return response


@router.get(
    "/properties/{property_id}/maintenance",
    response_model=BaseResponse[list[MaintenanceResponse]],
)
async def list_requests(
    property_id: int,
    current_user: CurrentUser,
    db: DB,
    params: ListQuery,
    status: MaintenanceStatus | None = Query(None),
    priority: MaintenancePriority | None = Query(None),
):
    """Get the maintenance requests of a property."""
    rows = await services.list_requests(
        db, property_id, current_user.id, params, status, priority
    )
    return BaseResponse(
        success=True,
        data=[_request_response(request, room, tenant) for request, room, tenant in rows],
    )


@router.post(
    "/properties/{property_id}/maintenance",
    response_model=BaseResponse[MaintenanceResponse],
    status_code=201,
)
async def create_request(
    property_id: int,
    data: MaintenanceCreate,
    current_user: CurrentUser,
    db: DB,
    broker: Broker,
):
    """Report a maintenance problem."""
    request = await services.create_request(
        db, property_id, current_user.id, data, broker
    )
    return BaseResponse(
        success=True,
        message="Maintenance request created successfully",
        data=_request_response(request, *await maintenance_crud.get_names(db, request)),
    )


@router.get(
    "/maintenance/{request_id}", response_model=BaseResponse[MaintenanceResponse]
)
async def get_request(request_id: int, current_user: CurrentUser, db: DB):
    request, _ = await services.get_request(db, request_id, current_user.id)
    return BaseResponse(
        success=True,
        data=_request_response(request, *await maintenance_crud.get_names(db, request)),
    )


@router.put(
    "/maintenance/{request_id}", response_model=BaseResponse[MaintenanceResponse]
)
async def update_request(
    request_id: int,
    data: MaintenanceUpdate,
    current_user: CurrentUser,
    db: DB,
    broker: Broker,
):
    """Update a maintenance request, e.g. to move it to completed."""
    request = await services.update_request(
        db, request_id, current_user.id, data, broker
    )
    return BaseResponse(
        success=True,
        message="Maintenance request updated successfully",
        data=_request_response(request, *await maintenance_crud.get_names(db, request)),
    )


@router.delete("/maintenance/{request_id}", response_model=BaseResponse[None])
async def delete_request(
    request_id: int, current_user: CurrentUser, db: DB, broker: Broker
):
    await services.delete_request(db, request_id, current_user.id, broker)
    return BaseResponse(success=True, message="Maintenance request deleted successfully")
