"""Tenant management API routes."""

from fastapi import APIRouter, Query

from ...database import DB
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse, ListQuery
from ..payments.models import PaymentStatus
from ..realtime import Broker
from . import services
from .crud import tenant_crud
from .models import Tenant, TenantStatus
from .schemas import TenantCreate, TenantResponse, TenantUpdate

router = APIRouter(tags=["Tenants"])


def _tenant_response(tenant: Tenant, room_name: str | None = None) -> TenantResponse:
    response = TenantResponse.model_validate(tenant)
    response.room_name = room_name
    return response


@router.get(
    "/properties/{property_id}/tenants",
    response_model=BaseResponse[list[TenantResponse]],
)
async def list_tenants(
    property_id: int,
    current_user: CurrentUser,
    db: DB,
    params: ListQuery,
    status: TenantStatus | None = Query(None),
    payment_status: PaymentStatus | None = Query(None),
):
    """Get the tenants of a property with their room names."""
    rows = await services.list_tenants(
        db, property_id, current_user.id, params, status, payment_status
    )
    return BaseResponse(
        success=True, data=[_tenant_response(tenant, name) for tenant, name in rows]
    )


@router.post(
    "/properties/{property_id}/tenants",
    response_model=BaseResponse[TenantResponse],
    status_code=201,
)
async def create_tenant(
    property_id: int,
    data: TenantCreate,
    current_user: CurrentUser,
    db: DB,
    broker: Broker,
):
    """Create a tenant, optionally assigning a room."""
    tenant = await services.create_tenant(
        db, property_id, current_user.id, data, broker
    )
    return BaseResponse(
        success=True,
        message="Tenant created successfully",
        data=_tenant_response(tenant, await tenant_crud.get_room_name(db, tenant)),
    )


@router.get("/tenants/{tenant_id}", response_model=BaseResponse[TenantResponse])
async def get_tenant(tenant_id: int, current_user: CurrentUser, db: DB):
    """Get a tenant by ID."""
    tenant, _ = await services.get_tenant(db, tenant_id, current_user.id)
    return BaseResponse(
        success=True,
        data=_tenant_response(tenant, await tenant_crud.get_room_name(db, tenant)),
    )


@router.put("/tenants/{tenant_id}", response_model=BaseResponse[TenantResponse])
async def update_tenant(
    tenant_id: int,
    data: TenantUpdate,
    current_user: CurrentUser,
    db: DB,
    broker: Broker,
):
    """Update a tenant."""
    tenant = await services.update_tenant(db, tenant_id, current_user.id, data, broker)
    return BaseResponse(
        success=True,
        message="Tenant updated successfully",
        data=_tenant_response(tenant, await tenant_crud.get_room_name(db, tenant)),
    )


@router.delete("/tenants/{tenant_id}", response_model=BaseResponse[None])
async def delete_tenant(
    tenant_id: int, current_user: CurrentUser, db: DB, broker: Broker
):
    """Delete a tenant together with their payments."""
    await services.delete_tenant(db, tenant_id, current_user.id, broker)
    return BaseResponse(success=True, message="Tenant deleted successfully")
