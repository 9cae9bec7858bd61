"""Payment API routes."""

from fastapi import APIRouter, Query

from ...database import DB
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse, ListQuery
from ..realtime import Broker
from . import services
from .crud import payment_crud
from .models import Payment, PaymentStatus
from .schemas import PaymentCreate, PaymentResponse, PaymentUpdate

router = APIRouter(tags=["Payments"])


def _payment_response(
    payment: Payment, tenant_name: str | None, room_name: str | None
) -> PaymentResponse:
    response = PaymentResponse.model_validate(payment)
    response.tenant_name = tenant_name
    response.room_name = room_name
    return response


@router.get(
    "/properties/{property_id}/payments",
    response_model=BaseResponse[list[PaymentResponse]],
)
async def list_payments(
    property_id: int,
    current_user: CurrentUser,
    db: DB,
    params: ListQuery,
    status: PaymentStatus | None = Query(None),
    tenant_id: int | None = Query(None),
):
    """Get the payments of a property with tenant and room names."""
    rows = await services.list_payments(
        db, property_id, current_user.id, params, status, tenant_id
    )
    return BaseResponse(
        success=True,
        data=[_payment_response(payment, tenant, room) for payment, tenant, room in rows],
    )


@router.post(
    "/properties/{property_id}/payments",
    response_model=BaseResponse[PaymentResponse],
    status_code=201,
)
async def create_payment(
    property_id: int,
    data: PaymentCreate,
    current_user: CurrentUser,
    db: DB,
    broker: Broker,
):
    """Record a payment."""
    payment = await services.create_payment(
        db, property_id, current_user.id, data, broker
    )
    return BaseResponse(
        success=True,
        message="Payment recorded successfully",
        data=_payment_response(payment, *await payment_crud.get_names(db, payment)),
    )


@router.get("/payments/{payment_id}", response_model=BaseResponse[PaymentResponse])
async def get_payment(payment_id: int, current_user: CurrentUser, db: DB):
    """Get a payment by ID."""
    payment, _ = await services.get_payment(db, payment_id, current_user.id)
    return BaseResponse(
        success=True,
        data=_payment_response(payment, *await payment_crud.get_names(db, payment)),
    )


@router.put("/payments/{payment_id}", response_model=BaseResponse[PaymentResponse])
async def update_payment(
    payment_id: int,
    data: PaymentUpdate,
    current_user: CurrentUser,
    db: DB,
    broker: Broker,
):
    """Update a payment."""
    payment = await services.update_payment(
        db, payment_id, current_user.id, data, broker
    )
    return BaseResponse(
        success=True,
        message="Payment updated successfully",
        data=_payment_response(payment, *await payment_crud.get_names(db, payment)),
    )


@router.delete("/payments/{payment_id}", response_model=BaseResponse[None])
async def delete_payment(
    payment_id: int, current_user: CurrentUser, db: DB, broker: Broker
):
    """Delete a payment."""
    await services.delete_payment(db, payment_id, current_user.id, broker)
    return BaseResponse(success=True, message="Payment deleted successfully")
