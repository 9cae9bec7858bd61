"""Payment business logic services."""

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError, ValidationError
from ...core.logging import get_logger
from ..commons import ListParams
from ..property_management.crud import room_crud
from ..property_management.models import Property
from ..property_management.services import get_owned_property
from ..realtime import ChangeEventType, ChangeFeedBroker, Channel
from ..tenant_management.crud import tenant_crud
from ..tenant_management.models import Tenant
from .crud import payment_crud
from .models import Payment, PaymentStatus
from .schemas import PaymentCreate, PaymentUpdate

logger = get_logger(__name__)


async def _publish(
    broker: ChangeFeedBroker | None, event: ChangeEventType, rows: list, owner_id: int
) -> None:
    if broker is None:
        return
    for row in rows:
        await broker.publish_row(Channel.PROPERTIES, event, row, audience=[owner_id])


def _sync_tenant_status(tenant: Tenant, payment: Payment) -> None:
    """The tenant's payment status follows their latest recorded payment."""
    tenant.payment_status = payment.status


async def get_payment(
    db: AsyncSession, payment_id: int, owner_id: int
) -> tuple[Payment, Property]:
    payment = await payment_crud.get(db, payment_id)
    if not payment:
        raise NotFoundError(f"Payment with ID {payment_id} not found")
    property_obj = await get_owned_property(db, payment.property_id, owner_id)
    return payment, property_obj


async def list_payments(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    params: ListParams | None = None,
    status: PaymentStatus | None = None,
    tenant_id: int | None = None,
) -> list[tuple[Payment, str | None, str | None]]:
    await get_owned_property(db, property_id, owner_id)
    return await payment_crud.get_with_names(
        db, property_id, params, filters={"status": status, "tenant_id": tenant_id}
    )


async def create_payment(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    data: PaymentCreate,
    broker: ChangeFeedBroker | None = None,
) -> Payment:
    """Record a payment and mirror its status onto the tenant.

    Raises:
        NotFoundError: If the tenant or room is not in this property
        ValidationError: If no due date can be determined
    """
    await get_owned_property(db, property_id, owner_id)
    tenant = await tenant_crud.get(db, data.tenant_id)
    if not tenant or tenant.property_id != property_id:
        raise NotFoundError(f"Tenant with ID {data.tenant_id} not found in this property")
    if data.room_id is not None:
        room = await room_crud.get(db, data.room_id)
        if not room or room.property_id != property_id:
            raise NotFoundError(f"Room with ID {data.room_id} not found in this property")

    due_date = data.due_date or tenant.end_date
    if due_date is None:
        raise ValidationError("Due date is required", field="due_date")

    status = data.status or (
        PaymentStatus.PAID if data.paid_date else PaymentStatus.PENDING
    )
    payment = await payment_crud.create(
        db,
        {
            "tenant_id": tenant.id,
            "room_id": data.room_id if data.room_id is not None else tenant.room_id,
            "property_id": property_id,
            "amount": data.amount,
            "paid_date": data.paid_date,
            "due_date": due_date,
            "status": status,
            "payment_method": data.payment_method,
            "notes": data.notes,
        },
    )
    _sync_tenant_status(tenant, payment)
    await db.commit()

    logger.info(
        "Payment recorded",
        extra={"payment_id": payment.id, "tenant_id": tenant.id, "status": status.value},
    )
    await _publish(broker, ChangeEventType.INSERT, [payment], owner_id)
    await _publish(broker, ChangeEventType.UPDATE, [tenant], owner_id)
    return payment


async def update_payment(
    db: AsyncSession,
    payment_id: int,
    owner_id: int,
    data: PaymentUpdate,
    broker: ChangeFeedBroker | None = None,
) -> Payment:
    payment, _ = await get_payment(db, payment_id, owner_id)
    changes = data.model_dump(exclude_unset=True)

    # Recording a paid date on a pending payment settles it
    if changes.get("paid_date") and "status" not in changes:
        changes["status"] = PaymentStatus.PAID

    payment = await payment_crud.update(db, payment, changes)

    tenant = None
    if "status" in changes:
        tenant = await tenant_crud.get(db, payment.tenant_id)
        if tenant is not None:
            _sync_tenant_status(tenant, payment)
    await db.commit()

    await _publish(broker, ChangeEventType.UPDATE, [payment], owner_id)
    if tenant is not None:
        await _publish(broker, ChangeEventType.UPDATE, [tenant], owner_id)
    return payment


async def delete_payment(
    db: AsyncSession,
    payment_id: int,
    owner_id: int,
    broker: ChangeFeedBroker | None = None,
) -> None:
    payment, _ = await get_payment(db, payment_id, owner_id)
    await payment_crud.delete(db, payment)
    await db.commit()
    await _publish(broker, ChangeEventType.DELETE, [payment], owner_id)
