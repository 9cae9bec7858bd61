"""Tenant management business logic services."""

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import BusinessLogicError, NotFoundError
from ...core.logging import get_logger
from ..auth import crud as auth_crud
from ..auth.models import RoleSlug
from ..commons import ListParams
from ..maintenance.crud import maintenance_crud
from ..payments.crud import payment_crud
from ..payments.models import PaymentStatus
from ..property_management.crud import room_crud
from ..property_management.models import Property, Room
from ..property_management.occupancy import occupy_room, release_room
from ..property_management.services import get_owned_property
from ..realtime import ChangeEventType, ChangeFeedBroker, Channel
from .crud import tenant_crud
from .models import Tenant, TenantStatus
from .schemas import TenantCreate, TenantUpdate

logger = get_logger(__name__)

DUPLICATE_EMAIL_MESSAGE = "A tenant with this email already exists in this property"


async def _publish(
    broker: ChangeFeedBroker | None, event: ChangeEventType, rows: list, owner_id: int
) -> None:
    if broker is None:
        return
    for row in rows:
        if row is not None:
            await broker.publish_row(Channel.PROPERTIES, event, row, audience=[owner_id])


async def _get_room_in_property(db: AsyncSession, room_id: int, property_id: int) -> Room:
    room = await room_crud.get_for_update(db, room_id)
    if not room or room.property_id != property_id:
        raise NotFoundError(f"Room with ID {room_id} not found in this property")
    return room


async def _ensure_unique_email(
    db: AsyncSession, property_id: int, email: str, exclude_id: int | None = None
) -> None:
    existing = await tenant_crud.get_by_email(db, property_id, email)
    if existing and existing.id != exclude_id:
        raise BusinessLogicError(DUPLICATE_EMAIL_MESSAGE)


async def _portal_user_id(db: AsyncSession, email: str) -> int | None:
    """Id of the tenant-portal account registered with this email, if any."""
    user = await auth_crud.get_user_by_email(db, email)
    if user and user.role == RoleSlug.TENANT:
        return user.id
    return None


async def get_tenant(
    db: AsyncSession, tenant_id: int, owner_id: int
) -> tuple[Tenant, Property]:
    tenant = await tenant_crud.get(db, tenant_id)
    if not tenant:
        raise NotFoundError(f"Tenant with ID {tenant_id} not found")
    property_obj = await get_owned_property(db, tenant.property_id, owner_id)
    return tenant, property_obj


async def list_tenants(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    params: ListParams | None = None,
    status: TenantStatus | None = None,
    payment_status: PaymentStatus | None = None,
) -> list[tuple[Tenant, str | None]]:
    await get_owned_property(db, property_id, owner_id)
    return await tenant_crud.get_with_room_names(
        db,
        property_id,
        params,
        filters={"status": status, "payment_status": payment_status},
    )


async def create_tenant(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    data: TenantCreate,
    broker: ChangeFeedBroker | None = None,
) -> Tenant:
    """Create a tenant and, when ``room_id`` is given, move them in.

    Raises:
        BusinessLogicError: Duplicate email in the property, or room taken
    """
    await get_owned_property(db, property_id, owner_id)
    await _ensure_unique_email(db, property_id, data.email)

    tenant = await tenant_crud.create(
        db,
        data.model_dump(exclude={"room_id"}),
        property_id=property_id,
        user_id=await _portal_user_id(db, data.email),
    )

    room = None
    if data.room_id is not None:
        room = await _get_room_in_property(db, data.room_id, property_id)
        await occupy_room(db, room, tenant)

    await db.commit()

    logger.info(
        "Tenant created", extra={"tenant_id": tenant.id, "property_id": property_id}
    )
    await _publish(broker, ChangeEventType.INSERT, [tenant], owner_id)
    await _publish(broker, ChangeEventType.UPDATE, [room], owner_id)
    return tenant


async def update_tenant(
    db: AsyncSession,
    tenant_id: int,
    owner_id: int,
    data: TenantUpdate,
    broker: ChangeFeedBroker | None = None,
) -> Tenant:
    """Update a tenant, keeping room occupancy consistent.

    A changed ``room_id`` moves the tenant; an explicit ``null`` or a switch
    to ``inactive`` vacates the current room.
    """
    tenant, property_obj = await get_tenant(db, tenant_id, owner_id)
    changes = data.model_dump(exclude_unset=True)
    room_change = "room_id" in changes
    new_room_id = changes.pop("room_id", None)

    if changes.get("email") and changes["email"].lower() != tenant.email.lower():
        await _ensure_unique_email(db, property_obj.id, changes["email"], tenant.id)

    touched_rooms: list[Room | None] = []
    becoming_inactive = changes.get("status") == TenantStatus.INACTIVE

    tenant = await tenant_crud.update(db, tenant, changes)

    if becoming_inactive or (room_change and new_room_id is None):
        touched_rooms.append(await release_room(db, tenant))
    elif room_change and new_room_id != tenant.room_id:
        room = await _get_room_in_property(db, new_room_id, property_obj.id)
        touched_rooms.append(await occupy_room(db, room, tenant))
        touched_rooms.append(room)

    await db.commit()

    await _publish(broker, ChangeEventType.UPDATE, [tenant, *touched_rooms], owner_id)
    return tenant


async def delete_tenant(
    db: AsyncSession,
    tenant_id: int,
    owner_id: int,
    broker: ChangeFeedBroker | None = None,
) -> None:
    """Delete a tenant with their payments, freeing their room.

    Steps run in one transaction: delete payments, release the room, clear
    maintenance references, delete the tenant.
    """
    tenant, _ = await get_tenant(db, tenant_id, owner_id)

    removed_payments = await payment_crud.delete_where(db, tenant_id=tenant.id)
    room = await release_room(db, tenant)
    await maintenance_crud.detach_tenant(db, tenant.id)
    await tenant_crud.delete(db, tenant)
    await db.commit()

    logger.info(
        "Tenant deleted",
        extra={"tenant_id": tenant_id, "payments_removed": removed_payments},
    )
    await _publish(broker, ChangeEventType.DELETE, [tenant], owner_id)
    await _publish(broker, ChangeEventType.UPDATE, [room], owner_id)
