"""Room occupancy bookkeeping.

A room is ``occupied`` exactly when an active tenant's ``room_id`` points at
it, and ``room.tenant_id`` names that tenant. Both sides are always written
together; callers commit.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import BusinessLogicError, ValidationError
from ...core.utils import utc_now
from ..tenant_management.models import Tenant, TenantStatus
from .crud import room_crud
from .models import Room, RoomStatus


async def release_room(db: AsyncSession, tenant: Tenant) -> Room | None:
    """Detach a tenant from its room and mark the room vacant.

    Returns:
        The vacated room, or None if the tenant had none
    """
    if tenant.room_id is None:
        return None

    room = await room_crud.get_for_update(db, tenant.room_id)
    tenant.room_id = None
    tenant.updated_at = utc_now()
    if room is not None and room.tenant_id in (tenant.id, None):
        room.tenant_id = None
        room.status = RoomStatus.VACANT
        room.updated_at = utc_now()
    await db.flush()
    return room


async def occupy_room(db: AsyncSession, room: Room, tenant: Tenant) -> Room | None:
    """Move a tenant into a room, vacating the tenant's previous room.

    Returns:
        The previously held room, if the tenant moved

    Raises:
        ValidationError: If room and tenant belong to different properties
        BusinessLogicError: If the room is taken or unavailable
    """
    if room.property_id != tenant.property_id:
        raise ValidationError("Tenant and room belong to different properties")
    if tenant.status != TenantStatus.ACTIVE:
        raise BusinessLogicError(f"Tenant '{tenant.name}' is not active")
    if room.tenant_id is not None and room.tenant_id != tenant.id:
        raise BusinessLogicError(f"Room '{room.name}' is already occupied")
    if room.status == RoomStatus.MAINTENANCE:
        raise BusinessLogicError(f"Room '{room.name}' is under maintenance")

    previous = None
    if tenant.room_id is not None and tenant.room_id != room.id:
        previous = await release_room(db, tenant)

    room.tenant_id = tenant.id
    room.status = RoomStatus.OCCUPIED
    room.updated_at = utc_now()
    tenant.room_id = room.id
    tenant.updated_at = utc_now()
    await db.flush()
    return previous
