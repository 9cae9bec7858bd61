"""Maintenance request business logic services."""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError
from ...core.logging import get_logger
from ..commons import ListParams
from ..property_management.crud import room_crud
from ..property_management.models import Property
from ..property_management.services import get_owned_property
from ..realtime import ChangeEventType, ChangeFeedBroker, Channel
from ..tenant_management.crud import tenant_crud
from .crud import maintenance_crud
from .models import MaintenancePriority, MaintenanceRequest, MaintenanceStatus
from .schemas import MaintenanceCreate, MaintenanceUpdate

logger = get_logger(__name__)


async def _publish(
    broker: ChangeFeedBroker | None,
    event: ChangeEventType,
    request: MaintenanceRequest,
    owner_id: int,
) -> None:
    if broker is not None:
        await broker.publish_row(Channel.PROPERTIES, event, request, audience=[owner_id])


async def _check_references(
    db: AsyncSession, property_id: int, room_id: int | None, tenant_id: int | None
) -> None:
    """Room and tenant must belong to the same property as the request."""
    if room_id is not None:
        room = await room_crud.get(db, room_id)
        if not room or room.property_id != property_id:
            raise NotFoundError(f"Room with ID {room_id} not found in this property")
    if tenant_id is not None:
        tenant = await tenant_crud.get(db, tenant_id)
        if not tenant or tenant.property_id != property_id:
            raise NotFoundError(f"Tenant with ID {tenant_id} not found in this property")


async def get_request(
    db: AsyncSession, request_id: int, owner_id: int
) -> tuple[MaintenanceRequest, Property]:
    request = await maintenance_crud.get(db, request_id)
    if not request:
        raise NotFoundError(f"Maintenance request with ID {request_id} not found")
    property_obj = await get_owned_property(db, request.property_id, owner_id)
    return request, property_obj


async def list_requests(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    params: ListParams | None = None,
    status: MaintenanceStatus | None = None,
    priority: MaintenancePriority | None = None,
) -> list[tuple[MaintenanceRequest, str | None, str | None]]:
    await get_owned_property(db, property_id, owner_id)
    return await maintenance_crud.get_with_names(
        db, property_id, params, filters={"status": status, "priority": priority}
    )


async def create_request(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    data: MaintenanceCreate,
    broker: ChangeFeedBroker | None = None,
) -> MaintenanceRequest:
    await get_owned_property(db, property_id, owner_id)
    await _check_references(db, property_id, data.room_id, data.tenant_id)

    request = await maintenance_crud.create(
        db,
        data.model_dump(),
        property_id=property_id,
        reported_date=data.reported_date or date.today(),
    )
    await db.commit()

    logger.info(
        "Maintenance request reported",
        extra={"request_id": request.id, "priority": request.priority.value},
    )
    await _publish(broker, ChangeEventType.INSERT, request, owner_id)
    return request


async def update_request(
    db: AsyncSession,
    request_id: int,
    owner_id: int,
    data: MaintenanceUpdate,
    broker: ChangeFeedBroker | None = None,
) -> MaintenanceRequest:
    request, property_obj = await get_request(db, request_id, owner_id)
    changes = data.model_dump(exclude_unset=True)
    await _check_references(
        db, property_obj.id, changes.get("room_id"), changes.get("tenant_id")
    )

    request = await maintenance_crud.update(db, request, changes)
    await db.commit()

    await _publish(broker, ChangeEventType.UPDATE, request, owner_id)
    return request


async def delete_request(
    db: AsyncSession,
    request_id: int,
    owner_id: int,
    broker: ChangeFeedBroker | None = None,
) -> None:
    request, _ = await get_request(db, request_id, owner_id)
    await maintenance_crud.delete(db, request)
    await db.commit()
    await _publish(broker, ChangeEventType.DELETE, request, owner_id)
