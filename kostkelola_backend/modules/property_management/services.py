"""Property management business logic services.

Every operation is scoped to the calling owner and runs in one transaction.
Change events go out only after the commit succeeds.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import (
    BusinessLogicError,
    FeatureNotAvailableError,
    NotFoundError,
    ResourceAlreadyExistsError,
    RoomTypeInUseError,
    ValidationError,
)
from ...core.logging import get_logger
from ..commons import ListParams
from ..maintenance.crud import maintenance_crud
from ..payments.crud import payment_crud
from ..realtime import ChangeEventType, ChangeFeedBroker, Channel
from ..subscriptions.features import resolve_features
from ..subscriptions.limits import ensure_can_add_property, ensure_can_add_room
from ..tenant_management.crud import tenant_crud
from ..tenant_management.models import Tenant
from .crud import property_crud, room_crud, room_type_crud
from .models import MarketplaceStatus, Property, Room, RoomStatus, RoomType
from .occupancy import occupy_room, release_room
from .schemas import (
    MarketplaceProperty,
    MarketplaceRoomType,
    MarketplaceSettingsUpdate,
    PropertyCreate,
    PropertyUpdate,
    RoomCreate,
    RoomTypeCreate,
    RoomTypeUpdate,
    RoomUpdate,
)

logger = get_logger(__name__)


async def _publish(
    broker: ChangeFeedBroker | None,
    event: ChangeEventType,
    row,
    owner_id: int,
) -> None:
    if broker is not None:
        await broker.publish_row(Channel.PROPERTIES, event, row, audience=[owner_id])


# ----- Properties -----


async def get_owned_property(
    db: AsyncSession, property_id: int, owner_id: int
) -> Property:
    """Load a property the caller owns.

    Raises:
        NotFoundError: If the property does not exist or belongs to someone
            else
    """
    property_obj = await property_crud.get(db, property_id)
    if not property_obj or property_obj.owner_id != owner_id:
        raise NotFoundError(f"Property with ID {property_id} not found")
    return property_obj


async def list_properties(
    db: AsyncSession, owner_id: int, params: ListParams | None = None
) -> list[Property]:
    return await property_crud.get_multi(
        db, filters={"owner_id": owner_id}, params=params
    )


async def create_property(
    db: AsyncSession,
    owner_id: int,
    data: PropertyCreate,
    broker: ChangeFeedBroker | None = None,
) -> Property:
    """Create a property within the owner's plan cap.

    Raises:
        LimitExceededError: If the owner already has the maximum
    """
    await ensure_can_add_property(db, owner_id)
    property_obj = await property_crud.create(db, data, owner_id=owner_id)
    await db.commit()

    logger.info(
        "Property created", extra={"property_id": property_obj.id, "owner_id": owner_id}
    )
    await _publish(broker, ChangeEventType.INSERT, property_obj, owner_id)
    return property_obj


async def update_property(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    data: PropertyUpdate,
    broker: ChangeFeedBroker | None = None,
) -> Property:
    property_obj = await get_owned_property(db, property_id, owner_id)
    updated = await property_crud.update(db, property_obj, data)
    await db.commit()
    await _publish(broker, ChangeEventType.UPDATE, updated, owner_id)
    return updated


async def update_marketplace_settings(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    data: MarketplaceSettingsUpdate,
    broker: ChangeFeedBroker | None = None,
) -> Property:
    """Enable, publish or withdraw a marketplace listing.

    Raises:
        FeatureNotAvailableError: If publishing without ``marketplace_listing``
    """
    property_obj = await get_owned_property(db, property_id, owner_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    enabled = changes.get("marketplace_enabled", property_obj.marketplace_enabled)
    status = changes.get("marketplace_status", property_obj.marketplace_status)
    if enabled and status == MarketplaceStatus.PUBLISHED:
        features = await resolve_features(db, owner_id)
        if not features.has_feature("marketplace_listing"):
            raise FeatureNotAvailableError("marketplace_listing")

    updated = await property_crud.update(db, property_obj, changes)
    await db.commit()
    await _publish(broker, ChangeEventType.UPDATE, updated, owner_id)
    return updated


async def delete_property(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    broker: ChangeFeedBroker | None = None,
) -> None:
    """Delete a property with all of its rooms, types, tenants and records."""
    property_obj = await get_owned_property(db, property_id, owner_id)

    await payment_crud.delete_where(db, property_id=property_id)
    await maintenance_crud.delete_where(db, property_id=property_id)
    await room_crud.clear_tenant_refs(db, property_id)
    await tenant_crud.delete_where(db, property_id=property_id)
    await room_crud.delete_where(db, property_id=property_id)
    await room_type_crud.delete_where(db, property_id=property_id)
    await property_crud.delete(db, property_obj)
    await db.commit()

    logger.info("Property deleted", extra={"property_id": property_id})
    await _publish(broker, ChangeEventType.DELETE, property_obj, owner_id)


# ----- Room Types -----


async def get_room_type(
    db: AsyncSession, room_type_id: int, owner_id: int
) -> tuple[RoomType, Property]:
    room_type = await room_type_crud.get(db, room_type_id)
    if not room_type:
        raise NotFoundError(f"Room type with ID {room_type_id} not found")
    property_obj = await get_owned_property(db, room_type.property_id, owner_id)
    return room_type, property_obj


async def list_room_types(
    db: AsyncSession, property_id: int, owner_id: int, params: ListParams | None = None
) -> list[RoomType]:
    await get_owned_property(db, property_id, owner_id)
    return await room_type_crud.get_by_property_id(db, property_id, params)


async def create_room_type(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    data: RoomTypeCreate,
    broker: ChangeFeedBroker | None = None,
) -> RoomType:
    await get_owned_property(db, property_id, owner_id)
    if await room_type_crud.get_by_name(db, property_id, data.name):
        raise ResourceAlreadyExistsError("Room type", data.name)

    room_type = await room_type_crud.create(db, data, property_id=property_id)
    await db.commit()
    await _publish(broker, ChangeEventType.INSERT, room_type, owner_id)
    return room_type


async def update_room_type(
    db: AsyncSession,
    room_type_id: int,
    owner_id: int,
    data: RoomTypeUpdate,
    cascade_rename: bool = False,
    broker: ChangeFeedBroker | None = None,
) -> RoomType:
    """Update a room type.

    Rooms refer to their type by name. A rename while rooms still carry the
    old name is refused unless ``cascade_rename`` is set, in which case the
    type and those rooms are renamed together.

    Raises:
        RoomTypeInUseError: Rename blocked; lists the affected rooms
        ResourceAlreadyExistsError: If the new name is taken
    """
    room_type, property_obj = await get_room_type(db, room_type_id, owner_id)
    old_name = room_type.name
    new_name = data.name
    renamed_rooms: list[Room] = []

    if new_name and new_name != old_name:
        if await room_type_crud.get_by_name(db, property_obj.id, new_name):
            raise ResourceAlreadyExistsError("Room type", new_name)

        affected = await room_crud.get_by_type(db, property_obj.id, old_name)
        if affected and not cascade_rename:
            raise RoomTypeInUseError(
                old_name, [{"id": room.id, "name": room.name} for room in affected]
            )
        if affected:
            await room_crud.rename_type(db, property_obj.id, old_name, new_name)
            renamed_rooms = affected

    updated = await room_type_crud.update(db, room_type, data)
    await db.commit()

    if renamed_rooms:
        logger.info(
            "Room type renamed with rooms",
            extra={"room_type_id": room_type_id, "rooms": len(renamed_rooms)},
        )
    await _publish(broker, ChangeEventType.UPDATE, updated, owner_id)
    for room in renamed_rooms:
        await db.refresh(room)
        await _publish(broker, ChangeEventType.UPDATE, room, owner_id)
    return updated


async def delete_room_type(
    db: AsyncSession,
    room_type_id: int,
    owner_id: int,
    broker: ChangeFeedBroker | None = None,
) -> None:
    """Delete a room type no room uses.

    Raises:
        RoomTypeInUseError: If rooms still reference it
    """
    room_type, property_obj = await get_room_type(db, room_type_id, owner_id)
    affected = await room_crud.get_by_type(db, property_obj.id, room_type.name)
    if affected:
        raise RoomTypeInUseError(
            room_type.name,
            [{"id": room.id, "name": room.name} for room in affected],
            action="delete",
        )

    await room_type_crud.delete(db, room_type)
    await db.commit()
    await _publish(broker, ChangeEventType.DELETE, room_type, owner_id)


# ----- Rooms -----


async def get_room(db: AsyncSession, room_id: int, owner_id: int) -> Room:
    room = await room_crud.get(db, room_id)
    if not room:
        raise NotFoundError(f"Room with ID {room_id} not found")
    await get_owned_property(db, room.property_id, owner_id)
    return room


async def list_rooms(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    params: ListParams | None = None,
    status: RoomStatus | None = None,
    room_type: str | None = None,
) -> list[tuple[Room, str | None]]:
    await get_owned_property(db, property_id, owner_id)
    return await room_crud.get_with_tenant_names(
        db, property_id, params, filters={"status": status, "type": room_type}
    )


async def _validate_room_type_name(
    db: AsyncSession, property_id: int, type_name: str | None
) -> None:
    if type_name and not await room_type_crud.get_by_name(db, property_id, type_name):
        raise ValidationError(f"Unknown room type '{type_name}'", field="type")


async def create_room(
    db: AsyncSession,
    property_id: int,
    owner_id: int,
    data: RoomCreate,
    broker: ChangeFeedBroker | None = None,
) -> Room:
    """Create a room within the plan's per-property cap.

    Raises:
        LimitExceededError: If the property is full for the plan
        ValidationError: If the type is unknown or status is occupied
    """
    property_obj = await get_owned_property(db, property_id, owner_id)
    if data.status == RoomStatus.OCCUPIED:
        raise ValidationError(
            "A new room cannot start occupied; assign a tenant instead",
            field="status",
        )
    await _validate_room_type_name(db, property_id, data.type)

    await ensure_can_add_room(db, property_obj)
    room = await room_crud.create(db, data, property_id=property_id)
    await db.commit()

    await _publish(broker, ChangeEventType.INSERT, room, owner_id)
    return room


async def update_room(
    db: AsyncSession,
    room_id: int,
    owner_id: int,
    data: RoomUpdate,
    broker: ChangeFeedBroker | None = None,
) -> Room:
    """Update room fields. Occupancy changes go through assign/vacate."""
    room = await get_room(db, room_id, owner_id)
    changes = data.model_dump(exclude_unset=True)

    new_status = changes.get("status")
    if new_status is not None and new_status != room.status:
        if new_status == RoomStatus.OCCUPIED:
            raise ValidationError(
                "Assign a tenant to mark the room occupied", field="status"
            )
        if room.tenant_id is not None:
            raise BusinessLogicError(
                f"Room '{room.name}' is occupied. Vacate it before changing status."
            )
    if "type" in changes:
        await _validate_room_type_name(db, room.property_id, changes["type"])

    updated = await room_crud.update(db, room, changes)
    await db.commit()
    await _publish(broker, ChangeEventType.UPDATE, updated, owner_id)
    return updated


async def delete_room(
    db: AsyncSession,
    room_id: int,
    owner_id: int,
    broker: ChangeFeedBroker | None = None,
) -> None:
    """Delete a room nobody is assigned to.

    Raises:
        BusinessLogicError: If tenants are still assigned
    """
    room = await get_room(db, room_id, owner_id)
    if await tenant_crud.count(db, room_id=room_id):
        raise BusinessLogicError(
            f"Room '{room.name}' has tenants assigned. Move or remove them first."
        )

    await payment_crud.detach_room(db, room_id)
    await maintenance_crud.detach_room(db, room_id)
    await room_crud.delete(db, room)
    await db.commit()
    await _publish(broker, ChangeEventType.DELETE, room, owner_id)


async def duplicate_room(
    db: AsyncSession,
    room_id: int,
    owner_id: int,
    broker: ChangeFeedBroker | None = None,
) -> Room:
    """Copy a room as "<name> (Copy)", vacant and without tenant."""
    room = await get_room(db, room_id, owner_id)
    property_obj = await get_owned_property(db, room.property_id, owner_id)
    await ensure_can_add_room(db, property_obj)

    copy = await room_crud.create(
        db,
        {
            "property_id": room.property_id,
            "name": f"{room.name} (Copy)",
            "floor": room.floor,
            "type": room.type,
            "price": room.price,
            "daily_price": room.daily_price,
            "weekly_price": room.weekly_price,
            "yearly_price": room.yearly_price,
            "enable_daily_price": room.enable_daily_price,
            "enable_weekly_price": room.enable_weekly_price,
            "enable_yearly_price": room.enable_yearly_price,
            "room_facilities": list(room.room_facilities or []),
            "bathroom_facilities": list(room.bathroom_facilities or []),
            "photos": list(room.photos or []),
            "max_occupancy": room.max_occupancy,
            "status": RoomStatus.VACANT,
            "tenant_id": None,
        },
    )
    await db.commit()
    await _publish(broker, ChangeEventType.INSERT, copy, owner_id)
    return copy


async def _get_tenant_for_property(
    db: AsyncSession, tenant_id: int, property_id: int
) -> Tenant:
    tenant = await tenant_crud.get(db, tenant_id)
    if not tenant or tenant.property_id != property_id:
        raise NotFoundError(f"Tenant with ID {tenant_id} not found in this property")
    return tenant


async def assign_tenant(
    db: AsyncSession,
    room_id: int,
    tenant_id: int,
    owner_id: int,
    broker: ChangeFeedBroker | None = None,
) -> Room:
    """Assign a tenant to a room in one transaction.

    The room becomes occupied by the tenant, the tenant points at the room,
    and the tenant's previous room (if any) is vacated.
    """
    room = await get_room(db, room_id, owner_id)
    room = await room_crud.get_for_update(db, room.id)
    tenant = await _get_tenant_for_property(db, tenant_id, room.property_id)

    previous = await occupy_room(db, room, tenant)
    await db.commit()

    logger.info("Tenant assigned", extra={"room_id": room.id, "tenant_id": tenant.id})
    await _publish(broker, ChangeEventType.UPDATE, room, owner_id)
    await _publish(broker, ChangeEventType.UPDATE, tenant, owner_id)
    if previous is not None:
        await _publish(broker, ChangeEventType.UPDATE, previous, owner_id)
    return room


async def vacate_room(
    db: AsyncSession,
    room_id: int,
    owner_id: int,
    broker: ChangeFeedBroker | None = None,
) -> Room:
    """Remove the tenant from a room in one transaction."""
    room = await get_room(db, room_id, owner_id)

    result = await db.execute(select(Tenant).where(Tenant.room_id == room.id))
    tenants = list(result.scalars().all())
    for tenant in tenants:
        await release_room(db, tenant)

    # Also clears a dangling occupied flag with no tenant behind it
    room.tenant_id = None
    room.status = RoomStatus.VACANT
    room = await room_crud.update(db, room, {})
    await db.commit()

    await _publish(broker, ChangeEventType.UPDATE, room, owner_id)
    for tenant in tenants:
        await _publish(broker, ChangeEventType.UPDATE, tenant, owner_id)
    return room


# ----- Marketplace -----


async def _marketplace_cards(
    db: AsyncSession, properties: list[Property]
) -> list[MarketplaceProperty]:
    property_ids = [p.id for p in properties]
    room_types = await room_type_crud.get_for_properties(db, property_ids)
    vacant = await room_crud.count_vacant_by_property(db, property_ids)

    types_by_property: dict[int, list[RoomType]] = {}
    for room_type in room_types:
        types_by_property.setdefault(room_type.property_id, []).append(room_type)

    cards = []
    for property_obj in properties:
        types = types_by_property.get(property_obj.id, [])
        prices: list[Decimal] = [t.price for t in types]
        card = MarketplaceProperty.model_validate(property_obj)
        card.room_types = [MarketplaceRoomType.model_validate(t) for t in types]
        card.lowest_price = min(prices) if prices else None
        card.available_rooms = vacant.get(property_obj.id, 0)
        cards.append(card)
    return cards


async def search_marketplace(
    db: AsyncSession, search: str | None = None, city: str | None = None
) -> tuple[list[MarketplaceProperty], list[str]]:
    """Published listings plus the cities that have any."""
    properties = await property_crud.get_listed(db, search=search, city=city)
    cities = await property_crud.get_listed_cities(db)
    return await _marketplace_cards(db, properties), cities


async def get_marketplace_property(
    db: AsyncSession, property_id: int
) -> MarketplaceProperty:
    property_obj = await property_crud.get_listed_by_id(db, property_id)
    if not property_obj:
        raise NotFoundError(f"Listing with ID {property_id} not found")
    cards = await _marketplace_cards(db, [property_obj])
    return cards[0]
