"""Property management API routes."""

from fastapi import APIRouter, Query

from ...database import DB
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse, ListQuery
from ..realtime import Broker
from . import services
from .crud import room_crud
from .models import Room, RoomStatus
from .schemas import (
    AssignTenantRequest,
    MarketplaceListing,
    MarketplaceProperty,
    MarketplaceSettingsUpdate,
    PropertyCreate,
    PropertyResponse,
    PropertyUpdate,
    RoomCreate,
    RoomResponse,
    RoomTypeCreate,
    RoomTypeResponse,
    RoomTypeUpdate,
    RoomUpdate,
)

router = APIRouter(prefix="/properties", tags=["Properties"])
room_types_router = APIRouter(prefix="/room-types", tags=["Room Types"])
rooms_router = APIRouter(prefix="/rooms", tags=["Rooms"])
marketplace_router = APIRouter(prefix="/marketplace", tags=["Marketplace"])


def _room_response(room: Room, tenant_name: str | None = None) -> RoomResponse:
    response = RoomResponse.model_validate(room)
    response.tenant_name = tenant_name
    return response


# ----- Properties -----


@router.get("", response_model=BaseResponse[list[PropertyResponse]])
async def list_properties(current_user: CurrentUser, db: DB, params: ListQuery):
    """Get the caller's properties."""
    properties = await services.list_properties(db, current_user.id, params)
    return BaseResponse(
        success=True, data=[PropertyResponse.model_validate(p) for p in properties]
    )


@router.post("", response_model=BaseResponse[PropertyResponse], status_code=201)
async def create_property(
    data: PropertyCreate, current_user: CurrentUser, db: DB, broker: Broker
):
    """Create a property (subject to the plan's property limit)."""
    property_obj = await services.create_property(db, current_user.id, data, broker)
    return BaseResponse(
        success=True,
        message="Property created successfully",
        data=PropertyResponse.model_validate(property_obj),
    )


@router.get("/{property_id}", response_model=BaseResponse[PropertyResponse])
async def get_property(property_id: int, current_user: CurrentUser, db: DB):
    """Get a property by ID."""
    property_obj = await services.get_owned_property(db, property_id, current_user.id)
    return BaseResponse(success=True, data=PropertyResponse.model_validate(property_obj))


@router.put("/{property_id}", response_model=BaseResponse[PropertyResponse])
async def update_property(
    property_id: int,
    data: PropertyUpdate,
    current_user: CurrentUser,
    db: DB,
    broker: Broker,
):
    """Update a property."""
    property_obj = await services.update_property(
        db, property_id, current_user.id, data, broker
    )
    return BaseResponse(
        success=True,
        message="Property updated successfully",
        data=PropertyResponse.model_validate(property_obj),
    )


@router.put("/{property_id}/marketplace", response_model=BaseResponse[PropertyResponse])
async def update_marketplace_settings(
    property_id: int,
    data: MarketplaceSettingsUpdate,
    current_user: CurrentUser,
    db: DB,
    broker: Broker,
):
    """Enable or publish the property's marketplace listing."""
    property_obj = await services.update_marketplace_settings(
        db, property_id, current_user.id, data, broker
    )
    return BaseResponse(
        success=True,
        message="Marketplace settings saved",
        data=PropertyResponse.model_validate(property_obj),
    )


@router.delete("/{property_id}", response_model=BaseResponse[None])
async def delete_property(
    property_id: int, current_user: CurrentUser, db: DB, broker: Broker
):
    """Delete a property and everything in it."""
    await services.delete_property(db, property_id, current_user.id, broker)
    return BaseResponse(success=True, message="Property deleted successfully")


# ----- Room Types -----


@router.get(
    "/{property_id}/room-types", response_model=BaseResponse[list[RoomTypeResponse]]
)
async def list_room_types(
    property_id: int, current_user: CurrentUser, db: DB, params: ListQuery
):
    """Get the room types of a property."""
    room_types = await services.list_room_types(
        db, property_id, current_user.id, params
    )
    return BaseResponse(
        success=True, data=[RoomTypeResponse.model_validate(t) for t in room_types]
    )


@router.post(
    "/{property_id}/room-types",
    response_model=BaseResponse[RoomTypeResponse],
    status_code=201,
)
async def create_room_type(
    property_id: int,
    data: RoomTypeCreate,
    current_user: CurrentUser,
    db: DB,
    broker: Broker,
):
    """Create a room type."""
    room_type = await services.create_room_type(
        db, property_id, current_user.id, data, broker
    )
    return BaseResponse(
        success=True,
        message="Room type created successfully",
        data=RoomTypeResponse.model_validate(room_type),
    )


@room_types_router.put("/{room_type_id}", response_model=BaseResponse[RoomTypeResponse])
async def update_room_type(
    room_type_id: int,
    data: RoomTypeUpdate,
    current_user: CurrentUser,
    db: DB,
    broker: Broker,
    cascade_rename: bool = Query(
        False, description="Also rename the rooms that use the old name"
    ),
):
    """Update a room type; renames in use need ``cascade_rename=true``."""
    room_type = await services.update_room_type(
        db, room_type_id, current_user.id, data, cascade_rename, broker
    )
    return BaseResponse(
        success=True,
        message="Room type updated successfully",
        data=RoomTypeResponse.model_validate(room_type),
    )


@room_types_router.delete("/{room_type_id}", response_model=BaseResponse[None])
async def delete_room_type(
    room_type_id: int, current_user: CurrentUser, db: DB, broker: Broker
):
    """Delete a room type that no room uses."""
    await services.delete_room_type(db, room_type_id, current_user.id, broker)
    return BaseResponse(success=True, message="Room type deleted successfully")


# ----- Rooms -----


@router.get("/{property_id}/rooms", response_model=BaseResponse[list[RoomResponse]])
async def list_rooms(
    property_id: int,
    current_user: CurrentUser,
    db: DB,
    params: ListQuery,
    status: RoomStatus | None = Query(None),
    type: str | None = Query(None, description="Room type name"),
):
    """Get the rooms of a property with their tenant names."""
    rows = await services.list_rooms(
        db, property_id, current_user.id, params, status=status, room_type=type
    )
    return BaseResponse(
        success=True, data=[_room_response(room, name) for room, name in rows]
    )


@router.post(
    "/{property_id}/rooms", response_model=BaseResponse[RoomResponse], status_code=201
)
async def create_room(
    property_id: int,
    data: RoomCreate,
    current_user: CurrentUser,
    db: DB,
    broker: Broker,
):
    """Create a room (subject to the plan's room limit)."""
    room = await services.create_room(db, property_id, current_user.id, data, broker)
    return BaseResponse(
        success=True, message="Room created successfully", data=_room_response(room)
    )


@rooms_router.get("/{room_id}", response_model=BaseResponse[RoomResponse])
async def get_room(room_id: int, current_user: CurrentUser, db: DB):
    """Get a room by ID."""
    room = await services.get_room(db, room_id, current_user.id)
    tenant_name = await room_crud.get_tenant_name(db, room)
    return BaseResponse(success=True, data=_room_response(room, tenant_name))


@rooms_router.put("/{room_id}", response_model=BaseResponse[RoomResponse])
async def update_room(
    room_id: int, data: RoomUpdate, current_user: CurrentUser, db: DB, broker: Broker
):
    """Update a room."""
    room = await services.update_room(db, room_id, current_user.id, data, broker)
    return BaseResponse(
        success=True, message="Room updated successfully", data=_room_response(room)
    )


@rooms_router.delete("/{room_id}", response_model=BaseResponse[None])
async def delete_room(room_id: int, current_user: CurrentUser, db: DB, broker: Broker):
    """Delete a room without assigned tenants."""
    await services.delete_room(db, room_id, current_user.id, broker)
    return BaseResponse(success=True, message="Room deleted successfully")


@rooms_router.post(
    "/{room_id}/duplicate", response_model=BaseResponse[RoomResponse], status_code=201
)
async def duplicate_room(
    room_id: int, current_user: CurrentUser, db: DB, broker: Broker
):
    """Copy a room as a new vacant room."""
    room = await services.duplicate_room(db, room_id, current_user.id, broker)
    return BaseResponse(
        success=True, message="Room duplicated successfully", data=_room_response(room)
    )


@rooms_router.post("/{room_id}/assign", response_model=BaseResponse[RoomResponse])
async def assign_tenant(
    room_id: int,
    data: AssignTenantRequest,
    current_user: CurrentUser,
    db: DB,
    broker: Broker,
):
    """Assign a tenant to the room."""
    room = await services.assign_tenant(
        db, room_id, data.tenant_id, current_user.id, broker
    )
    tenant_name = await room_crud.get_tenant_name(db, room)
    return BaseResponse(
        success=True,
        message="Tenant assigned successfully",
        data=_room_response(room, tenant_name),
    )


@rooms_router.post("/{room_id}/vacate", response_model=BaseResponse[RoomResponse])
async def vacate_room(room_id: int, current_user: CurrentUser, db: DB, broker: Broker):
    """Remove the tenant from the room."""
    room = await services.vacate_room(db, room_id, current_user.id, broker)
    return BaseResponse(
        success=True, message="Room vacated successfully", data=_room_response(room)
    )


# ----- Marketplace (public) -----


@marketplace_router.get("/properties", response_model=BaseResponse[MarketplaceListing])
async def search_marketplace(
    db: DB,
    search: str | None = Query(None, max_length=200),
    city: str | None = Query(None, max_length=120),
):
    """Published listings; search matches name, city or address."""
    properties, cities = await services.search_marketplace(db, search, city)
    return BaseResponse(
        success=True, data=MarketplaceListing(properties=properties, cities=cities)
    )


@marketplace_router.get(
    "/properties/{property_id}", response_model=BaseResponse[MarketplaceProperty]
)
async def get_marketplace_property(property_id: int, db: DB):
    """A single published listing."""
    listing = await services.get_marketplace_property(db, property_id)
    return BaseResponse(success=True, data=listing)
