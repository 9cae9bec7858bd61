"""CRUD operations for property management module."""

from typing import Any

from sqlalchemy import distinct, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from ...core.utils import utc_now
from ..commons import ListParams
from ..tenant_management.models import Tenant
from .models import MarketplaceStatus, Property, Room, RoomStatus, RoomType
from .schemas import (
    PropertyCreate,
    PropertyUpdate,
    RoomCreate,
    RoomTypeCreate,
    RoomTypeUpdate,
    RoomUpdate,
)


class PropertyCRUD(BaseCRUD[Property, PropertyCreate, PropertyUpdate]):
    search_fields = ["name", "address", "city"]

    def _listed(self):
        return select(Property).where(
            Property.marketplace_enabled.is_(True),
            Property.marketplace_status == MarketplaceStatus.PUBLISHED,
        )

    async def get_listed(
        self,
        db: AsyncSession,
        search: str | None = None,
        city: str | None = None,
    ) -> list[Property]:
        """Published marketplace properties, newest first."""
        query = self._listed()
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    Property.name.ilike(pattern),
                    Property.city.ilike(pattern),
                    Property.address.ilike(pattern),
                )
            )
        if city:
            query = query.where(func.lower(Property.city) == city.lower())
        result = await db.execute(query.order_by(Property.created_at.desc()))
        return list(result.scalars().all())

    async def get_listed_by_id(
        self, db: AsyncSession, property_id: int
    ) -> Property | None:
        result = await db.execute(self._listed().where(Property.id == property_id))
        return result.scalar_one_or_none()

    async def get_listed_cities(self, db: AsyncSession) -> list[str]:
        query = (
            self._listed()
            .with_only_columns(distinct(Property.city))
            .where(Property.city.is_not(None))
            .order_by(Property.city)
        )
        result = await db.execute(query)
        return [city for city in result.scalars().all() if city]


class RoomTypeCRUD(BaseCRUD[RoomType, RoomTypeCreate, RoomTypeUpdate]):
    search_fields = ["name", "description"]
    default_order_by = "name"
    default_order_desc = False

    async def get_by_name(
        self, db: AsyncSession, property_id: int, name: str
    ) -> RoomType | None:
        result = await db.execute(
            select(RoomType).where(
                RoomType.property_id == property_id, RoomType.name == name
            )
        )
        return result.scalar_one_or_none()

    async def get_for_properties(
        self, db: AsyncSession, property_ids: list[int]
    ) -> list[RoomType]:
        if not property_ids:
            return []
        result = await db.execute(
            select(RoomType)
            .where(RoomType.property_id.in_(property_ids))
            .order_by(RoomType.price, RoomType.name)
        )
        return list(result.scalars().all())


class RoomCRUD(BaseCRUD[Room, RoomCreate, RoomUpdate]):
    search_fields = ["name", "floor", "type"]
    default_order_by = "name"
    default_order_desc = False

    async def get_with_tenant_names(
        self,
        db: AsyncSession,
        property_id: int,
        params: ListParams | None = None,
        filters: dict[str, Any] | None = None,
    ) -> list[tuple[Room, str | None]]:
        """Rooms of a property with the name of the tenant holding each."""
        params = params or ListParams()
        query = select(Room, Tenant.name).outerjoin(Tenant, Tenant.id == Room.tenant_id)
        query = self._apply_custom_filters(
            query, {"property_id": property_id, **(filters or {})}
        )
        query = self._apply_search_filter(query, params.search)
        query = self._apply_ordering(query, params.sort_field, params.sort_direction)
        result = await db.execute(query)
        return [(room, tenant_name) for room, tenant_name in result.all()]

    async def get_tenant_name(self, db: AsyncSession, room: Room) -> str | None:
        if room.tenant_id is None:
            return None
        result = await db.execute(select(Tenant.name).where(Tenant.id == room.tenant_id))
        return result.scalar_one_or_none()

    async def get_for_update(self, db: AsyncSession, room_id: int) -> Room | None:
        result = await db.execute(
            select(Room).where(Room.id == room_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def get_by_type(
        self, db: AsyncSession, property_id: int, type_name: str
    ) -> list[Room]:
        result = await db.execute(
            select(Room)
            .where(Room.property_id == property_id, Room.type == type_name)
            .order_by(Room.name)
        )
        return list(result.scalars().all())

    async def rename_type(
        self, db: AsyncSession, property_id: int, old_name: str, new_name: str
    ) -> int:
        result = await db.execute(
            update(Room)
            .where(Room.property_id == property_id, Room.type == old_name)
            .values(type=new_name, updated_at=utc_now())
        )
        return result.rowcount or 0

    async def count_vacant_by_property(
        self, db: AsyncSession, property_ids: list[int]
    ) -> dict[int, int]:
        if not property_ids:
            return {}
        result = await db.execute(
            select(Room.property_id, func.count(Room.id))
            .where(Room.property_id.in_(property_ids), Room.status == RoomStatus.VACANT)
            .group_by(Room.property_id)
        )
        return {property_id: count for property_id, count in result.all()}

    async def clear_tenant_refs(self, db: AsyncSession, property_id: int) -> None:
        await db.execute(
            update(Room).where(Room.property_id == property_id).values(tenant_id=None)
        )


property_crud = PropertyCRUD(Property)
room_type_crud = RoomTypeCRUD(RoomType)
room_crud = RoomCRUD(Room)
