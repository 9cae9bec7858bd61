"""CRUD operations for tenant management module."""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from ..commons import ListParams
from ..property_management.models import Room
from .models import Tenant
from .schemas import TenantCreate, TenantUpdate


class TenantCRUD(BaseCRUD[Tenant, TenantCreate, TenantUpdate]):
    search_fields = ["name", "email", "phone"]
    default_order_by = "name"
    default_order_desc = False

    async def get_by_email(
        self, db: AsyncSession, property_id: int, email: str
    ) -> Tenant | None:
        result = await db.execute(
            select(Tenant).where(
                Tenant.property_id == property_id,
                func.lower(Tenant.email) == email.lower(),
            )
        )
        return result.scalar_one_or_none()

    async def get_with_room_names(
        self,
        db: AsyncSession,
        property_id: int,
        params: ListParams | None = None,
        filters: dict[str, Any] | None = None,
    ) -> list[tuple[Tenant, str | None]]:
        """Tenants of a property with the name of the room each occupies."""
        params = params or ListParams()
        query = select(Tenant, Room.name).outerjoin(Room, Room.id == Tenant.room_id)
        query = self._apply_custom_filters(
            query, {"property_id": property_id, **(filters or {})}
        )
        query = self._apply_search_filter(query, params.search)
        query = self._apply_ordering(query, params.sort_field, params.sort_direction)
        result = await db.execute(query)
        return [(tenant, room_name) for tenant, room_name in result.all()]

    async def get_room_name(self, db: AsyncSession, tenant: Tenant) -> str | None:
        if tenant.room_id is None:
            return None
        result = await db.execute(select(Room.name).where(Room.id == tenant.room_id))
        return result.scalar_one_or_none()


tenant_crud = TenantCRUD(Tenant)
