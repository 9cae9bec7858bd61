"""CRUD operations for maintenance module."""

from typing import Any

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from ...core.utils import utc_now
from ..commons import ListParams
from ..property_management.models import Room
from ..tenant_management.models import Tenant
from .models import MaintenanceRequest
from .schemas import MaintenanceCreate, MaintenanceUpdate


class MaintenanceCRUD(BaseCRUD[MaintenanceRequest, MaintenanceCreate, MaintenanceUpdate]):
    search_fields = ["title", "description"]
    default_order_by = "reported_date"

    async def get_with_names(
        self,
        db: AsyncSession,
        property_id: int,
        params: ListParams | None = None,
        filters: dict[str, Any] | None = None,
    ) -> list[tuple[MaintenanceRequest, str | None, str | None]]:
        """Requests of a property with room and tenant names."""
        params = params or ListParams()
        query = (
            select(MaintenanceRequest, Room.name, Tenant.name)
            .outerjoin(Room, Room.id == MaintenanceRequest.room_id)
            .outerjoin(Tenant, Tenant.id == MaintenanceRequest.tenant_id)
        )
        query = self._apply_custom_filters(
            query, {"property_id": property_id, **(filters or {})}
        )
        if params.search:
            pattern = f"%{params.search}%"
            query = query.where(
                or_(
                    MaintenanceRequest.title.ilike(pattern),
                    MaintenanceRequest.description.ilike(pattern),
                    Room.name.ilike(pattern),
                )
            )
        query = self._apply_ordering(query, params.sort_field, params.sort_direction)
        result = await db.execute(query)
        return [tuple(row) for row in result.all()]

    async def get_names(
        self, db: AsyncSession, request: MaintenanceRequest
    ) -> tuple[str | None, str | None]:
        room_name = tenant_name = None
        if request.room_id is not None:
            room_name = await db.scalar(select(Room.name).where(Room.id == request.room_id))
        if request.tenant_id is not None:
            tenant_name = await db.scalar(
                select(Tenant.name).where(Tenant.id == request.tenant_id)
            )
        return room_name, tenant_name

    async def detach_room(self, db: AsyncSession, room_id: int) -> None:
        await db.execute(
            update(MaintenanceRequest)
            .where(MaintenanceRequest.room_id == room_id)
            .values(room_id=None, updated_at=utc_now())
        )

    async def detach_tenant(self, db: AsyncSession, tenant_id: int) -> None:
        await db.execute(
            update(MaintenanceRequest)
            .where(MaintenanceRequest.tenant_id == tenant_id)
            .values(tenant_id=None, updated_at=utc_now())
        )


maintenance_crud = MaintenanceCRUD(MaintenanceRequest)
