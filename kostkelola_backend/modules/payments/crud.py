"""CRUD operations for payments module."""

from typing import Any

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from ...core.utils import utc_now
from ..commons import ListParams
from ..property_management.models import Room
from ..tenant_management.models import Tenant
from .models import Payment
from .schemas import PaymentCreate, PaymentUpdate


class PaymentCRUD(BaseCRUD[Payment, PaymentCreate, PaymentUpdate]):
    search_fields = ["notes", "payment_method"]
    default_order_by = "due_date"

    async def get_with_names(
        self,
        db: AsyncSession,
        property_id: int,
        params: ListParams | None = None,
        filters: dict[str, Any] | None = None,
    ) -> list[tuple[Payment, str | None, str | None]]:
        """Payments of a property with tenant and room names.

        Search also matches the tenant's name.
        """
        params = params or ListParams()
        query = (
            select(Payment, Tenant.name, Room.name)
            .outerjoin(Tenant, Tenant.id == Payment.tenant_id)
            .outerjoin(Room, Room.id == Payment.room_id)
        )
        query = self._apply_custom_filters(
            query, {"property_id": property_id, **(filters or {})}
        )
        if params.search:
            pattern = f"%{params.search}%"
            query = query.where(
                or_(
                    Tenant.name.ilike(pattern),
                    Room.name.ilike(pattern),
                    Payment.notes.ilike(pattern),
                    Payment.payment_method.ilike(pattern),
                )
            )
        query = self._apply_ordering(query, params.sort_field, params.sort_direction)
        result = await db.execute(query)
        return [tuple(row) for row in result.all()]

    async def get_names(
        self, db: AsyncSession, payment: Payment
    ) -> tuple[str | None, str | None]:
        tenant_name = await db.scalar(
            select(Tenant.name).where(Tenant.id == payment.tenant_id)
        )
        room_name = None
        if payment.room_id is not None:
            room_name = await db.scalar(select(Room.name).where(Room.id == payment.room_id))
        return tenant_name, room_name

    async def get_by_billing_key(
        self, db: AsyncSession, billing_key: str
    ) -> Payment | None:
        result = await db.execute(
            select(Payment).where(Payment.billing_key == billing_key)
        )
        return result.scalar_one_or_none()

    async def detach_room(self, db: AsyncSession, room_id: int) -> None:
        await db.execute(
            update(Payment)
            .where(Payment.room_id == room_id)
            .values(room_id=None, updated_at=utc_now())
        )


payment_crud = PaymentCRUD(Payment)
