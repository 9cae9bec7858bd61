"""Backoffice services."""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import BusinessLogicError, NotFoundError, ResourceAlreadyExistsError
from ...core.logging import get_logger
from ..auth import crud as auth_crud
from ..auth.models import RoleSlug, User
from ..payments.models import Payment, PaymentStatus
from ..property_management.models import Property
from ..subscriptions.models import Subscription, SubscriptionStatus
from ..tenant_management.models import Tenant, TenantStatus
from .schemas import PlatformStats, StaffUserCreate, UserAdminUpdate

logger = get_logger(__name__)


async def _count(db: AsyncSession, column, *conditions) -> int:
    result = await db.execute(select(func.count(column)).where(*conditions))
    return result.scalar() or 0


async def get_platform_stats(db: AsyncSession) -> PlatformStats:
    revenue = await db.scalar(
        select(func.coalesce(func.sum(Payment.amount), 0)).where(
            Payment.status == PaymentStatus.PAID
        )
    )
    return PlatformStats(
        total_users=await _count(db, User.id),
        total_owners=await _count(db, User.id, User.role == RoleSlug.OWNER),
        total_properties=await _count(db, Property.id),
        active_tenants=await _count(db, Tenant.id, Tenant.status == TenantStatus.ACTIVE),
        total_revenue=Decimal(str(revenue or 0)),
        active_subscriptions=await _count(
            db, Subscription.id, Subscription.status == SubscriptionStatus.ACTIVE
        ),
    )


async def list_users(
    db: AsyncSession, search: str | None = None, role: RoleSlug | None = None
) -> list[User]:
    return await auth_crud.get_users(db, search=search, role=role)


async def create_staff_user(db: AsyncSession, data: StaffUserCreate) -> User:
    if await auth_crud.get_user_by_email(db, data.email):
        raise ResourceAlreadyExistsError("User", data.email)

    user = await auth_crud.create_user(
        db,
        email=data.email,
        password=data.password,
        full_name=data.full_name,
        phone=data.phone,
        role=data.role,
    )
    await db.commit()
    logger.info("Staff user created", extra={"user_id": user.id, "role": user.role.value})
    return user


async def update_user(
    db: AsyncSession, user_id: int, data: UserAdminUpdate, acting_user_id: int
) -> User:
    user = await auth_crud.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError(f"User with ID {user_id} not found")

    changes = data.model_dump(exclude_unset=True)
    if user_id == acting_user_id and (
        changes.get("is_active") is False or "role" in changes
    ):
        raise BusinessLogicError("You cannot change your own role or deactivate yourself")

    for field, value in changes.items():
        setattr(user, field, value)
    await db.flush()

    if changes.get("is_active") is False:
        await auth_crud.revoke_all_user_tokens(db, user.id)
    await db.commit()

    logger.info(
        "User updated by staff",
        extra={"user_id": user.id, "acting_user_id": acting_user_id},
    )
    return user
