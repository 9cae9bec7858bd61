"""Subscription business logic services."""

from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import (
    BusinessLogicError,
    NotFoundError,
    ResourceAlreadyExistsError,
)
from ...core.logging import get_logger
from ...core.utils import utc_now
from ..auth import crud as auth_crud
from ..property_management import crud as property_crud
from . import crud
from .limits import count_rooms, resolve_limits
from .models import Subscription, SubscriptionPlan
from .schemas import (
    LimitsResponse,
    PlanCreate,
    PlanUpdate,
    PropertyUsage,
    SubscriptionAssign,
)

logger = get_logger(__name__)

DAYS_PER_PERIOD_MONTH = 30


async def get_plan(db: AsyncSession, plan_id: int) -> SubscriptionPlan:
    plan = await crud.get_plan_by_id(db, plan_id)
    if not plan:
        raise NotFoundError(f"Subscription plan with ID {plan_id} not found")
    return plan


async def create_plan(db: AsyncSession, data: PlanCreate) -> SubscriptionPlan:
    """Create a plan with a unique name."""
    if await crud.get_plan_by_name(db, data.name):
        raise ResourceAlreadyExistsError("Subscription plan", data.name)

    plan = await crud.create_plan(db, **data.model_dump(), is_active=True)
    await db.commit()
    return plan


async def update_plan(
    db: AsyncSession, plan_id: int, data: PlanUpdate
) -> SubscriptionPlan:
    plan = await get_plan(db, plan_id)

    if data.name and data.name != plan.name:
        if await crud.get_plan_by_name(db, data.name):
            raise ResourceAlreadyExistsError("Subscription plan", data.name)

    updated = await crud.update_plan(db, plan, **data.model_dump(exclude_unset=True))
    await db.commit()
    return updated


async def delete_plan(db: AsyncSession, plan_id: int) -> None:
    """Delete a plan nobody has ever subscribed to."""
    plan = await get_plan(db, plan_id)
    if await crud.count_subscriptions_for_plan(db, plan_id):
        raise BusinessLogicError(
            f"Plan '{plan.name}' has subscriptions. Deactivate it instead."
        )
    await db.delete(plan)
    await db.commit()


async def assign_subscription(
    db: AsyncSession, user_id: int, data: SubscriptionAssign
) -> Subscription:
    """Put a user on a plan, cancelling whatever was active before."""
    user = await auth_crud.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError(f"User with ID {user_id} not found")

    plan = await get_plan(db, data.plan_id)
    if not plan.is_active:
        raise BusinessLogicError(f"Plan '{plan.name}' is not active")

    cancelled = await crud.cancel_active_subscriptions(db, user_id)
    start = utc_now()
    subscription = await crud.create_subscription(
        db,
        user_id=user_id,
        plan_id=plan.id,
        period_start=start,
        period_end=start + timedelta(days=DAYS_PER_PERIOD_MONTH * data.period_months),
    )
    await db.commit()
    await db.refresh(subscription, ["plan"])

    logger.info(
        "Subscription assigned",
        extra={"user_id": user_id, "plan": plan.name, "cancelled": cancelled},
    )
    return subscription


async def get_limits_overview(db: AsyncSession, user_id: int) -> LimitsResponse:
    """Caps plus current usage for the owner's dashboard."""
    limits = await resolve_limits(db, user_id)
    properties = await property_crud.property_crud.get_multi(
        db, filters={"owner_id": user_id}
    )

    usage = []
    for property_obj in properties:
        rooms = await count_rooms(db, property_obj.id)
        usage.append(
            PropertyUsage(
                property_id=property_obj.id,
                name=property_obj.name,
                rooms=rooms,
                can_add_room=limits.can_add_room(rooms),
            )
        )

    return LimitsResponse(
        max_properties=limits.max_properties,
        max_rooms_per_property=limits.max_rooms_per_property,
        property_count=len(properties),
        can_add_property=limits.can_add_property(len(properties)),
        properties=usage,
        error=limits.error,
    )
