"""CRUD operations for subscriptions module."""

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Subscription, SubscriptionPlan, SubscriptionStatus

# ----- Plan CRUD -----


async def get_plans(
    db: AsyncSession, is_active: bool | None = None
) -> list[SubscriptionPlan]:
    """Get plans ordered by price."""
    query = select(SubscriptionPlan)
    if is_active is not None:
        query = query.where(SubscriptionPlan.is_active == is_active)
    result = await db.execute(query.order_by(SubscriptionPlan.price, SubscriptionPlan.id))
    return list(result.scalars().all())


async def get_plan_by_id(db: AsyncSession, plan_id: int) -> SubscriptionPlan | None:
    result = await db.execute(
        select(SubscriptionPlan).where(SubscriptionPlan.id == plan_id)
    )
    return result.scalar_one_or_none()


async def get_plan_by_name(db: AsyncSession, name: str) -> SubscriptionPlan | None:
    result = await db.execute(
        select(SubscriptionPlan).where(SubscriptionPlan.name == name)
    )
    return result.scalar_one_or_none()


async def create_plan(db: AsyncSession, **fields) -> SubscriptionPlan:
    plan = SubscriptionPlan(**fields)
    db.add(plan)
    await db.flush()
    return plan


async def update_plan(
    db: AsyncSession, plan: SubscriptionPlan, **fields
) -> SubscriptionPlan:
    for field, value in fields.items():
        setattr(plan, field, value)
    await db.flush()
    return plan


# ----- Subscription CRUD -----


async def get_active_subscription(
    db: AsyncSession, user_id: int
) -> Subscription | None:
    """Newest active subscription of a user, with its plan."""
    result = await db.execute(
        select(Subscription)
        .where(
            Subscription.user_id == user_id,
            Subscription.status == SubscriptionStatus.ACTIVE,
        )
        .order_by(Subscription.created_at.desc(), Subscription.id.desc())
        .limit(1)
    )
    return result.scalars().first()


async def count_subscriptions_for_plan(db: AsyncSession, plan_id: int) -> int:
    result = await db.execute(
        select(func.count(Subscription.id)).where(Subscription.plan_id == plan_id)
    )
    return result.scalar() or 0


async def cancel_active_subscriptions(db: AsyncSession, user_id: int) -> int:
    """Mark every active subscription of a user cancelled."""
    result = await db.execute(
        update(Subscription)
        .where(
            Subscription.user_id == user_id,
            Subscription.status == SubscriptionStatus.ACTIVE,
        )
        .values(status=SubscriptionStatus.CANCELLED)
    )
    return result.rowcount or 0


async def create_subscription(
    db: AsyncSession,
    user_id: int,
    plan_id: int,
    period_start: datetime,
    period_end: datetime,
) -> Subscription:
    subscription = Subscription(
        user_id=user_id,
        plan_id=plan_id,
        status=SubscriptionStatus.ACTIVE,
        current_period_start=period_start,
        current_period_end=period_end,
        cancel_at_period_end=False,
    )
    db.add(subscription)
    await db.flush()
    return subscription
