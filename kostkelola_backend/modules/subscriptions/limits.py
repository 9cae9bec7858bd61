"""Plan caps on properties and rooms.

The ``can_add_*`` checks are pure comparisons. The ``ensure_*`` helpers run
inside the creating transaction: they lock the parent row first so two
concurrent creates cannot both pass the same count.
"""

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import LimitExceededError
from ...core.logging import get_logger
from ..auth.crud import lock_user_row
from ..property_management.models import Property, Room
from . import crud

logger = get_logger(__name__)

DEFAULT_MAX_PROPERTIES = 1
DEFAULT_MAX_ROOMS_PER_PROPERTY = 1
LIMITS_ERROR = "Failed to load subscription limits"


@dataclass
class SubscriptionLimits:
    max_properties: int = DEFAULT_MAX_PROPERTIES
    max_rooms_per_property: int = DEFAULT_MAX_ROOMS_PER_PROPERTY
    error: str | None = None

    def can_add_property(self, current_count: int) -> bool:
        return current_count < self.max_properties

    def can_add_room(self, current_count: int) -> bool:
        return current_count < self.max_rooms_per_property


async def resolve_limits(db: AsyncSession, user_id: int) -> SubscriptionLimits:
    """Caps of the user's newest active plan; 1/1 without one or on error."""
    try:
        subscription = await crud.get_active_subscription(db, user_id)
    except SQLAlchemyError:
        logger.exception("Limit lookup failed", extra={"user_id": user_id})
        return SubscriptionLimits(error=LIMITS_ERROR)

    if subscription is None or subscription.plan is None:
        return SubscriptionLimits()

    return SubscriptionLimits(
        max_properties=subscription.plan.max_properties,
        max_rooms_per_property=subscription.plan.max_rooms_per_property,
    )


async def count_properties(db: AsyncSession, owner_id: int) -> int:
    result = await db.execute(
        select(func.count(Property.id)).where(Property.owner_id == owner_id)
    )
    return result.scalar() or 0


async def count_rooms(db: AsyncSession, property_id: int) -> int:
    result = await db.execute(
        select(func.count(Room.id)).where(Room.property_id == property_id)
    )
    return result.scalar() or 0


async def ensure_can_add_property(db: AsyncSession, owner_id: int) -> None:
    """Lock the owner row, then check the property cap.

    Raises:
        LimitExceededError: If the owner is at the cap
    """
    await lock_user_row(db, owner_id)
    limits = await resolve_limits(db, owner_id)
    current = await count_properties(db, owner_id)
    if not limits.can_add_property(current):
        raise LimitExceededError("properties", limits.max_properties)


async def ensure_can_add_room(db: AsyncSession, property_obj: Property) -> None:
    """Lock the property row, then check the per-property room cap.

    Raises:
        LimitExceededError: If the property is at the cap
    """
    await db.execute(
        select(Property.id).where(Property.id == property_obj.id).with_for_update()
    )
    limits = await resolve_limits(db, property_obj.owner_id)
    current = await count_rooms(db, property_obj.id)
    if not limits.can_add_room(current):
        raise LimitExceededError(
            "rooms", limits.max_rooms_per_property, scope="property"
        )
