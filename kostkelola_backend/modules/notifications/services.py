"""Notification business logic services.

Targeted notifications belong to their user. Broadcasts (no target user) are
visible to everyone and only the backoffice may change them.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError, PermissionError
from ...core.logging import get_logger
from ..auth import crud as auth_crud
from ..auth.schemas import AuthenticatedUser
from ..property_management.services import get_owned_property
from ..realtime import ChangeEventType, ChangeFeedBroker, Channel
from .crud import notification_crud
from .models import Notification, NotificationStatus, NotificationType
from .schemas import BroadcastCreate, NotificationCreate

logger = get_logger(__name__)


async def publish_notification(
    broker: ChangeFeedBroker | None, event: ChangeEventType, notification: Notification
) -> None:
    """Send a notification change to its target, or to everyone for broadcasts."""
    if broker is None:
        return
    audience = None if notification.is_broadcast else [notification.target_user_id]
    await broker.publish_row(Channel.NOTIFICATIONS, event, notification, audience=audience)


async def _get_mutable(
    db: AsyncSession, notification_id: int, user: AuthenticatedUser
) -> Notification:
    notification = await notification_crud.get(db, notification_id)
    if notification is None or not (
        notification.is_broadcast or notification.target_user_id == user.id
    ):
        raise NotFoundError(f"Notification with ID {notification_id} not found")
    if notification.is_broadcast and not user.is_backoffice:
        raise PermissionError("change", "broadcast notification")
    return notification


async def list_notifications(
    db: AsyncSession, user_id: int, status: NotificationStatus | None = None
) -> list[Notification]:
    return await notification_crud.get_for_user(db, user_id, status)


async def count_unread(db: AsyncSession, user_id: int) -> int:
    return await notification_crud.count_unread(db, user_id)


async def create_notification(
    db: AsyncSession,
    user: AuthenticatedUser,
    data: NotificationCreate,
    broker: ChangeFeedBroker | None = None,
) -> Notification:
    """Create a notification for the caller, optionally about one of their properties."""
    if data.target_property_id is not None:
        await get_owned_property(db, data.target_property_id, user.id)

    notification = await notification_crud.create(
        db, data.model_dump(), target_user_id=user.id
    )
    await db.commit()
    await publish_notification(broker, ChangeEventType.INSERT, notification)
    return notification


async def broadcast_notification(
    db: AsyncSession,
    data: BroadcastCreate,
    broker: ChangeFeedBroker | None = None,
) -> Notification:
    """Backoffice notification to one user or, without a target, to everyone."""
    if data.target_user_id is not None and not await auth_crud.get_user_by_id(
        db, data.target_user_id
    ):
        raise NotFoundError(f"User with ID {data.target_user_id} not found")
    notification = await notification_crud.create(db, data.model_dump())
    await db.commit()

    logger.info(
        "Notification broadcast",
        extra={
            "notification_id": notification.id,
            "target_user_id": notification.target_user_id,
        },
    )
    await publish_notification(broker, ChangeEventType.INSERT, notification)
    return notification


async def create_payment_reminder(
    db: AsyncSession, user_id: int, property_id: int, title: str, message: str
) -> Notification:
    """Queue an unread payment notification without committing."""
    return await notification_crud.create(
        db,
        {
            "title": title,
            "message": message,
            "type": NotificationType.PAYMENT,
            "status": NotificationStatus.UNREAD,
            "target_user_id": user_id,
            "target_property_id": property_id,
        },
    )


async def mark_read(
    db: AsyncSession,
    notification_id: int,
    user: AuthenticatedUser,
    broker: ChangeFeedBroker | None = None,
) -> Notification:
    notification = await _get_mutable(db, notification_id, user)
    notification = await notification_crud.update(
        db, notification, {"status": NotificationStatus.READ}
    )
    await db.commit()
    await publish_notification(broker, ChangeEventType.UPDATE, notification)
    return notification


async def mark_all_read(
    db: AsyncSession, user_id: int, broker: ChangeFeedBroker | None = None
) -> int:
    """Mark every unread notification targeted at the user as read."""
    unread = await notification_crud.get_multi(
        db, filters={"target_user_id": user_id, "status": NotificationStatus.UNREAD}
    )
    updated = await notification_crud.mark_all_read(db, user_id)
    await db.commit()
    for notification in unread:
        await publish_notification(broker, ChangeEventType.UPDATE, notification)
    return updated


async def delete_notification(
    db: AsyncSession,
    notification_id: int,
    user: AuthenticatedUser,
    broker: ChangeFeedBroker | None = None,
) -> None:
    notification = await _get_mutable(db, notification_id, user)
    await notification_crud.delete(db, notification)
    await db.commit()
    await publish_notification(broker, ChangeEventType.DELETE, notification)
