"""Notification API routes."""

from fastapi import APIRouter, Query

from ...database import DB
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse
from ..realtime import Broker
from . import services
from .models import NotificationStatus
from .schemas import NotificationCreate, NotificationResponse, UnreadCountResponse

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=BaseResponse[list[NotificationResponse]])
async def list_notifications(
    current_user: CurrentUser,
    db: DB,
    status: NotificationStatus | None = Query(None),
):
    """Get the caller's notifications and broadcasts, newest first."""
    notifications = await services.list_notifications(db, current_user.id, status)
    return BaseResponse(
        success=True,
        data=[NotificationResponse.model_validate(n) for n in notifications],
    )


@router.get("/unread-count", response_model=BaseResponse[UnreadCountResponse])
async def unread_count(current_user: CurrentUser, db: DB):
    count = await services.count_unread(db, current_user.id)
    return BaseResponse(success=True, data=UnreadCountResponse(unread=count))


@router.post("", response_model=BaseResponse[NotificationResponse], status_code=201)
async def create_notification(
    data: NotificationCreate, current_user: CurrentUser, db: DB, broker: Broker
):
    notification = await services.create_notification(db, current_user, data, broker)
    return BaseResponse(
        success=True,
        message="Notification created",
        data=NotificationResponse.model_validate(notification),
    )


@router.post("/read-all", response_model=BaseResponse[None])
async def mark_all_read(current_user: CurrentUser, db: DB, broker: Broker):
    """Mark all of the caller's notifications as read."""
    updated = await services.mark_all_read(db, current_user.id, broker)
    return BaseResponse(success=True, message=f"{updated} notifications marked as read")


@router.post(
    "/{notification_id}/read", response_model=BaseResponse[NotificationResponse]
)
async def mark_read(
    notification_id: int, current_user: CurrentUser, db: DB, broker: Broker
):
    notification = await services.mark_read(db, notification_id, current_user, broker)
    return BaseResponse(
        success=True, data=NotificationResponse.model_validate(notification)
    )


@router.delete("/{notification_id}", response_model=BaseResponse[None])
async def delete_notification(
    notification_id: int, current_user: CurrentUser, db: DB, broker: Broker
):
    await services.delete_notification(db, notification_id, current_user, broker)
    return BaseResponse(success=True, message="Notification deleted")
