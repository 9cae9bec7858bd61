"""Notification schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .models import NotificationStatus, NotificationType


class NotificationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.USER
    target_property_id: int | None = None


class BroadcastCreate(BaseModel):
    """Backoffice notification; without ``target_user_id`` it goes to everyone."""

    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.SYSTEM
    target_user_id: int | None = None
    target_property_id: int | None = None


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: UUID
    title: str
    message: str
    type: NotificationType
    status: NotificationStatus
    target_user_id: int | None = None
    target_property_id: int | None = None
    created_at: datetime


class UnreadCountResponse(BaseModel):
    unread: int
