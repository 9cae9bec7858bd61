"""Notification models."""

import enum

from sqlalchemy import Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ...database import Base, IdentityMixin, TimestampMixin


class NotificationType(str, enum.Enum):
    SYSTEM = "system"
    USER = "user"
    PROPERTY = "property"
    PAYMENT = "payment"


class NotificationStatus(str, enum.Enum):
    UNREAD = "unread"
    READ = "read"


class Notification(IdentityMixin, TimestampMixin, Base):
    """A message for one user, or for everyone when ``target_user_id`` is null."""

    __tablename__ = "notifications"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[NotificationType] = mapped_column(
        Enum(NotificationType, values_callable=lambda e: [m.value for m in e]),
        default=NotificationType.SYSTEM,
        nullable=False,
    )
    status: Mapped[NotificationStatus] = mapped_column(
        Enum(NotificationStatus, values_callable=lambda e: [m.value for m in e]),
        default=NotificationStatus.UNREAD,
        nullable=False,
    )
    target_user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )
    target_property_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=True
    )

    __table_args__ = (Index("ix_notifications_target_status", "target_user_id", "status"),)

    @property
    def is_broadcast(self) -> bool:
        return self.target_user_id is None

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, type={self.type})>"
