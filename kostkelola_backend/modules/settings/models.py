"""Per-user preferences."""

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ...database import Base, IdentityMixin, TimestampMixin

DEFAULT_PAYMENT_REMINDER_DAYS = 5


class UserSettings(IdentityMixin, TimestampMixin, Base):
    """Notification, display and security preferences of one user."""

    __tablename__ = "user_settings"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    # Notifications
    email_notifications: Mapped[bool] = mapped_column(Boolean, default=True)
    payment_reminders: Mapped[bool] = mapped_column(Boolean, default=True)
    maintenance_updates: Mapped[bool] = mapped_column(Boolean, default=True)
    new_tenants: Mapped[bool] = mapped_column(Boolean, default=True)

    # Display
    currency: Mapped[str] = mapped_column(String(10), default="IDR")
    date_format: Mapped[str] = mapped_column(String(20), default="DD/MM/YYYY")

    # Billing
    payment_reminder_days: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_PAYMENT_REMINDER_DAYS
    )

    # Security
    session_timeout: Mapped[int] = mapped_column(Integer, default=30)  # minutes
    login_notifications: Mapped[bool] = mapped_column(Boolean, default=True)
    two_factor_enabled: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<UserSettings(user_id={self.user_id})>"
