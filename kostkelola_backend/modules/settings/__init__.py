"""User settings module."""

from .models import DEFAULT_PAYMENT_REMINDER_DAYS, UserSettings

__all__ = ["DEFAULT_PAYMENT_REMINDER_DAYS", "UserSettings"]
