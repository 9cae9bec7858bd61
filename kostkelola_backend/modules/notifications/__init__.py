"""Notifications module for KostKelola."""

from .models import Notification, NotificationStatus, NotificationType

__all__ = ["Notification", "NotificationStatus", "NotificationType"]
