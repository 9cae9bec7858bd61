"""User settings schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DateFormat = Literal["DD/MM/YYYY", "MM/DD/YYYY", "YYYY-MM-DD"]


class SettingsUpdate(BaseModel):
    """Partial update; unset fields keep their stored value."""

    email_notifications: bool | None = None
    payment_reminders: bool | None = None
    maintenance_updates: bool | None = None
    new_tenants: bool | None = None
    currency: str | None = Field(None, min_length=3, max_length=10)
    date_format: DateFormat | None = None
    payment_reminder_days: int | None = Field(None, ge=0, le=60)
    session_timeout: int | None = Field(None, ge=5, le=24 * 60)
    login_notifications: bool | None = None
    two_factor_enabled: bool | None = None


class SettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    email_notifications: bool
    payment_reminders: bool
    maintenance_updates: bool
    new_tenants: bool
    currency: str
    date_format: str
    payment_reminder_days: int
    session_timeout: int
    login_notifications: bool
    two_factor_enabled: bool
    updated_at: datetime
