"""Backoffice schemas."""

from decimal import Decimal

from pydantic import BaseModel, Field

from ..auth.models import RoleSlug
from ..auth.schemas import UserBase


class PlatformStats(BaseModel):
    total_users: int
    total_owners: int
    total_properties: int
    active_tenants: int
    total_revenue: Decimal
    active_subscriptions: int


class StaffUserCreate(UserBase):
    password: str = Field(..., min_length=8, max_length=128)
    role: RoleSlug = RoleSlug.SUPPORT


class UserAdminUpdate(BaseModel):
    full_name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)
    role: RoleSlug | None = None
    is_active: bool | None = None
