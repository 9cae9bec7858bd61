"""Tenant management schemas for KostKelola."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from ..payments.models import PaymentStatus
from .models import TenantStatus


class TenantBase(BaseModel):
    """Base tenant schema."""

    name: str = Field(..., min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)
    email: EmailStr
    start_date: date | None = None
    end_date: date | None = None
    status: TenantStatus = TenantStatus.ACTIVE
    payment_status: PaymentStatus = PaymentStatus.PENDING

    @model_validator(mode="after")
    def check_lease_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class TenantCreate(TenantBase):
    """Schema for creating a tenant, optionally straight into a room."""

    room_id: int | None = None


class TenantUpdate(BaseModel):
    """Schema for updating a tenant.

    Sending ``room_id: null`` explicitly moves the tenant out of its room.
    """

    name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: TenantStatus | None = None
    payment_status: PaymentStatus | None = None
    room_id: int | None = None


class TenantResponse(BaseModel):
    """Schema for tenant response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: UUID
    property_id: int
    room_id: int | None = None
    room_name: str | None = None
    user_id: int | None = None
    name: str
    phone: str | None = None
    email: str
    start_date: date | None = None
    end_date: date | None = None
    status: TenantStatus
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime
