"""Payment schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .models import PaymentStatus


class PaymentCreate(BaseModel):
    """Record a payment.

    ``room_id`` and ``due_date`` default to the tenant's room and lease end;
    ``status`` defaults to paid when ``paid_date`` is given, else pending.
    """

    tenant_id: int
    room_id: int | None = None
    amount: Decimal = Field(..., gt=0)
    paid_date: date | None = None
    due_date: date | None = None
    status: PaymentStatus | None = None
    payment_method: str | None = Field(None, max_length=50)
    notes: str | None = None


class PaymentUpdate(BaseModel):
    amount: Decimal | None = Field(None, gt=0)
    paid_date: date | None = None
    due_date: date | None = None
    status: PaymentStatus | None = None
    payment_method: str | None = Field(None, max_length=50)
    notes: str | None = None


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: UUID
    property_id: int
    tenant_id: int
    tenant_name: str | None = None
    room_id: int | None = None
    room_name: str | None = None
    amount: Decimal
    paid_date: date | None = None
    due_date: date
    status: PaymentStatus
    payment_method: str | None = None
    notes: str | None = None
    billing_key: str | None = None
    reminder_sent_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
