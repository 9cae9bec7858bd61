"""Auto-billing run summary."""

from datetime import date

from pydantic import BaseModel, Field


class BilledTenant(BaseModel):
    tenant_id: int
    email: str | None = None
    due_date: date


class BillingError(BaseModel):
    tenant_id: int
    error: str


class BillingSummary(BaseModel):
    success: bool = True
    processed: int = 0
    tenants: list[BilledTenant] = Field(default_factory=list)
    errors: list[BillingError] = Field(default_factory=list)
    message: str = ""
