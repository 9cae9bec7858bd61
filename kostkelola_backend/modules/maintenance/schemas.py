"""Maintenance request schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .models import MaintenancePriority, MaintenanceStatus


class MaintenanceCreate(BaseModel):
    room_id: int
    tenant_id: int | None = None
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    reported_date: date | None = None
    priority: MaintenancePriority = MaintenancePriority.MEDIUM
    status: MaintenanceStatus = MaintenanceStatus.PENDING


class MaintenanceUpdate(BaseModel):
    room_id: int | None = None
    tenant_id: int | None = None
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    reported_date: date | None = None
    priority: MaintenancePriority | None = None
    status: MaintenanceStatus | None = None


class MaintenanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: UUID
    property_id: int
    room_id: int | None = None
    room_name: str | None = None
    tenant_id: int | None = None
    tenant_name: str | None = None
    title: str
    description: str | None = None
    reported_date: date
    priority: MaintenancePriority
    status: MaintenanceStatus
    created_at: datetime
    updated_at: datetime
