"""Subscription schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .models import SubscriptionStatus


class PlanBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: str | None = None
    price: Decimal = Field(default=Decimal("0"), ge=0)
    max_properties: int = Field(default=1, ge=0)
    max_rooms_per_property: int = Field(default=1, ge=0)
    features: dict[str, bool | str | None] = Field(default_factory=dict)


class PlanCreate(PlanBase):
    """Schema for creating a plan."""

    pass


class PlanUpdate(BaseModel):
    """Schema for updating a plan."""

    name: str | None = Field(None, min_length=1, max_length=120)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0)
    max_properties: int | None = Field(None, ge=0)
    max_rooms_per_property: int | None = Field(None, ge=0)
    features: dict[str, bool | str | None] | None = None
    is_active: bool | None = None


class PlanResponse(PlanBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    is_active: bool
    created_at: datetime


class SubscriptionAssign(BaseModel):
    """Backoffice request to put a user on a plan."""

    plan_id: int
    period_months: int = Field(default=1, ge=1, le=36)


class SubscriptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    plan_id: int
    status: SubscriptionStatus
    current_period_start: datetime
    current_period_end: datetime
    cancel_at_period_end: bool
    plan: PlanResponse | None = None


class FeaturesResponse(BaseModel):
    features: dict[str, Any]
    plan_name: str | None = None
    error: str | None = None


class PropertyUsage(BaseModel):
    property_id: int
    name: str
    rooms: int
    can_add_room: bool


class LimitsResponse(BaseModel):
    max_properties: int
    max_rooms_per_property: int
    property_count: int
    can_add_property: bool
    properties: list[PropertyUsage] = []
    error: str | None = None
