"""Property management schemas for KostKelola."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .models import MarketplaceStatus, RenterGender, RoomStatus

# ----- Property Schemas -----


class PropertyBase(BaseModel):
    """Base property schema."""

    name: str = Field(..., min_length=1, max_length=255)
    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=120)
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    description: str | None = None
    common_amenities: list[str] = Field(default_factory=list)
    parking_amenities: list[str] = Field(default_factory=list)
    common_amenities_photos: list[str] = Field(default_factory=list)
    parking_amenities_photos: list[str] = Field(default_factory=list)
    rules: list[str] = Field(default_factory=list)
    photos: list[str] = Field(default_factory=list)


class PropertyCreate(PropertyBase):
    """Schema for creating a property."""

    pass


class PropertyUpdate(BaseModel):
    """Schema for updating a property."""

    name: str | None = Field(None, min_length=1, max_length=255)
    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=120)
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    description: str | None = None
    common_amenities: list[str] | None = None
    parking_amenities: list[str] | None = None
    common_amenities_photos: list[str] | None = None
    parking_amenities_photos: list[str] | None = None
    rules: list[str] | None = None
    photos: list[str] | None = None


class MarketplaceSettingsUpdate(BaseModel):
    """Owner-side marketplace toggle."""

    marketplace_enabled: bool | None = None
    marketplace_status: MarketplaceStatus | None = None


class PropertyResponse(PropertyBase):
    """Schema for property response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: UUID
    owner_id: int
    email: str | None = None
    marketplace_enabled: bool
    marketplace_status: MarketplaceStatus
    created_at: datetime
    updated_at: datetime


# ----- Room Type Schemas -----


class PricingFields(BaseModel):
    price: Decimal = Field(..., ge=0)
    daily_price: Decimal | None = Field(None, ge=0)
    weekly_price: Decimal | None = Field(None, ge=0)
    yearly_price: Decimal | None = Field(None, ge=0)
    enable_daily_price: bool = False
    enable_weekly_price: bool = False
    enable_yearly_price: bool = False
    room_facilities: list[str] = Field(default_factory=list)
    bathroom_facilities: list[str] = Field(default_factory=list)
    photos: list[str] = Field(default_factory=list)
    max_occupancy: int = Field(default=1, ge=1)


class RoomTypeCreate(PricingFields):
    name: str = Field(..., min_length=1, max_length=120)
    description: str | None = None
    renter_gender: RenterGender = RenterGender.ANY


class RoomTypeUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    description: str | None = None
    renter_gender: RenterGender | None = None
    price: Decimal | None = Field(None, ge=0)
    daily_price: Decimal | None = Field(None, ge=0)
    weekly_price: Decimal | None = Field(None, ge=0)
    yearly_price: Decimal | None = Field(None, ge=0)
    enable_daily_price: bool | None = None
    enable_weekly_price: bool | None = None
    enable_yearly_price: bool | None = None
    room_facilities: list[str] | None = None
    bathroom_facilities: list[str] | None = None
    photos: list[str] | None = None
    max_occupancy: int | None = Field(None, ge=1)


class RoomTypeResponse(RoomTypeCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    property_id: int
    created_at: datetime
    updated_at: datetime


# ----- Room Schemas -----


class RoomCreate(PricingFields):
    name: str = Field(..., min_length=1, max_length=120)
    floor: str | None = Field(None, max_length=50)
    type: str | None = Field(None, max_length=120)
    status: RoomStatus = RoomStatus.VACANT


class RoomUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    floor: str | None = Field(None, max_length=50)
    type: str | None = Field(None, max_length=120)
    status: RoomStatus | None = None
    price: Decimal | None = Field(None, ge=0)
    daily_price: Decimal | None = Field(None, ge=0)
    weekly_price: Decimal | None = Field(None, ge=0)
    yearly_price: Decimal | None = Field(None, ge=0)
    enable_daily_price: bool | None = None
    enable_weekly_price: bool | None = None
    enable_yearly_price: bool | None = None
    room_facilities: list[str] | None = None
    bathroom_facilities: list[str] | None = None
    photos: list[str] | None = None
    max_occupancy: int | None = Field(None, ge=1)


class RoomResponse(RoomCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    property_id: int
    tenant_id: int | None = None
    tenant_name: str | None = None
    created_at: datetime
    updated_at: datetime


class AssignTenantRequest(BaseModel):
    tenant_id: int


# ----- Marketplace Schemas -----


class MarketplaceRoomType(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: Decimal
    daily_price: Decimal | None = None
    weekly_price: Decimal | None = None
    yearly_price: Decimal | None = None
    enable_daily_price: bool
    enable_weekly_price: bool
    enable_yearly_price: bool
    description: str | None = None
    room_facilities: list[str]
    bathroom_facilities: list[str]
    photos: list[str]
    max_occupancy: int
    renter_gender: RenterGender


class MarketplaceProperty(BaseModel):
    """Public listing card; no owner data beyond the contact fields."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str | None = None
    city: str | None = None
    phone: str | None = None
    email: str | None = None
    description: str | None = None
    common_amenities: list[str]
    parking_amenities: list[str]
    common_amenities_photos: list[str]
    parking_amenities_photos: list[str]
    rules: list[str]
    photos: list[str]
    room_types: list[MarketplaceRoomType] = []
    lowest_price: Decimal | None = None
    available_rooms: int = 0


class MarketplaceListing(BaseModel):
    properties: list[MarketplaceProperty]
    cities: list[str]
