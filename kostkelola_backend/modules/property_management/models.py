"""Property management models for KostKelola.

A property (a kost) owns its room types and rooms. A room refers to its
type by **name**, so renaming a type has to be cascaded to rooms by hand.
"""

import enum
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from ...core.database_types import StringList
from ...database import Base, IdentityMixin, TimestampMixin


def _enum(enum_cls: type[enum.Enum]) -> Enum:
    """Store enum values (not member names) so the DB matches the API."""
    return Enum(enum_cls, values_callable=lambda e: [m.value for m in e])


class MarketplaceStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class RoomStatus(str, enum.Enum):
    VACANT = "vacant"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"


class RenterGender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    ANY = "any"


class Property(IdentityMixin, TimestampMixin, Base):
    """A boarding house owned by one user."""

    __tablename__ = "properties"

    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Marketplace listing
    marketplace_enabled: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    marketplace_status: Mapped[MarketplaceStatus] = mapped_column(
        _enum(MarketplaceStatus), default=MarketplaceStatus.DRAFT, nullable=False
    )
    common_amenities: Mapped[list[str]] = mapped_column(StringList(), default=list)
    parking_amenities: Mapped[list[str]] = mapped_column(StringList(), default=list)
    common_amenities_photos: Mapped[list[str]] = mapped_column(
        StringList(), default=list
    )
    parking_amenities_photos: Mapped[list[str]] = mapped_column(
        StringList(), default=list
    )
    rules: Mapped[list[str]] = mapped_column(StringList(), default=list)
    photos: Mapped[list[str]] = mapped_column(StringList(), default=list)

    __table_args__ = (Index("ix_properties_owner", "owner_id"),)

    @property
    def is_listed(self) -> bool:
        return (
            self.marketplace_enabled
            and self.marketplace_status == MarketplaceStatus.PUBLISHED
        )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name})>"


class PricedRoomMixin:
    """Monthly price plus optional daily/weekly/yearly prices with toggles."""

    price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=0)
    daily_price: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    weekly_price: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    yearly_price: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    enable_daily_price: Mapped[bool] = mapped_column(Boolean, default=False)
    enable_weekly_price: Mapped[bool] = mapped_column(Boolean, default=False)
    enable_yearly_price: Mapped[bool] = mapped_column(Boolean, default=False)
    room_facilities: Mapped[list[str]] = mapped_column(StringList(), default=list)
    bathroom_facilities: Mapped[list[str]] = mapped_column(StringList(), default=list)
    photos: Mapped[list[str]] = mapped_column(StringList(), default=list)
    max_occupancy: Mapped[int] = mapped_column(Integer, default=1, nullable=False)


class RoomType(IdentityMixin, PricedRoomMixin, TimestampMixin, Base):
    """A named template for rooms of a property."""

    __tablename__ = "room_types"

    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    renter_gender: Mapped[RenterGender] = mapped_column(
        _enum(RenterGender), default=RenterGender.ANY, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("property_id", "name", name="uq_room_types_property_name"),
    )

    def __repr__(self) -> str:
        return f"<RoomType(id={self.id}, name={self.name})>"


class Room(IdentityMixin, PricedRoomMixin, TimestampMixin, Base):
    """A rentable room.

    ``status == occupied`` holds exactly when an active tenant's ``room_id``
    points here; ``tenant_id`` mirrors that tenant.
    """

    __tablename__ = "rooms"

    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    floor: Mapped[str | None] = mapped_column(String(50), nullable=True)
    type: Mapped[str | None] = mapped_column(String(120), nullable=True)
    status: Mapped[RoomStatus] = mapped_column(
        _enum(RoomStatus), default=RoomStatus.VACANT, nullable=False
    )
    tenant_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey(
            "tenants.id",
            ondelete="SET NULL",
            use_alter=True,
            name="fk_rooms_tenant_id",
        ),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_rooms_property", "property_id"),
        Index("ix_rooms_property_type", "property_id", "type"),
    )

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, name={self.name}, status={self.status})>"
