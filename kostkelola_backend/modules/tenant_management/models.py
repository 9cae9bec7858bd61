"""Tenant models for KostKelola."""

import enum
from datetime import date

from sqlalchemy import Date, Enum, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ...database import Base, IdentityMixin, TimestampMixin
from ..payments.models import PaymentStatus


class TenantStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Tenant(IdentityMixin, TimestampMixin, Base):
    """A person renting (or who rented) a room of a property."""

    __tablename__ = "tenants"

    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    room_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("rooms.id", ondelete="SET NULL"), nullable=True
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[TenantStatus] = mapped_column(
        Enum(TenantStatus, values_callable=lambda e: [m.value for m in e]),
        default=TenantStatus.ACTIVE,
        nullable=False,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(
            PaymentStatus,
            name="tenant_payment_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        default=PaymentStatus.PENDING,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("property_id", "email", name="uq_tenants_property_email"),
        Index("ix_tenants_property_status", "property_id", "status"),
        Index("ix_tenants_room", "room_id"),
    )

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, name={self.name}, status={self.status})>"
