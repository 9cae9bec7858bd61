"""Maintenance request models."""

import enum
from datetime import date

from sqlalchemy import Date, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ...database import Base, IdentityMixin, TimestampMixin


class MaintenancePriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MaintenanceStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class MaintenanceRequest(IdentityMixin, TimestampMixin, Base):
    """A reported problem in a room."""

    __tablename__ = "maintenance_requests"

    property_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
    )
    room_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("rooms.id", ondelete="SET NULL"), nullable=True
    )
    tenant_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    reported_date: Mapped[date] = mapped_column(Date, nullable=False)
    priority: Mapped[MaintenancePriority] = mapped_column(
        Enum(MaintenancePriority, values_callable=lambda e: [m.value for m in e]),
        default=MaintenancePriority.MEDIUM,
        nullable=False,
    )
    status: Mapped[MaintenanceStatus] = mapped_column(
        Enum(MaintenanceStatus, values_callable=lambda e: [m.value for m in e]),
        default=MaintenanceStatus.PENDING,
        nullable=False,
    )

    __table_args__ = (Index("ix_maintenance_property_status", "property_id", "status"),)

    def __repr__(self) -> str:
        return f"<MaintenanceRequest(id={self.id}, title={self.title})>"
