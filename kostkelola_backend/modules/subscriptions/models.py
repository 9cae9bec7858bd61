"""Subscription plans and user subscriptions."""

import enum
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ...database import Base, IdentityMixin, TimestampMixin


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class SubscriptionPlan(IdentityMixin, TimestampMixin, Base):
    """A sellable plan: caps plus a feature map.

    ``features`` maps feature names to booleans or tier strings, e.g.
    ``{"auto_billing": true, "financial_reports": "advanced"}``.
    """

    __tablename__ = "subscription_plans"

    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False, default=0)
    max_properties: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    max_rooms_per_property: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1
    )
    features: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<SubscriptionPlan(id={self.id}, name={self.name})>"


class Subscription(IdentityMixin, TimestampMixin, Base):
    """A user's subscription to a plan."""

    __tablename__ = "subscriptions"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    plan_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("subscription_plans.id"), nullable=False
    )
    status: Mapped[SubscriptionStatus] = mapped_column(
        Enum(SubscriptionStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=SubscriptionStatus.ACTIVE,
    )
    current_period_start: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    current_period_end: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    cancel_at_period_end: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    plan: Mapped["SubscriptionPlan"] = relationship("SubscriptionPlan", lazy="joined")

    __table_args__ = (Index("ix_subscriptions_user_status", "user_id", "status"),)

    def __repr__(self) -> str:
        return (
            f"<Subscription(id={self.id}, user_id={self.user_id}, "
            f"plan_id={self.plan_id}, status={self.status})>"
        )
