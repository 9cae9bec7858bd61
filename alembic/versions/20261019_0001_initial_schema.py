"""Initial schema for KostKelola

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for:
- Auth (users, refresh_tokens)
- Subscriptions (subscription_plans, subscriptions) and user_settings
- Property Management (properties, room_types, rooms)
- Tenants, payments and maintenance_requests
- Notifications and chat_messages
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _identity() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("uuid", sa.String(36), nullable=False),
    ]


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _room_pricing() -> list[sa.Column]:
    return [
        sa.Column("price", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("daily_price", sa.Numeric(15, 2), nullable=True),
        sa.Column("weekly_price", sa.Numeric(15, 2), nullable=True),
        sa.Column("yearly_price", sa.Numeric(15, 2), nullable=True),
        sa.Column("enable_daily_price", sa.Boolean(), nullable=True),
        sa.Column("enable_weekly_price", sa.Boolean(), nullable=True),
        sa.Column("enable_yearly_price", sa.Boolean(), nullable=True),
        sa.Column("room_facilities", sa.JSON(), nullable=True),
        sa.Column("bathroom_facilities", sa.JSON(), nullable=True),
        sa.Column("photos", sa.JSON(), nullable=True),
        sa.Column("max_occupancy", sa.Integer(), nullable=False, server_default="1"),
    ]


PAYMENT_STATUSES = ("paid", "pending", "overdue")


def upgrade() -> None:
    """Create all tables."""

    # =====================
    # USERS AND PLANS
    # =====================

    op.create_table(
        "users",
        *_identity(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column(
            "role",
            sa.Enum("owner", "tenant", "support", "admin", "superadmin", name="roleslug"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("failed_login_attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("locked_until", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("token_hash", sa.String(128), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("user_agent", sa.String(500), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token_hash"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_refresh_tokens_user", "refresh_tokens", ["user_id"])

    op.create_table(
        "user_settings",
        *_identity(),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("email_notifications", sa.Boolean(), nullable=True),
        sa.Column("payment_reminders", sa.Boolean(), nullable=True),
        sa.Column("maintenance_updates", sa.Boolean(), nullable=True),
        sa.Column("new_tenants", sa.Boolean(), nullable=True),
        sa.Column("currency", sa.String(10), nullable=True),
        sa.Column("date_format", sa.String(20), nullable=True),
        sa.Column("payment_reminder_days", sa.Integer(), nullable=True),
        sa.Column("session_timeout", sa.Integer(), nullable=True),
        sa.Column("login_notifications", sa.Boolean(), nullable=True),
        sa.Column("two_factor_enabled", sa.Boolean(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.UniqueConstraint("user_id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )

    op.create_table(
        "subscription_plans",
        *_identity(),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("max_properties", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("max_rooms_per_property", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("features", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "subscriptions",
        *_identity(),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("plan_id", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("active", "cancelled", "expired", name="subscriptionstatus"),
            nullable=False,
        ),
        sa.Column("current_period_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("current_period_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("cancel_at_period_end", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["plan_id"], ["subscription_plans.id"]),
    )
    op.create_index("ix_subscriptions_user_status", "subscriptions", ["user_id", "status"])

    # =====================
    # PROPERTIES AND ROOMS
    # =====================

    op.create_table(
        "properties",
        *_identity(),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("marketplace_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "marketplace_status",
            sa.Enum("draft", "published", name="marketplacestatus"),
            nullable=False,
        ),
        sa.Column("common_amenities", sa.JSON(), nullable=True),
        sa.Column("parking_amenities", sa.JSON(), nullable=True),
        sa.Column("common_amenities_photos", sa.JSON(), nullable=True),
        sa.Column("parking_amenities_photos", sa.JSON(), nullable=True),
        sa.Column("rules", sa.JSON(), nullable=True),
        sa.Column("photos", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_properties_owner", "properties", ["owner_id"])

    op.create_table(
        "room_types",
        *_identity(),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "renter_gender",
            sa.Enum("male", "female", "any", name="rentergender"),
            nullable=False,
        ),
        *_room_pricing(),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.UniqueConstraint("property_id", "name", name="uq_room_types_property_name"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
    )

    # rooms.tenant_id gets its foreign key after tenants exists
    op.create_table(
        "rooms",
        *_identity(),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("floor", sa.String(50), nullable=True),
        sa.Column("type", sa.String(120), nullable=True),
        sa.Column(
            "status",
            sa.Enum("vacant", "occupied", "maintenance", name="roomstatus"),
            nullable=False,
        ),
        sa.Column("tenant_id", sa.Integer(), nullable=True),
        *_room_pricing(),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_rooms_property", "rooms", ["property_id"])
    op.create_index("ix_rooms_property_type", "rooms", ["property_id", "type"])

    # =====================
    # TENANTS, PAYMENTS, MAINTENANCE
    # =====================

    op.create_table(
        "tenants",
        *_identity(),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("room_id", sa.Integer(), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column(
            "status",
            sa.Enum("active", "inactive", name="tenantstatus"),
            nullable=False,
        ),
        sa.Column(
            "payment_status",
            sa.Enum(*PAYMENT_STATUSES, name="tenant_payment_status"),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.UniqueConstraint("property_id", "email", name="uq_tenants_property_email"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_tenants_property_status", "tenants", ["property_id", "status"])
    op.create_index("ix_tenants_room", "tenants", ["room_id"])

    op.create_foreign_key(
        "fk_rooms_tenant_id", "rooms", "tenants", ["tenant_id"], ["id"], ondelete="SET NULL"
    )

    op.create_table(
        "payments",
        *_identity(),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("room_id", sa.Integer(), nullable=True),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("paid_date", sa.Date(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*PAYMENT_STATUSES, name="paymentstatus"),
            nullable=False,
        ),
        sa.Column("payment_method", sa.String(50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("billing_key", sa.String(64), nullable=True),
        sa.Column("reminder_sent_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.UniqueConstraint("billing_key"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_payments_property_status", "payments", ["property_id", "status"])
    op.create_index("ix_payments_tenant", "payments", ["tenant_id"])

    op.create_table(
        "maintenance_requests",
        *_identity(),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("room_id", sa.Integer(), nullable=True),
        sa.Column("tenant_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("reported_date", sa.Date(), nullable=False),
        sa.Column(
            "priority",
            sa.Enum("low", "medium", "high", name="maintenancepriority"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("pending", "in-progress", "completed", name="maintenancestatus"),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenants.id"], ondelete="SET NULL"),
    )
    op.create_index(
        "ix_maintenance_property_status", "maintenance_requests", ["property_id", "status"]
    )

    # =====================
    # MESSAGING
    # =====================

    op.create_table(
        "notifications",
        *_identity(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "type",
            sa.Enum("system", "user", "property", "payment", name="notificationtype"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum("unread", "read", name="notificationstatus"),
            nullable=False,
        ),
        sa.Column("target_user_id", sa.Integer(), nullable=True),
        sa.Column("target_property_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.ForeignKeyConstraint(["target_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["target_property_id"], ["properties.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_notifications_target_user_id", "notifications", ["target_user_id"])
    op.create_index(
        "ix_notifications_target_status", "notifications", ["target_user_id", "status"]
    )

    op.create_table(
        "chat_messages",
        *_identity(),
        sa.Column("sender_id", sa.Integer(), nullable=False),
        sa.Column("receiver_id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("uuid"),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["receiver_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_chat_messages_sender_receiver", "chat_messages", ["sender_id", "receiver_id"]
    )
    op.create_index("ix_chat_messages_receiver_read", "chat_messages", ["receiver_id", "read"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("chat_messages")
    op.drop_table("notifications")
    op.drop_table("maintenance_requests")
    op.drop_table("payments")
    op.drop_constraint("fk_rooms_tenant_id", "rooms", type_="foreignkey")
    op.drop_table("tenants")
    op.drop_table("rooms")
    op.drop_table("room_types")
    op.drop_table("properties")
    op.drop_table("subscriptions")
    op.drop_table("subscription_plans")
    op.drop_table("user_settings")
    op.drop_table("refresh_tokens")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_name in (
        "notificationstatus",
        "notificationtype",
        "maintenancestatus",
        "maintenancepriority",
        "paymentstatus",
        "tenant_payment_status",
        "tenantstatus",
        "roomstatus",
        "rentergender",
        "marketplacestatus",
        "subscriptionstatus",
        "roleslug",
    ):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
