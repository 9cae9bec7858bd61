"""Authentication models for KostKelola.

Owners manage properties; tenants get a portal account linked from their
tenant record; support/admin/superadmin staff use the backoffice.
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from ...core.utils import as_utc, utc_now
from ...database import Base, IdentityMixin, TimestampMixin


class RoleSlug(str, enum.Enum):
    """Available user roles."""

    OWNER = "owner"
    TENANT = "tenant"
    SUPPORT = "support"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


BACKOFFICE_ROLES = (RoleSlug.SUPPORT, RoleSlug.ADMIN, RoleSlug.SUPERADMIN)


class User(IdentityMixin, TimestampMixin, Base):
    """Platform user."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role: Mapped[RoleSlug] = mapped_column(
        Enum(RoleSlug, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=RoleSlug.OWNER,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    failed_login_attempts: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    locked_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_backoffice(self) -> bool:
        return self.role in BACKOFFICE_ROLES

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


class RefreshToken(Base):
    """Refresh tokens for JWT authentication. Only the SHA-256 hash is stored."""

    __tablename__ = "refresh_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    token_hash: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now()
    )
    revoked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)

    __table_args__ = (Index("ix_refresh_tokens_user", "user_id"),)

    @property
    def is_expired(self) -> bool:
        """Check if token is expired."""
        return utc_now() > as_utc(self.expires_at)

    @property
    def is_revoked(self) -> bool:
        """Check if token is revoked."""
        return self.revoked_at is not None

    def __repr__(self) -> str:
        return f"<RefreshToken(id={self.id}, user_id={self.user_id})>"
