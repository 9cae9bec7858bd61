"""
Database configuration for KostKelola.

Every owner-facing row hangs off a property, and every property belongs to
exactly one owner. Ownership is checked in the services, not here.
"""

import logging
from datetime import datetime
from typing import Annotated
from uuid import UUID, uuid4

from fastapi import Depends
from sqlalchemy import DateTime, Integer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Mapped, declarative_base, mapped_column
from sqlalchemy.sql import func

from .config import settings
from .core.database_types import UUID as UUID_DB
from .core.utils import utc_now

logger = logging.getLogger(__name__)

engine_kwargs = {"echo": settings.database_echo, "future": True}
if not settings.database_url.startswith("sqlite"):
    engine_kwargs.update(pool_pre_ping=True, pool_recycle=3600)

engine = create_async_engine(settings.database_url, **engine_kwargs)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

# Base class
Base = declarative_base()


class TimestampMixin:
    """Mixin to add created and updated timestamps to models."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
    )

    # Python-side defaults keep the values loaded on the instance after flush
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
    )


class IdentityMixin:
    """Integer primary key plus a UUID for external references."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[UUID] = mapped_column(
        UUID_DB(), nullable=False, unique=True, default=uuid4
    )


async def get_db() -> AsyncSession:
    """Dependency to get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


# Type alias for dependency injection
DB = Annotated[AsyncSession, Depends(get_db)]


def import_models() -> None:
    """Import every model module so Base.metadata knows all tables."""
    from .modules.auth import models as auth_models  # noqa: F401
    from .modules.chat import models as chat_models  # noqa: F401
    from .modules.maintenance import models as maintenance_models  # noqa: F401
    from .modules.notifications import models as notification_models  # noqa: F401
    from .modules.payments import models as payment_models  # noqa: F401
    from .modules.property_management import models as property_models  # noqa: F401
    from .modules.settings import models as settings_models  # noqa: F401
    from .modules.subscriptions import models as subscription_models  # noqa: F401
    from .modules.tenant_management import models as tenant_models  # noqa: F401


async def init_db():
    """Initialize database tables."""
    import_models()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")
