"""User settings services."""

from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import utc_now
from . import crud
from .models import UserSettings
from .schemas import SettingsUpdate


async def get_or_create_settings(db: AsyncSession, user_id: int) -> UserSettings:
    """Return the user's settings, creating the default row on first access."""
    user_settings = await crud.get_settings_by_user(db, user_id)
    if user_settings is None:
        user_settings = await crud.create_default_settings(db, user_id)
        await db.commit()
        await db.refresh(user_settings)
    return user_settings


async def update_settings(
    db: AsyncSession, user_id: int, data: SettingsUpdate
) -> UserSettings:
    user_settings = await get_or_create_settings(db, user_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user_settings, field, value)
    user_settings.updated_at = utc_now()
    await db.commit()
    return user_settings
