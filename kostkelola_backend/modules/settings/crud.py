"""CRUD operations for user settings."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import UserSettings


async def get_settings_by_user(db: AsyncSession, user_id: int) -> UserSettings | None:
    result = await db.execute(
        select(UserSettings).where(UserSettings.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_settings_for_users(
    db: AsyncSession, user_ids: set[int]
) -> dict[int, UserSettings]:
    """Settings keyed by user id; users without a row are absent."""
    if not user_ids:
        return {}
    result = await db.execute(
        select(UserSettings).where(UserSettings.user_id.in_(user_ids))
    )
    return {row.user_id: row for row in result.scalars().all()}


async def create_default_settings(db: AsyncSession, user_id: int) -> UserSettings:
    user_settings = UserSettings(user_id=user_id)
    db.add(user_settings)
    await db.flush()
    return user_settings
