"""User settings API routes."""

from fastapi import APIRouter

from ...database import DB
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse
from . import services
from .schemas import SettingsResponse, SettingsUpdate

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=BaseResponse[SettingsResponse])
async def get_settings(current_user: CurrentUser, db: DB):
    """Get the caller's settings, created with defaults on first read."""
    user_settings = await services.get_or_create_settings(db, current_user.id)
    return BaseResponse(success=True, data=SettingsResponse.model_validate(user_settings))


@router.put("", response_model=BaseResponse[SettingsResponse])
async def update_settings(data: SettingsUpdate, current_user: CurrentUser, db: DB):
    """Update the caller's settings."""
    user_settings = await services.update_settings(db, current_user.id, data)
    return BaseResponse(
        success=True,
        message="Settings saved",
        data=SettingsResponse.model_validate(user_settings),
    )
