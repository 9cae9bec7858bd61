"""Authentication module for KostKelola."""

from .dependencies import (
    AdminUser,
    BackofficeUser,
    CurrentUser,
    get_current_user,
    require_role,
    user_from_token,
)
from .models import BACKOFFICE_ROLES, RefreshToken, RoleSlug, User
from .schemas import AuthenticatedUser

__all__ = [
    # Models
    "User",
    "RoleSlug",
    "BACKOFFICE_ROLES",
    "RefreshToken",
    # Dependencies
    "get_current_user",
    "require_role",
    "user_from_token",
    "CurrentUser",
    "BackofficeUser",
    "AdminUser",
    # Schemas
    "AuthenticatedUser",
]
