"""Authentication schemas for KostKelola."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .models import RoleSlug

# ----- User Schemas -----


class UserBase(BaseModel):
    """Base user schema."""

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)


class RegisterRequest(UserBase):
    """Self sign-up. Only owner and tenant accounts can be self-registered."""

    password: str = Field(..., min_length=8, max_length=128)
    role: RoleSlug = RoleSlug.OWNER


class UserResponse(UserBase):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    uuid: UUID
    role: RoleSlug
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime


# ----- Auth Schemas -----


class LoginRequest(BaseModel):
    """Schema for login request."""

    email: EmailStr
    password: str
    remember_me: bool = False


class TokenResponse(BaseModel):
    """Schema for token response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class RefreshTokenRequest(BaseModel):
    """Schema for refresh token request."""

    refresh_token: str


class ChangePasswordRequest(BaseModel):
    """Schema for password change request."""

    current_password: str
    new_password: str = Field(..., min_length=8, max_length=128)


class AuthenticatedUser(BaseModel):
    """Authenticated user context for request handling."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: str = ""
    role_slug: str
    is_active: bool = True

    @property
    def is_backoffice(self) -> bool:
        return self.role_slug in {
            RoleSlug.SUPPORT.value,
            RoleSlug.ADMIN.value,
            RoleSlug.SUPERADMIN.value,
        }
