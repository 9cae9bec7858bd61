"""Authentication business logic services."""

from datetime import timedelta

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import settings
from ...core.exceptions import (
    AuthenticationError,
    NotFoundError,
    ResourceAlreadyExistsError,
    ValidationError,
)
from ...core.logging import get_logger
from ...core.utils import as_utc, utc_now
from . import crud
from .jwt_service import (
    create_access_token,
    create_refresh_token,
    get_token_expiry_seconds,
    hash_refresh_token,
)
from .models import BACKOFFICE_ROLES, RoleSlug, User
from .password_service import verify_password
from .schemas import RegisterRequest, TokenResponse

logger = get_logger(__name__)


async def _issue_tokens(
    db: AsyncSession,
    user: User,
    remember_me: bool = False,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> TokenResponse:
    access_token = create_access_token(
        user_id=user.id,
        email=user.email,
        role_slug=user.role.value,
        full_name=user.full_name,
    )
    refresh_token, refresh_expires = create_refresh_token(remember_me)
    await crud.create_refresh_token(
        db=db,
        user=user,
        token=refresh_token,
        expires_at=refresh_expires,
        user_agent=user_agent,
        ip_address=ip_address,
    )
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        expires_in=get_token_expiry_seconds(),
    )


async def register_user(
    db: AsyncSession,
    data: RegisterRequest,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> tuple[User, TokenResponse]:
    """Create an owner or tenant account and sign it in.

    A tenant account is linked to every tenant record that already carries the
    same email, which is how the tenant portal finds its rooms and payments.

    Raises:
        ValidationError: If a staff role is requested
        ResourceAlreadyExistsError: If the email is taken
    """
    if data.role in BACKOFFICE_ROLES:
        raise ValidationError("Staff accounts cannot be self-registered", field="role")

    if await crud.get_user_by_email(db, data.email):
        raise ResourceAlreadyExistsError("User", data.email)

    user = await crud.create_user(
        db,
        email=data.email,
        password=data.password,
        full_name=data.full_name,
        phone=data.phone,
        role=data.role,
    )

    if user.role == RoleSlug.TENANT:
        from ..tenant_management.models import Tenant

        await db.execute(
            update(Tenant)
            .where(func.lower(Tenant.email) == user.email, Tenant.user_id.is_(None))
            .values(user_id=user.id)
        )

    tokens = await _issue_tokens(db, user, user_agent=user_agent, ip_address=ip_address)
    await db.commit()

    logger.info("User registered", extra={"user_id": user.id, "role": user.role.value})
    return user, tokens


async def authenticate_user(
    db: AsyncSession,
    email: str,
    password: str,
    remember_me: bool = False,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> tuple[User, TokenResponse]:
    """Authenticate user and return tokens.

    Args:
        db: Database session
        email: User's email
        password: User's password
        remember_me: Whether to extend refresh token expiry
        user_agent: Client user agent string
        ip_address: Client IP address

    Returns:
        Tuple of (User, TokenResponse)

    Raises:
        AuthenticationError: If authentication fails
    """
    user = await crud.get_user_by_email(db, email)
    if not user:
        raise AuthenticationError("Invalid email or password")

    locked_until = as_utc(user.locked_until)
    if locked_until and locked_until > utc_now():
        remaining = (locked_until - utc_now()).seconds // 60
        raise AuthenticationError(
            f"Account is locked. Try again in {remaining + 1} minutes."
        )

    if not user.is_active:
        raise AuthenticationError("Account is disabled")

    if not verify_password(password, user.password_hash):
        await crud.increment_failed_login(db, user)

        if user.failed_login_attempts >= settings.max_login_attempts:
            lock_until = utc_now() + timedelta(
                minutes=settings.lockout_duration_minutes
            )
            await crud.lock_user(db, user, lock_until)
            await db.commit()
            logger.warning("Account locked", extra={"user_id": user.id})
            raise AuthenticationError(
                f"Account locked due to too many failed attempts. "
                f"Try again in {settings.lockout_duration_minutes} minutes."
            )

        await db.commit()
        remaining_attempts = settings.max_login_attempts - user.failed_login_attempts
        raise AuthenticationError(
            f"Invalid email or password. {remaining_attempts} attempts remaining."
        )

    await crud.update_user_last_login(db, user)
    tokens = await _issue_tokens(
        db, user, remember_me=remember_me, user_agent=user_agent, ip_address=ip_address
    )
    await db.commit()

    return user, tokens


async def refresh_access_token(
    db: AsyncSession,
    refresh_token: str,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> TokenResponse:
    """Rotate a refresh token and mint a new access token.

    Raises:
        AuthenticationError: If refresh token is invalid or expired
    """
    token_hash = hash_refresh_token(refresh_token)
    stored_token = await crud.get_refresh_token_by_hash(db, token_hash)

    if not stored_token:
        raise AuthenticationError("Invalid refresh token")

    if stored_token.is_revoked:
        raise AuthenticationError("Refresh token has been revoked")

    if stored_token.is_expired:
        raise AuthenticationError("Refresh token has expired")

    user = await crud.get_user_by_id(db, stored_token.user_id)
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    await crud.revoke_refresh_token(db, stored_token)
    tokens = await _issue_tokens(db, user, user_agent=user_agent, ip_address=ip_address)
    await db.commit()

    return tokens


async def logout_user(db: AsyncSession, user_id: int) -> int:
    """Logout user by revoking all their refresh tokens.

    Returns:
        Number of tokens revoked
    """
    count = await crud.revoke_all_user_tokens(db, user_id)
    await db.commit()
    return count


async def get_user(db: AsyncSession, user_id: int) -> User:
    """Load a user or raise NotFoundError."""
    user = await crud.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


async def change_password(
    db: AsyncSession,
    user_id: int,
    current_password: str,
    new_password: str,
) -> None:
    """Change user's password and revoke every open session.

    Raises:
        NotFoundError: If user not found
        ValidationError: If current password is incorrect
    """
    user = await get_user(db, user_id)

    if not verify_password(current_password, user.password_hash):
        raise ValidationError("Current password is incorrect")

    await crud.update_user_password(db, user, new_password)
    await crud.revoke_all_user_tokens(db, user_id)

    await db.commit()
