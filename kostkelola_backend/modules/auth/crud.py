"""CRUD operations for authentication module."""

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.utils import utc_now
from .jwt_service import hash_refresh_token
from .models import RefreshToken, RoleSlug, User
from .password_service import hash_password

# ----- User CRUD -----


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Get a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Get a user by email, case-insensitively."""
    result = await db.execute(
        select(User).where(func.lower(User.email) == email.lower())
    )
    return result.scalar_one_or_none()


async def get_users(
    db: AsyncSession,
    search: str | None = None,
    role: RoleSlug | None = None,
) -> list[User]:
    """List users, newest first."""
    query = select(User)
    if search:
        pattern = f"%{search}%"
        query = query.where(User.email.ilike(pattern) | User.full_name.ilike(pattern))
    if role is not None:
        query = query.where(User.role == role)
    result = await db.execute(query.order_by(User.created_at.desc(), User.id.desc()))
    return list(result.scalars().all())


async def lock_user_row(db: AsyncSession, user_id: int) -> User | None:
    """Load a user with ``SELECT ... FOR UPDATE`` (no-op lock on SQLite)."""
    result = await db.execute(
        select(User).where(User.id == user_id).with_for_update()
    )
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    email: str,
    password: str,
    full_name: str,
    phone: str | None = None,
    role: RoleSlug = RoleSlug.OWNER,
) -> User:
    """Create a new user."""
    user = User(
        email=email.lower(),
        password_hash=hash_password(password),
        full_name=full_name,
        phone=phone,
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.flush()
    return user


async def update_user_last_login(db: AsyncSession, user: User) -> None:
    """Update user's last login timestamp."""
    user.last_login = utc_now()
    user.failed_login_attempts = 0
    user.locked_until = None
    await db.flush()


async def increment_failed_login(db: AsyncSession, user: User) -> None:
    """Increment failed login attempts."""
    user.failed_login_attempts += 1
    await db.flush()


async def lock_user(db: AsyncSession, user: User, until: datetime) -> None:
    """Lock user until specified time."""
    user.locked_until = until
    await db.flush()


async def update_user_password(db: AsyncSession, user: User, new_password: str) -> None:
    """Update user's password."""
    user.password_hash = hash_password(new_password)
    await db.flush()


# ----- Refresh Token CRUD -----


async def create_refresh_token(
    db: AsyncSession,
    user: User,
    token: str,
    expires_at: datetime,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> RefreshToken:
    """Create a new refresh token."""
    refresh_token = RefreshToken(
        user_id=user.id,
        token_hash=hash_refresh_token(token),
        expires_at=expires_at,
        user_agent=user_agent,
        ip_address=ip_address,
    )
    db.add(refresh_token)
    await db.flush()
    return refresh_token


async def get_refresh_token_by_hash(
    db: AsyncSession, token_hash: str
) -> RefreshToken | None:
    """Get a refresh token by its hash."""
    result = await db.execute(
        select(RefreshToken).where(RefreshToken.token_hash == token_hash)
    )
    return result.scalar_one_or_none()


async def revoke_refresh_token(db: AsyncSession, token: RefreshToken) -> None:
    """Revoke a refresh token."""
    token.revoked_at = utc_now()
    await db.flush()


async def revoke_all_user_tokens(db: AsyncSession, user_id: int) -> int:
    """Revoke all refresh tokens for a user. Returns count of revoked tokens."""
    result = await db.execute(
        update(RefreshToken)
        .where(RefreshToken.user_id == user_id, RefreshToken.revoked_at.is_(None))
        .values(revoked_at=utc_now())
    )
    return result.rowcount or 0
