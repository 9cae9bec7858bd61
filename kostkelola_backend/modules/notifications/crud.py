"""CRUD operations for notifications module."""

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from ...core.utils import utc_now
from .models import Notification, NotificationStatus
from .schemas import BroadcastCreate, NotificationCreate


class NotificationCRUD(BaseCRUD[Notification, NotificationCreate, BroadcastCreate]):
    search_fields = ["title", "message"]

    @staticmethod
    def _visible_to(user_id: int):
        return or_(
            Notification.target_user_id == user_id,
            Notification.target_user_id.is_(None),
        )

    async def get_for_user(
        self,
        db: AsyncSession,
        user_id: int,
        status: NotificationStatus | None = None,
    ) -> list[Notification]:
        """The user's own notifications plus broadcasts, newest first."""
        query = select(Notification).where(self._visible_to(user_id))
        if status is not None:
            query = query.where(Notification.status == status)
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
        result = await db.execute(query)
        return list(result.scalars().all())

    async def count_unread(self, db: AsyncSession, user_id: int) -> int:
        result = await db.execute(
            select(func.count(Notification.id)).where(
                self._visible_to(user_id),
                Notification.status == NotificationStatus.UNREAD,
            )
        )
        return result.scalar() or 0

    async def mark_all_read(self, db: AsyncSession, user_id: int) -> int:
        result = await db.execute(
            update(Notification)
            .where(
                Notification.target_user_id == user_id,
                Notification.status == NotificationStatus.UNREAD,
            )
            .values(status=NotificationStatus.READ, updated_at=utc_now())
        )
        return result.rowcount or 0


notification_crud = NotificationCRUD(Notification)
