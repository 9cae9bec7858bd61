"""CRUD operations for chat module."""

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.base_crud import BaseCRUD
from ...core.utils import utc_now
from .models import ChatMessage
from .schemas import MessageCreate


class ChatMessageCRUD(BaseCRUD[ChatMessage, MessageCreate, MessageCreate]):
    async def get_conversation(
        self, db: AsyncSession, user_id: int, partner_id: int
    ) -> list[ChatMessage]:
        """Messages between two users, oldest first."""
        result = await db.execute(
            select(ChatMessage)
            .where(
                or_(
                    and_(
                        ChatMessage.sender_id == user_id,
                        ChatMessage.receiver_id == partner_id,
                    ),
                    and_(
                        ChatMessage.sender_id == partner_id,
                        ChatMessage.receiver_id == user_id,
                    ),
                )
            )
            .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
        )
        return list(result.scalars().all())

    async def get_involving(self, db: AsyncSession, user_id: int) -> list[ChatMessage]:
        """Every message the user sent or received, newest first."""
        result = await db.execute(
            select(ChatMessage)
            .where(
                or_(ChatMessage.sender_id == user_id, ChatMessage.receiver_id == user_id)
            )
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        )
        return list(result.scalars().all())

    async def get_unread_from(
        self, db: AsyncSession, user_id: int, partner_id: int
    ) -> list[ChatMessage]:
        result = await db.execute(
            select(ChatMessage).where(
                ChatMessage.sender_id == partner_id,
                ChatMessage.receiver_id == user_id,
                ChatMessage.read.is_(False),
            )
        )
        return list(result.scalars().all())

    async def mark_read_from(self, db: AsyncSession, user_id: int, partner_id: int) -> int:
        result = await db.execute(
            update(ChatMessage)
            .where(
                ChatMessage.sender_id == partner_id,
                ChatMessage.receiver_id == user_id,
                ChatMessage.read.is_(False),
            )
            .values(read=True, updated_at=utc_now())
        )
        return result.rowcount or 0


chat_crud = ChatMessageCRUD(ChatMessage)
