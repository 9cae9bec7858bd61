"""Chat message models."""

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from ...database import Base, IdentityMixin, TimestampMixin


class ChatMessage(IdentityMixin, TimestampMixin, Base):
    __tablename__ = "chat_messages"

    sender_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    receiver_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("ix_chat_messages_sender_receiver", "sender_id", "receiver_id"),
        Index("ix_chat_messages_receiver_read", "receiver_id", "read"),
    )

    def __repr__(self) -> str:
        return f"<ChatMessage(id={self.id}, sender_id={self.sender_id})>"
