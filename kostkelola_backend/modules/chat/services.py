"""Chat business logic services."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import NotFoundError, ValidationError
from ..auth import crud as auth_crud
from ..auth.models import User
from ..realtime import ChangeEventType, ChangeFeedBroker, Channel
from .crud import chat_crud
from .models import ChatMessage
from .schemas import ChatPartner, MessageCreate, MessageResponse


async def _publish(
    broker: ChangeFeedBroker | None, event: ChangeEventType, message: ChatMessage
) -> None:
    if broker is not None:
        await broker.publish_row(
            Channel.CHAT,
            event,
            message,
            audience=[message.sender_id, message.receiver_id],
        )


async def send_message(
    db: AsyncSession,
    sender_id: int,
    data: MessageCreate,
    broker: ChangeFeedBroker | None = None,
) -> ChatMessage:
    if data.receiver_id == sender_id:
        raise ValidationError("Cannot send a message to yourself", field="receiver_id")
    receiver = await auth_crud.get_user_by_id(db, data.receiver_id)
    if receiver is None or not receiver.is_active:
        raise NotFoundError(f"User with ID {data.receiver_id} not found")

    message = await chat_crud.create(
        db, data.model_dump(), sender_id=sender_id, read=False
    )
    await db.commit()
    await _publish(broker, ChangeEventType.INSERT, message)
    return message


async def get_conversation(
    db: AsyncSession, user_id: int, partner_id: int
) -> list[ChatMessage]:
    return await chat_crud.get_conversation(db, user_id, partner_id)


async def list_partners(db: AsyncSession, user_id: int) -> list[ChatPartner]:
    """Chat partners ordered by their latest message, with unread counts."""
    messages = await chat_crud.get_involving(db, user_id)

    last_message: dict[int, ChatMessage] = {}
    unread: dict[int, int] = {}
    for message in messages:
        partner_id = (
            message.receiver_id if message.sender_id == user_id else message.sender_id
        )
        last_message.setdefault(partner_id, message)
        if message.receiver_id == user_id and not message.read:
            unread[partner_id] = unread.get(partner_id, 0) + 1

    if not last_message:
        return []

    result = await db.execute(select(User).where(User.id.in_(last_message.keys())))
    users = {user.id: user for user in result.scalars().all()}

    return [
        ChatPartner(
            user_id=partner_id,
            email=users[partner_id].email,
            full_name=users[partner_id].full_name,
            last_message=MessageResponse.model_validate(message),
            unread_count=unread.get(partner_id, 0),
        )
        for partner_id, message in last_message.items()
        if partner_id in users
    ]


async def mark_conversation_read(
    db: AsyncSession,
    user_id: int,
    partner_id: int,
    broker: ChangeFeedBroker | None = None,
) -> int:
    """Mark the partner's unread messages to the user as read."""
    unread = await chat_crud.get_unread_from(db, user_id, partner_id)
    updated = await chat_crud.mark_read_from(db, user_id, partner_id)
    await db.commit()
    for message in unread:
        await _publish(broker, ChangeEventType.UPDATE, message)
    return updated
