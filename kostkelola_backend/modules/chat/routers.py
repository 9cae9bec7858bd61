"""Chat API routes."""

from fastapi import APIRouter

from ...database import DB
from ..auth.dependencies import CurrentUser
from ..commons import BaseResponse
from ..realtime import Broker
from . import services
from .schemas import ChatPartner, MessageCreate, MessageResponse

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.get("/partners", response_model=BaseResponse[list[ChatPartner]])
async def list_partners(current_user: CurrentUser, db: DB):
    """Get the caller's conversations with last message and unread count."""
    partners = await services.list_partners(db, current_user.id)
    return BaseResponse(success=True, data=partners)


@router.get(
    "/conversations/{partner_id}", response_model=BaseResponse[list[MessageResponse]]
)
async def get_conversation(partner_id: int, current_user: CurrentUser, db: DB):
    messages = await services.get_conversation(db, current_user.id, partner_id)
    return BaseResponse(
        success=True, data=[MessageResponse.model_validate(m) for m in messages]
    )


@router.post(
    "/conversations/{partner_id}/read", response_model=BaseResponse[None]
)
async def mark_conversation_read(
    partner_id: int, current_user: CurrentUser, db: DB, broker: Broker
):
    updated = await services.mark_conversation_read(
        db, current_user.id, partner_id, broker
    )
    return BaseResponse(success=True, message=f"{updated} messages marked as read")


@router.post("/messages", response_model=BaseResponse[MessageResponse], status_code=201)
async def send_message(
    data: MessageCreate, current_user: CurrentUser, db: DB, broker: Broker
):
    message = await services.send_message(db, current_user.id, data, broker)
    return BaseResponse(success=True, data=MessageResponse.model_validate(message))
