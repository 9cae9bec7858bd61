"""Chat schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class MessageCreate(BaseModel):
    receiver_id: int
    content: str = Field(..., min_length=1, max_length=5000)


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sender_id: int
    receiver_id: int
    content: str
    read: bool
    created_at: datetime


class ChatPartner(BaseModel):
    """Someone the caller has exchanged messages with."""

    user_id: int
    email: EmailStr
    full_name: str
    last_message: MessageResponse
    unread_count: int = 0
