"""Change-feed event types."""

import enum
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from ...core.utils import utc_now


class Channel(str, enum.Enum):
    PROPERTIES = "properties_changes"
    NOTIFICATIONS = "notifications_changes"
    CHAT = "chat_messages"


class ChangeEventType(str, enum.Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ChangeEvent(BaseModel):
    """One committed row change.

    ``audience`` lists the user ids allowed to receive the event; ``None``
    makes it public (broadcast notifications).
    """

    channel: Channel
    event: ChangeEventType
    table: str
    record: dict[str, Any]
    occurred_at: datetime = Field(default_factory=utc_now)
    audience: list[int] | None = None

    def visible_to(self, user_id: int) -> bool:
        return self.audience is None or user_id in self.audience

    def to_message(self) -> dict[str, Any]:
        """Wire payload; the audience stays server-side."""
        return self.model_dump(mode="json", exclude={"audience"})
