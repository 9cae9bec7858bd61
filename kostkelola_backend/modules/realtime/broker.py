"""In-process change-feed broker.

Services publish a :class:`ChangeEvent` after their transaction commits and
the broker fans it out to the websocket subscribers of that channel who are
in the event's audience. One broker lives on ``app.state``.
"""

import asyncio
from dataclasses import dataclass
from typing import Any

from fastapi import WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from sqlalchemy import inspect

from ...core.logging import get_logger
from .schemas import Channel, ChangeEvent, ChangeEventType

logger = get_logger(__name__)


@dataclass(eq=False)
class Subscriber:
    """A websocket (or anything with ``send_json``) bound to a user."""

    connection: Any
    user_id: int


class ChangeFeedBroker:
    def __init__(self):
        self._subscribers: dict[Channel, set[Subscriber]] = {
            channel: set() for channel in Channel
        }
        self._lock = asyncio.Lock()

    async def subscribe(self, channel: Channel, connection: Any, user_id: int) -> Subscriber:
        subscriber = Subscriber(connection=connection, user_id=user_id)
        async with self._lock:
            self._subscribers[channel].add(subscriber)
        logger.debug(
            "Subscribed", extra={"channel": channel.value, "user_id": user_id}
        )
        return subscriber

    async def unsubscribe(self, channel: Channel, subscriber: Subscriber) -> None:
        async with self._lock:
            self._subscribers[channel].discard(subscriber)

    def subscriber_count(self, channel: Channel) -> int:
        return len(self._subscribers[channel])

    async def publish(self, event: ChangeEvent) -> int:
        """Deliver an event; returns how many subscribers received it.

        Subscribers whose send fails are dropped.
        """
        async with self._lock:
            targets = [
                s for s in self._subscribers[event.channel] if event.visible_to(s.user_id)
            ]

        message = event.to_message()
        delivered = 0
        stale = []
        for subscriber in targets:
            try:
                await subscriber.connection.send_json(message)
                delivered += 1
            except (WebSocketDisconnect, RuntimeError, ConnectionError):
                stale.append(subscriber)

        if stale:
            async with self._lock:
                for subscriber in stale:
                    self._subscribers[event.channel].discard(subscriber)
            logger.info(
                "Pruned closed subscribers",
                extra={"channel": event.channel.value, "count": len(stale)},
            )
        return delivered

    async def publish_row(
        self,
        channel: Channel,
        event: ChangeEventType,
        row: Any,
        audience: list[int] | None,
    ) -> int:
        """Publish a change for an ORM row."""
        return await self.publish(
            ChangeEvent(
                channel=channel,
                event=event,
                table=row.__tablename__,
                record=row_to_dict(row),
                audience=audience,
            )
        )


def row_to_dict(row: Any) -> dict[str, Any]:
    """JSON-safe dict of an ORM row's column values."""
    mapper = inspect(row).mapper
    return jsonable_encoder(
        {attr.key: getattr(row, attr.key) for attr in mapper.column_attrs}
    )
