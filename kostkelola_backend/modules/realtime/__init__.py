"""Realtime change feed: broker plus websocket channels."""

from .broker import ChangeFeedBroker, row_to_dict
from .dependencies import Broker, get_broker
from .schemas import ChangeEvent, ChangeEventType, Channel

__all__ = [
    "Broker",
    "ChangeEvent",
    "ChangeEventType",
    "ChangeFeedBroker",
    "Channel",
    "get_broker",
    "row_to_dict",
]
