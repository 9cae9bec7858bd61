"""Property management module: properties, room types, rooms and marketplace."""

from .models import (
    MarketplaceStatus,
    Property,
    RenterGender,
    Room,
    RoomStatus,
    RoomType,
)

__all__ = [
    "MarketplaceStatus",
    "Property",
    "RenterGender",
    "Room",
    "RoomStatus",
    "RoomType",
]
