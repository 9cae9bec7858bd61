"""Direct messages between users."""

from .models import ChatMessage

__all__ = ["ChatMessage"]
