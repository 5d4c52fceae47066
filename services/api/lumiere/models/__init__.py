from .all_models import ChatMessage, WardrobeItem

__all__ = [
    "WardrobeItem",
    "ChatMessage",
]
