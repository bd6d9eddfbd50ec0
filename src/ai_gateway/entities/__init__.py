"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntryEntity
from .chat_request import JSON_OBJECT, ChatMessage, ChatRequest
from .chat_response import ChatResponse

__all__ = [
    "CacheEntryEntity",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "JSON_OBJECT",
]
