"""Repository layer for data access.

This layer abstracts external dependencies (the response store, the
chat-completion provider) behind protocol-based interfaces. This enables:
- Easy swapping of implementations
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from ai_gateway.protocols import CacheStore, ChatProvider

from .memory_cache_repository import InMemoryCacheRepository
from .openai_chat_client import OpenAIChatClient

__all__ = [
    "CacheStore",
    "ChatProvider",
    "InMemoryCacheRepository",
    "OpenAIChatClient",
]
