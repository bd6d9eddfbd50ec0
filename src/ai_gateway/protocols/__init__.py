"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (in-memory -> shared store, OpenAI -> fake)
- Unit testing with mock implementations
- Clear separation of concerns
"""

from .cache_store import CacheStore
from .chat_provider import ChatProvider

__all__ = [
    "CacheStore",
    "ChatProvider",
]
