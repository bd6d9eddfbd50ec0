"""Cache entry domain entity."""

from dataclasses import dataclass

from .chat_response import ChatResponse


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached response.

    Internal to the cache repository; callers only ever see the value.

    Attributes:
        key: The cache key
        value: The cached response
        inserted_at: Clock reading when the entry was written
        expires_at: Clock reading after which the entry is treated as absent
    """

    key: str
    value: ChatResponse
    inserted_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at
