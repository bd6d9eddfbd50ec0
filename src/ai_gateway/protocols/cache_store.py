"""Cache storage protocol.

Defines the interface for any response cache backend the gateway can
short-circuit repeated requests through.

Implementations can include:
- In-process LRU store with TTL (default)
- Any other key/value store that honors expiry on read
"""

from typing import Protocol, runtime_checkable

from ai_gateway.entities import ChatResponse


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for response cache backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Example:
        ```python
        from ai_gateway.protocols import CacheStore

        store: CacheStore = InMemoryCacheRepository(max_entries=500)
        ```
    """

    def get(self, key: str) -> ChatResponse | None:
        """Look up a cached response.

        Args:
            key: The cache key

        Returns:
            The cached response, or None if absent or expired
        """
        ...

    def set(self, key: str, value: ChatResponse) -> None:
        """Store a response, replacing any existing entry for the key.

        Args:
            key: The cache key
            value: The response to cache
        """
        ...

    def has(self, key: str) -> bool:
        """Check whether a live entry exists for the key.

        Args:
            key: The cache key

        Returns:
            True if present and not expired
        """
        ...

    def delete(self, key: str) -> bool:
        """Delete a specific entry by key.

        Args:
            key: The cache key

        Returns:
            True if deleted, False otherwise
        """
        ...

    def clear(self) -> int:
        """Clear all entries.

        Returns:
            Number of entries deleted
        """
        ...

    def count_all(self) -> int:
        """Count entries currently held (expired ones included until swept)."""
        ...

    def get_stats(self) -> dict:
        """Get store statistics.

        Returns:
            Dictionary with stats (implementation-specific)
        """
        ...
