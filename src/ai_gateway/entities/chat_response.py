"""Chat response domain entity."""

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ChatResponse:
    """Normalized provider response.

    Attributes:
        content: Assistant text, empty string when extraction failed
        cached: Whether this response was served from the cache
        raw: The upstream payload, kept for diagnostics only
    """

    content: str
    cached: bool = False
    raw: dict[str, Any] | None = field(default=None, compare=False, repr=False)

    def as_cached(self) -> "ChatResponse":
        """Return a copy flagged as a cache hit."""
        return replace(self, cached=True)
