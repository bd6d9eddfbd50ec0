"""Chat provider protocol.

Defines the interface for the upstream chat-completion service.

Implementations can include:
- OpenAI Chat Completions over HTTP (default)
- Test doubles that record calls
"""

from typing import Any, Protocol, runtime_checkable

from ai_gateway.entities import ChatRequest


@runtime_checkable
class ChatProvider(Protocol):
    """Protocol for chat-completion providers."""

    @property
    def is_configured(self) -> bool:
        """Return whether a credential is available for the provider."""
        ...

    async def send(self, request: ChatRequest) -> dict[str, Any]:
        """Perform a single chat-completion call.

        Args:
            request: The normalized request

        Returns:
            The raw provider response document

        Raises:
            ConfigError: If no credential is configured
            UpstreamError: If the provider returned a non-success status
            TransportError: If the provider could not be reached
        """
        ...
