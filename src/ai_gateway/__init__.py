"""AI Gateway - caching gateway in front of a chat-completion provider.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (CacheStore, ChatProvider)
    - repositories: Data access implementations (in-memory LRU cache, OpenAI client)
    - services: Business logic (normalization, key derivation, orchestration)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from ai_gateway.repositories import InMemoryCacheRepository, OpenAIChatClient
    from ai_gateway.services import GatewayService

    gateway = GatewayService.create(
        cache=InMemoryCacheRepository.create(),
        chat_provider=OpenAIChatClient.create(),
    )
    ```

For HTTP API:
    ```python
    from ai_gateway.api.app import app
    ```
"""

from ai_gateway.config import settings
from ai_gateway.dto import ChatCompletionResponse, GatewayRequest
from ai_gateway.entities import CacheEntryEntity, ChatMessage, ChatRequest, ChatResponse
from ai_gateway.errors import (
    ConfigError,
    GatewayError,
    InternalError,
    TransportError,
    UpstreamError,
    ValidationError,
)
from ai_gateway.handlers import GatewayHandler
from ai_gateway.protocols import CacheStore, ChatProvider
from ai_gateway.repositories import InMemoryCacheRepository, OpenAIChatClient
from ai_gateway.services import GatewayService, RequestNormalizer, ResponseNormalizer

__all__ = [
    # Configuration
    "settings",
    # Protocols (interfaces)
    "CacheStore",
    "ChatProvider",
    # Services (business logic)
    "GatewayService",
    "RequestNormalizer",
    "ResponseNormalizer",
    # Handlers (HTTP)
    "GatewayHandler",
    # Repositories (data access)
    "InMemoryCacheRepository",
    "OpenAIChatClient",
    # Entities (domain models)
    "CacheEntryEntity",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    # DTOs (API contracts)
    "GatewayRequest",
    "ChatCompletionResponse",
    # Errors
    "GatewayError",
    "ValidationError",
    "ConfigError",
    "UpstreamError",
    "TransportError",
    "InternalError",
]
