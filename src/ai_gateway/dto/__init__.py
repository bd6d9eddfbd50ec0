"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import GatewayRequest, MessageIn, Payload, PayloadContext, ResponseFormatIn
from .responses import (
    CacheStatsResponse,
    ChatCompletionResponse,
    ChoiceItem,
    ErrorResponse,
    HealthCheckResponse,
    MessageContent,
)

__all__ = [
    "GatewayRequest",
    "MessageIn",
    "Payload",
    "PayloadContext",
    "ResponseFormatIn",
    "CacheStatsResponse",
    "ChatCompletionResponse",
    "ChoiceItem",
    "ErrorResponse",
    "HealthCheckResponse",
    "MessageContent",
]
