"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class MessageContent(BaseModel):
    """Assistant message inside a choice."""

    content: str = Field(..., description="Generated text, empty when extraction failed")


class ChoiceItem(BaseModel):
    """Single choice item (in choices array)."""

    message: MessageContent


class ChatCompletionResponse(BaseModel):
    """Response DTO for a successful gateway call.

    Mirrors the provider's `choices` shape so existing callers keep working.
    """

    choices: list[ChoiceItem] = Field(..., description="Always exactly one choice")
    cached: bool = Field(False, description="Whether the response was served from cache")

    @classmethod
    def from_content(cls, content: str, cached: bool) -> "ChatCompletionResponse":
        return cls(choices=[ChoiceItem(message=MessageContent(content=content))], cached=cached)


class ErrorResponse(BaseModel):
    """Response DTO for any failed gateway call."""

    error: str = Field(..., description="Human-readable error summary")
    status: int | None = Field(None, description="Upstream HTTP status, for provider failures")
    details: str | None = Field(None, description="Additional diagnostic detail")
    body: str | None = Field(None, description="Raw upstream body, passed through unchanged")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    total_entries: int = Field(..., description="Number of entries currently held", ge=0)
    max_entries: int = Field(..., description="Cache capacity", ge=1)
    ttl_seconds: float = Field(..., description="Time-to-live for cache entries in seconds", gt=0)
    evictions: int = Field(0, description="Entries evicted to make room", ge=0)
    expirations: int = Field(0, description="Entries dropped after their TTL elapsed", ge=0)
    cache_hits: int = Field(0, ge=0)
    cache_misses: int = Field(0, ge=0)
    hit_rate: float = Field(0.0, ge=0.0, le=1.0)
    upstream_calls: int = Field(0, ge=0)
    upstream_failures: int = Field(0, ge=0)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'degraded'")
    credentials_configured: bool = Field(
        ...,
        description="Whether an upstream API key is available",
    )
