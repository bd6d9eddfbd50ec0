"""Request DTOs for API endpoints.

The gateway accepts loosely-structured bodies from heterogeneous callers,
so every field is optional and unknown fields are kept. Validation only
rejects values whose type cannot be coerced.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MessageIn(BaseModel):
    """A caller-supplied chat message."""

    role: Literal["system", "user", "assistant"]
    content: str


class PayloadContext(BaseModel):
    """Context block nested under `payload`."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    grade_level: str | int | None = Field(None, alias="gradeLevel")


class Payload(BaseModel):
    """Event payload sent by transcript-streaming callers."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    transcript_chunk: str | None = Field(None, alias="transcriptChunk")
    context: PayloadContext | None = None


class ResponseFormatIn(BaseModel):
    """Requested output format. Callers send either `type` or `kind`."""

    model_config = ConfigDict(extra="allow")

    type: str | None = None
    kind: str | None = None

    @property
    def format_name(self) -> str | None:
        return self.type or self.kind


class GatewayRequest(BaseModel):
    """Request DTO for the chat gateway (the raw, un-normalized input).

    The request normalizer converts this to a canonical ChatRequest.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, allow_inf_nan=False)

    event: str | None = Field(None, description="Caller event name, used in the cache key")
    event_type: str | None = Field(None, alias="type", description="Alternative to `event`")
    prompt: str | None = None
    transcript: str | None = None
    payload: Payload | None = None
    messages: list[MessageIn] | None = Field(
        None,
        description="Explicit chat messages, used verbatim when non-empty",
    )
    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = Field(None, description="Clamped to the configured cap")
    grade_level: str | int | None = Field(None, alias="gradeLevel")
    response_format: ResponseFormatIn | None = None
