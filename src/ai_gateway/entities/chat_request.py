"""Chat request domain entities."""

from dataclasses import dataclass
from typing import Any, Literal

Role = Literal["system", "user", "assistant"]

JSON_OBJECT = "json_object"


@dataclass(frozen=True)
class ChatMessage:
    """A single role-tagged chat message."""

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ChatRequest:
    """Canonical chat-completion request.

    Built once by the request normalizer and never mutated afterwards.

    Attributes:
        model: Provider model name
        messages: Ordered messages, never empty
        temperature: Sampling temperature
        max_tokens: Completion token limit, already clamped
        response_format: "json_object" when JSON output was requested, else None
    """

    model: str
    messages: tuple[ChatMessage, ...]
    temperature: float
    max_tokens: int
    response_format: str | None = None

    @property
    def wants_json(self) -> bool:
        return self.response_format == JSON_OBJECT

    def to_payload(self) -> dict[str, Any]:
        """Build the provider request body.

        Returns:
            Dict with model, messages, temperature, max_tokens and, only when
            requested, the response_format directive
        """
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [message.to_dict() for message in self.messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if self.wants_json:
            payload["response_format"] = {"type": JSON_OBJECT}
        return payload
