"""Request normalization.

Turns whatever a caller sent into a canonical ChatRequest. Callers send one
of a few recognized shapes, resolved by field presence:

1. explicit `messages` (used verbatim)
2. `payload.transcriptChunk` (live transcript events)
3. `transcript`
4. `prompt`
5. nothing usable, in which case a fixed fallback question is sent

Missing fields are defaulted, never rejected. Only values with a wrong,
non-coercible type raise ValidationError.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ai_gateway.config import settings
from ai_gateway.dto import GatewayRequest
from ai_gateway.entities import JSON_OBJECT, ChatMessage, ChatRequest
from ai_gateway.errors import ValidationError

from .cache_key import DEFAULT_EVENT

SYSTEM_PERSONA = (
    "You are a helpful AI assistant for classroom support. Answer clearly and briefly."
)
FALLBACK_USER_TEXT = "Please provide a short answer."
GRADE_LEVEL_TEMPLATE = "Answer targeted for grade level: {level}."
JSON_INSTRUCTION = "\n\nIMPORTANT: You must respond with valid JSON only. No additional text."


@dataclass(frozen=True)
class NormalizedRequest:
    """Output of the request normalizer.

    Attributes:
        event: Event name for keying ("generic" when the caller sent none)
        key_text: Identifying text used for the cache key, before fallback substitution
        chat_request: The canonical request to send upstream
    """

    event: str
    key_text: str
    chat_request: ChatRequest


class RequestNormalizer:
    """Converts raw caller documents into canonical chat requests."""

    def __init__(
        self,
        default_model: str | None = None,
        default_temperature: float | None = None,
        default_max_tokens: int | None = None,
        max_tokens_cap: int | None = None,
    ) -> None:
        """Initialize the normalizer.

        Args:
            default_model: Model used when the caller sends none. Defaults to settings.
            default_temperature: Temperature used when absent. Defaults to settings.
            default_max_tokens: Token limit used when absent. Defaults to settings.
            max_tokens_cap: Upper bound for max_tokens. Defaults to settings.
        """
        self._default_model = default_model or settings.default_model
        self._default_temperature = (
            default_temperature if default_temperature is not None else settings.default_temperature
        )
        self._default_max_tokens = default_max_tokens or settings.default_max_tokens
        self._max_tokens_cap = max_tokens_cap or settings.max_tokens_cap

    def normalize(self, raw: Any) -> NormalizedRequest:
        """Normalize a raw request body.

        Args:
            raw: The parsed request body

        Returns:
            NormalizedRequest with event, key text and the canonical ChatRequest

        Raises:
            ValidationError: If the body or one of its fields has a wrong type
        """
        body = self._parse(raw)

        text = self._source_text(body)
        messages = self._build_messages(body, text)

        grade_level = self._grade_level(body)
        if grade_level is not None:
            messages.insert(
                0,
                ChatMessage(role="system", content=GRADE_LEVEL_TEMPLATE.format(level=grade_level)),
            )

        response_format = None
        if body.response_format is not None and body.response_format.format_name == JSON_OBJECT:
            response_format = JSON_OBJECT
            # Applied to the final message list, whichever branch built it.
            messages[-1] = enforce_json_instruction(messages[-1])

        chat_request = ChatRequest(
            model=body.model or self._default_model,
            messages=tuple(messages),
            temperature=(
                body.temperature if body.temperature is not None else self._default_temperature
            ),
            max_tokens=self.clamp_max_tokens(body.max_tokens),
            response_format=response_format,
        )

        return NormalizedRequest(
            event=body.event or body.event_type or DEFAULT_EVENT,
            key_text=text or self._last_user_content(body),
            chat_request=chat_request,
        )

    def clamp_max_tokens(self, value: int | None) -> int:
        """Clamp a requested token limit into [1, cap], defaulting when absent."""
        if value is None:
            return self._default_max_tokens
        return max(1, min(value, self._max_tokens_cap))

    @staticmethod
    def _parse(raw: Any) -> GatewayRequest:
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise ValidationError(f"Request body must be a JSON object, got {type(raw).__name__}")
        try:
            return GatewayRequest.model_validate(dict(raw))
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ValidationError(problems) from e

    @staticmethod
    def _source_text(body: GatewayRequest) -> str:
        chunk = body.payload.transcript_chunk if body.payload is not None else None
        return chunk or body.transcript or body.prompt or ""

    @staticmethod
    def _build_messages(body: GatewayRequest, text: str) -> list[ChatMessage]:
        if body.messages:
            return [ChatMessage(role=m.role, content=m.content) for m in body.messages]
        return [
            ChatMessage(role="system", content=SYSTEM_PERSONA),
            ChatMessage(role="user", content=text or FALLBACK_USER_TEXT),
        ]

    @staticmethod
    def _last_user_content(body: GatewayRequest) -> str:
        for message in reversed(body.messages or []):
            if message.role == "user":
                return message.content
        return ""

    @staticmethod
    def _grade_level(body: GatewayRequest) -> str | None:
        level = body.grade_level
        if level is None and body.payload is not None and body.payload.context is not None:
            level = body.payload.context.grade_level
        if level is None or level == "":
            return None
        return str(level)


def enforce_json_instruction(message: ChatMessage) -> ChatMessage:
    """Append the JSON-only instruction unless the message already mentions JSON.

    Args:
        message: The last message of the assembled list

    Returns:
        The original message, or a copy with the instruction appended
    """
    if "json" in message.content.lower():
        return message
    return ChatMessage(role=message.role, content=message.content + JSON_INSTRUCTION)
