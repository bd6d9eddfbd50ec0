"""Response normalization.

Extracts the assistant text from a provider response. Extraction never
raises: anything missing or of the wrong type yields an empty string.
"""

import json
from typing import Any

from ai_gateway.config import settings
from ai_gateway.entities import ChatResponse


def extract_content(raw: Any) -> str:
    """Return `choices[0].message.content`, or "" when it is not a string."""
    try:
        content = raw["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def canonicalize_json_content(content: str) -> str:
    """Re-serialize JSON objects and arrays in compact form.

    Content that is not a valid JSON object or array is returned unchanged.
    """
    try:
        parsed = json.loads(content, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return content
    if not isinstance(parsed, (dict, list)):
        return content
    return json.dumps(parsed, ensure_ascii=False, separators=(",", ":"))


class ResponseNormalizer:
    """Converts raw provider responses into ChatResponse entities."""

    def __init__(self, canonicalize_json: bool | None = None) -> None:
        """Initialize the normalizer.

        Args:
            canonicalize_json: Re-serialize JSON content compactly. Defaults to settings.
        """
        self._canonicalize_json = (
            canonicalize_json if canonicalize_json is not None else settings.canonicalize_json
        )

    def normalize(self, raw: Any) -> ChatResponse:
        content = extract_content(raw)
        if self._canonicalize_json and content:
            content = canonicalize_json_content(content)
        return ChatResponse(
            content=content,
            cached=False,
            raw=raw if isinstance(raw, dict) else None,
        )
