"""Cache key derivation.

Keys are plain text: `<event>::<first N characters of the identifying text>`.
Inputs that differ only past character N share a key on purpose, which
keeps keys bounded in size.
"""

DEFAULT_EVENT = "generic"
KEY_SEPARATOR = "::"
DEFAULT_KEY_CHARS = 200


def derive_cache_key(event: str | None, text: str, max_chars: int = DEFAULT_KEY_CHARS) -> str:
    """Derive the cache key for a request.

    Args:
        event: Caller event name; falls back to "generic" when empty
        text: The identifying text, before any fallback substitution
        max_chars: Number of leading characters of `text` kept in the key

    Returns:
        The cache key
    """
    return f"{event or DEFAULT_EVENT}{KEY_SEPARATOR}{text[:max_chars]}"
