import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Upstream provider
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_url: str = os.getenv("OPENAI_URL", "https://api.openai.com/v1/chat/completions")
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "30"))
    upstream_max_retries: int = int(os.getenv("UPSTREAM_MAX_RETRIES", "0"))
    upstream_retry_backoff: float = float(os.getenv("UPSTREAM_RETRY_BACKOFF", "0.5"))

    # Request defaults
    default_model: str = os.getenv("DEFAULT_MODEL", "gpt-4o-mini")
    default_temperature: float = float(os.getenv("DEFAULT_TEMPERATURE", "0.6"))
    default_max_tokens: int = int(os.getenv("DEFAULT_MAX_TOKENS", "400"))
    max_tokens_cap: int = int(os.getenv("MAX_TOKENS_CAP", "1500"))

    # Cache
    cache_max_entries: int = int(os.getenv("CACHE_MAX_ENTRIES", "500"))
    cache_ttl: int = int(os.getenv("CACHE_TTL", "2592000"))  # 30 days default
    cache_key_chars: int = int(os.getenv("CACHE_KEY_CHARS", "200"))

    # Response
    canonicalize_json: bool = os.getenv("CANONICALIZE_JSON", "false").lower() == "true"

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def has_credentials(self) -> bool:
        """Check whether an upstream API key is configured.

        Returns:
            True if OPENAI_API_KEY is set to a non-empty value
        """
        return bool(self.openai_api_key)

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_max_entries < 1:
            raise ValueError("CACHE_MAX_ENTRIES must be at least 1")

        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be a positive number of seconds")

        if not 1 <= self.default_max_tokens <= self.max_tokens_cap:
            raise ValueError(
                f"DEFAULT_MAX_TOKENS must be between 1 and MAX_TOKENS_CAP ({self.max_tokens_cap}), "
                f"got {self.default_max_tokens}"
            )

        if self.upstream_max_retries < 0:
            raise ValueError("UPSTREAM_MAX_RETRIES cannot be negative")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
