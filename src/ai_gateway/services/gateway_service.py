"""Gateway service for core business logic.

This service orchestrates one gateway call:

    normalize -> derive key -> cache lookup -> (hit) return
                                            -> (miss) upstream -> normalize -> store -> return

Concurrent misses on the same key share a single in-flight upstream call,
so they also share one cache write.
"""

import asyncio
import logging
import time
from typing import Any

from ai_gateway.config import settings
from ai_gateway.entities import ChatRequest, ChatResponse
from ai_gateway.errors import GatewayError, InternalError, TransportError, UpstreamError
from ai_gateway.models import GatewayMetrics
from ai_gateway.protocols import CacheStore, ChatProvider

from .cache_key import derive_cache_key
from .request_normalizer import RequestNormalizer
from .response_normalizer import ResponseNormalizer

logger = logging.getLogger(__name__)


class GatewayService:
    """Core gateway orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - CacheStore: the in-memory LRU store by default
    - ChatProvider: OpenAI by default, a fake in tests

    Example:
        ```python
        from ai_gateway.repositories import InMemoryCacheRepository, OpenAIChatClient
        from ai_gateway.services import GatewayService

        gateway = GatewayService.create(
            cache=InMemoryCacheRepository.create(),
            chat_provider=OpenAIChatClient.create(),
        )
        response = await gateway.complete({"prompt": "What is 2+2?"})
        ```
    """

    def __init__(
        self,
        cache: CacheStore,
        chat_provider: ChatProvider,
        request_normalizer: RequestNormalizer | None = None,
        response_normalizer: ResponseNormalizer | None = None,
        key_chars: int | None = None,
    ) -> None:
        """Initialize the gateway service.

        Args:
            cache: Response cache backend (required).
            chat_provider: Upstream chat-completion provider (required).
            request_normalizer: Defaults to a RequestNormalizer built from settings.
            response_normalizer: Defaults to a ResponseNormalizer built from settings.
            key_chars: Characters of identifying text kept in cache keys. Defaults to settings.
        """
        self._cache = cache
        self._chat_provider = chat_provider
        self._request_normalizer = request_normalizer or RequestNormalizer()
        self._response_normalizer = response_normalizer or ResponseNormalizer()
        self._key_chars = key_chars or settings.cache_key_chars
        self._metrics = GatewayMetrics()
        self._inflight: dict[str, asyncio.Future[ChatResponse]] = {}

    @classmethod
    def create(
        cls,
        cache: CacheStore,
        chat_provider: ChatProvider,
        canonicalize_json: bool | None = None,
    ) -> "GatewayService":
        """Factory method to create GatewayService with sensible defaults.

        Args:
            cache: Response cache backend (required).
            chat_provider: Upstream provider (required).
            canonicalize_json: Re-serialize JSON responses compactly. If None, uses settings.

        Returns:
            Configured GatewayService instance
        """
        return cls(
            cache=cache,
            chat_provider=chat_provider,
            response_normalizer=ResponseNormalizer(canonicalize_json=canonicalize_json),
        )

    async def complete(self, raw: Any) -> ChatResponse:
        """Answer a raw gateway request, from cache when possible.

        Args:
            raw: The parsed request body

        Returns:
            ChatResponse with `cached` set on a cache hit

        Raises:
            ValidationError: If the body has a wrong, non-coercible shape
            ConfigError: If a miss needs the provider and no credential is set
            UpstreamError: If the provider answered with a non-success status
            TransportError: If the provider could not be reached
            InternalError: For any other failure
        """
        try:
            return await self._complete(raw)
        except GatewayError:
            raise
        except Exception as e:
            logger.exception("Unexpected gateway failure")
            raise InternalError(str(e)) from e

    async def _complete(self, raw: Any) -> ChatResponse:
        normalized = self._request_normalizer.normalize(raw)
        key = derive_cache_key(normalized.event, normalized.key_text, self._key_chars)

        cached = self._cache.get(key)
        if cached is not None:
            self._metrics.record_hit()
            logger.debug("Cache hit for %r", key)
            return cached.as_cached()

        self._metrics.record_miss()
        logger.debug("Cache miss for %r", key)
        return await self._single_flight(key, normalized.chat_request)

    async def _single_flight(self, key: str, chat_request: ChatRequest) -> ChatResponse:
        # No await between lookup and insert, so this is atomic on the event loop.
        pending = self._inflight.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._dispatch(key, chat_request))
            self._inflight[key] = pending
            pending.add_done_callback(lambda done: self._forget(key, done))
        else:
            self._metrics.record_coalesced()
            logger.debug("Joining in-flight upstream call for %r", key)

        return await asyncio.shield(pending)

    def _forget(self, key: str, done: "asyncio.Future[ChatResponse]") -> None:
        if self._inflight.get(key) is done:
            del self._inflight[key]
        # Marks the error retrieved when every waiter was cancelled.
        if not done.cancelled():
            done.exception()

    async def _dispatch(self, key: str, chat_request: ChatRequest) -> ChatResponse:
        started = time.perf_counter()
        try:
            raw = await self._chat_provider.send(chat_request)
        except (UpstreamError, TransportError):
            self._metrics.record_upstream_failure()
            raise
        self._metrics.record_upstream_call((time.perf_counter() - started) * 1000)

        response = self._response_normalizer.normalize(raw)
        self._cache.set(key, response)
        return response

    def clear(self) -> int:
        """Clear all cached responses.

        Returns:
            Number of entries deleted
        """
        return self._cache.clear()

    def get_stats(self) -> dict:
        """Get cache and request statistics.

        Returns:
            Dictionary merging cache store stats and gateway counters
        """
        stats = self._cache.get_stats()
        stats.update(self._metrics.to_dict())
        return stats

    @property
    def is_configured(self) -> bool:
        return self._chat_provider.is_configured

    @property
    def metrics(self) -> GatewayMetrics:
        return self._metrics

    @property
    def cache(self) -> CacheStore:
        """Get the underlying cache store (for testing)."""
        return self._cache

    @property
    def chat_provider(self) -> ChatProvider:
        """Get the underlying chat provider (for testing)."""
        return self._chat_provider
