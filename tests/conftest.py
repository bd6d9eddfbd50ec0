"""Shared fixtures for the gateway tests."""

import asyncio
from typing import Any

import pytest

from ai_gateway.entities import ChatRequest
from ai_gateway.errors import ConfigError
from ai_gateway.repositories import InMemoryCacheRepository
from ai_gateway.services import GatewayService, RequestNormalizer, ResponseNormalizer


class FakeChatProvider:
    """ChatProvider test double that records every request it receives."""

    def __init__(
        self,
        content: Any = "4",
        error: Exception | None = None,
        configured: bool = True,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.content = content
        self.error = error
        self.configured = configured
        self.gate = gate
        self.calls: list[ChatRequest] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def send(self, request: ChatRequest) -> dict[str, Any]:
        if not self.configured:
            raise ConfigError()
        self.calls.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return {"choices": [{"message": {"role": "assistant", "content": self.content}}]}


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    return FakeChatProvider()


@pytest.fixture
def normalizer():
    """Normalizer with explicit defaults, independent of the environment."""
    return RequestNormalizer(
        default_model="gpt-4o-mini",
        default_temperature=0.6,
        default_max_tokens=400,
        max_tokens_cap=1500,
    )


@pytest.fixture
def cache():
    return InMemoryCacheRepository(max_entries=10, ttl=60)


@pytest.fixture
def gateway(cache, provider, normalizer):
    return GatewayService(
        cache=cache,
        chat_provider=provider,
        request_normalizer=normalizer,
        response_normalizer=ResponseNormalizer(canonicalize_json=False),
        key_chars=200,
    )
