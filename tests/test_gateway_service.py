"""
Tests for the gateway orchestration service.
"""

import asyncio
import gc

import pytest

from ai_gateway.errors import (
    ConfigError,
    InternalError,
    TransportError,
    UpstreamError,
    ValidationError,
)
from ai_gateway.services.request_normalizer import FALLBACK_USER_TEXT, SYSTEM_PERSONA


@pytest.mark.anyio
async def test_first_call_misses_and_reaches_upstream(gateway, provider, cache):
    """A new prompt goes upstream and is stored under its derived key."""
    response = await gateway.complete({"prompt": "What is 2+2?"})

    assert response.content == "4"
    assert response.cached is False
    assert len(provider.calls) == 1
    assert [m.content for m in provider.calls[0].messages] == [SYSTEM_PERSONA, "What is 2+2?"]
    assert cache.has("generic::What is 2+2?")


@pytest.mark.anyio
async def test_repeat_call_is_served_from_cache(gateway, provider):
    """The same input a second time returns cached=True without another upstream call."""
    first = await gateway.complete({"prompt": "What is 2+2?"})
    second = await gateway.complete({"prompt": "What is 2+2?"})

    assert second.cached is True
    assert second.content == first.content
    assert len(provider.calls) == 1


@pytest.mark.anyio
async def test_equivalent_inputs_share_cache_entry(gateway, provider):
    await gateway.complete({"prompt": "What is 2+2?", "model": "gpt-4o"})
    response = await gateway.complete({"transcript": "What is 2+2?", "temperature": 0.1})

    assert response.cached is True
    assert len(provider.calls) == 1


@pytest.mark.anyio
async def test_empty_input_uses_fallback(gateway, provider):
    response = await gateway.complete({})

    assert response.content == "4"
    assert provider.calls[0].messages[-1].content == FALLBACK_USER_TEXT


@pytest.mark.anyio
async def test_validation_error_skips_upstream(gateway, provider, cache):
    with pytest.raises(ValidationError):
        await gateway.complete({"messages": "nope"})

    assert provider.calls == []
    assert cache.count_all() == 0


@pytest.mark.anyio
async def test_config_error_writes_nothing(gateway, provider, cache):
    provider.configured = False

    with pytest.raises(ConfigError):
        await gateway.complete({"prompt": "hi"})

    assert cache.count_all() == 0


@pytest.mark.anyio
async def test_cache_hit_served_without_credentials(gateway, provider):
    await gateway.complete({"prompt": "hi"})
    provider.configured = False

    response = await gateway.complete({"prompt": "hi"})

    assert response.cached is True


@pytest.mark.anyio
@pytest.mark.parametrize(
    "error",
    [UpstreamError(status=500, body="server exploded"), TransportError("connection refused")],
)
async def test_upstream_failure_is_not_cached(gateway, provider, cache, error):
    provider.error = error

    with pytest.raises(type(error)):
        await gateway.complete({"prompt": "hi"})
    assert cache.count_all() == 0

    provider.error = None
    response = await gateway.complete({"prompt": "hi"})

    assert response.cached is False
    assert len(provider.calls) == 2
    assert gateway.metrics.upstream_failures == 1


@pytest.mark.anyio
async def test_upstream_error_keeps_status_and_body(gateway, provider):
    provider.error = UpstreamError(status=401, body='{"error": "invalid key"}')

    with pytest.raises(UpstreamError) as exc_info:
        await gateway.complete({"prompt": "hi"})

    assert exc_info.value.status == 401
    assert exc_info.value.body == '{"error": "invalid key"}'


@pytest.mark.anyio
async def test_unexpected_failure_becomes_internal_error(gateway, provider):
    provider.error = RuntimeError("kaboom")

    with pytest.raises(InternalError) as exc_info:
        await gateway.complete({"prompt": "hi"})

    assert exc_info.value.message == "kaboom"
    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.anyio
async def test_missing_content_is_cached_as_empty_string(gateway, provider):
    provider.content = None

    response = await gateway.complete({"prompt": "hi"})

    assert response.content == ""


@pytest.mark.anyio
async def test_concurrent_identical_misses_share_one_upstream_call(gateway, provider, cache):
    """Simultaneous misses on one key make a single upstream call and a single write."""
    provider.gate = asyncio.Event()

    first = asyncio.ensure_future(gateway.complete({"prompt": "What is 2+2?"}))
    second = asyncio.ensure_future(gateway.complete({"prompt": "What is 2+2?", "model": "gpt-4o"}))
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    provider.gate.set()
    results = await asyncio.gather(first, second)

    assert len(provider.calls) == 1
    assert [r.content for r in results] == ["4", "4"]
    assert cache.count_all() == 1
    assert gateway.metrics.coalesced_requests == 1
    assert gateway._inflight == {}


@pytest.mark.anyio
async def test_concurrent_distinct_misses_are_not_coalesced(gateway, provider):
    await asyncio.gather(
        gateway.complete({"prompt": "one"}),
        gateway.complete({"prompt": "two"}),
    )
    assert len(provider.calls) == 2


@pytest.mark.anyio
async def test_coalesced_callers_all_see_the_failure(gateway, provider, cache):
    provider.gate = asyncio.Event()
    provider.error = TransportError("down")

    tasks = [asyncio.ensure_future(gateway.complete({"prompt": "hi"})) for _ in range(3)]
    await asyncio.sleep(0)
    provider.gate.set()
    results = await asyncio.gather(*tasks, return_exceptions=True)

    assert all(isinstance(r, TransportError) for r in results)
    assert len(provider.calls) == 1
    assert cache.count_all() == 0


@pytest.mark.anyio
async def test_stats_combine_cache_and_counters(gateway):
    await gateway.complete({"prompt": "hi"})
    await gateway.complete({"prompt": "hi"})

    stats = gateway.get_stats()

    assert stats["total_entries"] == 1
    assert stats["max_entries"] == 10
    assert stats["cache_hits"] == 1
    assert stats["cache_misses"] == 1
    assert stats["hit_rate"] == 0.5
    assert stats["upstream_calls"] == 1


@pytest.mark.anyio
async def test_clear_forces_next_call_upstream(gateway, provider):
    await gateway.complete({"prompt": "hi"})
    assert gateway.clear() == 1

    response = await gateway.complete({"prompt": "hi"})

    assert response.cached is False
    assert len(provider.calls) == 2


@pytest.mark.anyio
async def test_failure_after_every_waiter_cancelled_is_not_reported(gateway, provider):
    """A dispatch that fails with nobody waiting does not leak an unretrieved exception."""
    loop = asyncio.get_running_loop()
    reported = []
    previous_handler = loop.get_exception_handler()
    loop.set_exception_handler(lambda _loop, context: reported.append(context))
    try:
        provider.gate = asyncio.Event()
        provider.error = TransportError("down")

        waiter = asyncio.ensure_future(gateway.complete({"prompt": "hi"}))
        await asyncio.sleep(0)
        (dispatch,) = gateway._inflight.values()

        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        provider.gate.set()
        await asyncio.wait([dispatch])
        await asyncio.sleep(0)

        assert gateway._inflight == {}
        del dispatch, waiter
        gc.collect()
    finally:
        loop.set_exception_handler(previous_handler)

    assert reported == []
