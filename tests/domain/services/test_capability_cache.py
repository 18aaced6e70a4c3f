"""Tests for tool-support detection and caching."""

import asyncio

import pytest

from fakes import PLAIN_MODEL_METADATA, TOOL_MODEL_METADATA, FakeClock, FakeModelServer
from verifai.domain.services.capability_cache import CapabilityCache, detect_tool_support


@pytest.mark.parametrize(
    "name, metadata, expected",
    [
        ("custom", {"template": "{{ .System }}<tool_call>{{ .Call }}</tool_call>"}, True),
        ("custom", {"template": "plain", "modelfile": "# supports function call syntax"}, True),
        ("qwen2.5:7b", {"template": "plain", "modelfile": ""}, True),
        ("Llama3.2:latest", {}, True),
        ("phi", {"template": "{{ .Prompt }}", "modelfile": "FROM phi"}, False),
        ("gemma:2b", {"template": None, "modelfile": 42}, False),
    ],
)
def test_detect_tool_support(name, metadata, expected):
    assert detect_tool_support(name, metadata) is expected


@pytest.fixture
def server() -> FakeModelServer:
    return FakeModelServer(metadata={"tool-model": TOOL_MODEL_METADATA, "plain-model": PLAIN_MODEL_METADATA})


@pytest.mark.asyncio
async def test_result_is_cached(server, fake_clock):
    cache = CapabilityCache(server, clock=fake_clock)

    assert await cache.has_tool_support("tool-model") is True
    assert await cache.has_tool_support("tool-model") is True
    assert await cache.has_tool_support("plain-model") is False

    assert server.show_calls == ["tool-model", "plain-model"]
    entry = cache.get_cached("tool-model")
    assert entry.supports_tools is True
    assert entry.checked_at == fake_clock.now


@pytest.mark.asyncio
async def test_concurrent_probes_are_deduplicated(server):
    server.show_delay = 0.05
    cache = CapabilityCache(server)

    results = await asyncio.gather(*(cache.has_tool_support("tool-model") for _ in range(5)))

    assert results == [True] * 5
    assert server.show_calls == ["tool-model"]
    assert not cache.is_probing("tool-model")


@pytest.mark.asyncio
async def test_entries_expire_after_ttl(server, fake_clock: FakeClock):
    cache = CapabilityCache(server, ttl=3600, clock=fake_clock)

    await cache.has_tool_support("tool-model")
    fake_clock.advance(3599)
    await cache.has_tool_support("tool-model")
    assert server.show_calls == ["tool-model"]

    fake_clock.advance(2)
    assert cache.get_cached("tool-model") is None
    await cache.has_tool_support("tool-model")
    assert server.show_calls == ["tool-model", "tool-model"]


@pytest.mark.asyncio
async def test_probe_failure_is_cached_as_unsupported(server):
    server.metadata["broken"] = RuntimeError("connection refused")
    cache = CapabilityCache(server)

    assert await cache.has_tool_support("broken") is False
    assert await cache.has_tool_support("broken") is False
    assert server.show_calls == ["broken"]


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_abort_shared_probe(server):
    server.show_delay = 0.05
    cache = CapabilityCache(server)

    first = asyncio.ensure_future(cache.has_tool_support("tool-model"))
    second = asyncio.ensure_future(cache.has_tool_support("tool-model"))
    await asyncio.sleep(0)
    first.cancel()

    assert await second is True
    assert first.cancelled()
    assert server.show_calls == ["tool-model"]
    assert cache.get_cached("tool-model") is not None


@pytest.mark.asyncio
async def test_invalidate_forces_new_probe(server):
    cache = CapabilityCache(server)

    await cache.has_tool_support("tool-model")
    cache.invalidate("tool-model")
    await cache.has_tool_support("tool-model")

    assert server.show_calls == ["tool-model", "tool-model"]
