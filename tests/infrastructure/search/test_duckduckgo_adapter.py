"""Tests for the DuckDuckGo search adapter."""

from typing import List

import httpx
import pytest

from verifai.domain.errors import FatalRequestError, TransientNetworkError
from verifai.infrastructure.search.duckduckgo_adapter import DuckDuckGoConfig, DuckDuckGoSearchAdapter

PAGE = """
<div class="result">
  <a class="result__a" href="https://www.nasa.gov/earth">Earth from space</a>
  <a class="result__snippet">Photos of a round planet.</a>
</div>
"""


def build_adapter(status: int, text: str, requests: List[httpx.Request], **config) -> DuckDuckGoSearchAdapter:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status, text=text)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DuckDuckGoSearchAdapter(DuckDuckGoConfig(**config), client=client)


@pytest.mark.asyncio
async def test_search_sends_query_and_recency():
    requests: List[httpx.Request] = []
    adapter = build_adapter(200, PAGE, requests)

    results = await adapter.search("is the earth flat")
    await adapter.shutdown()

    assert requests[0].url.host == "html.duckduckgo.com"
    assert requests[0].url.params["q"] == "is the earth flat"
    assert requests[0].url.params["df"] == "m"
    assert [r.source_domain for r in results] == ["nasa.gov"]
    assert results[0].snippet == "Photos of a round planet."


@pytest.mark.asyncio
async def test_recency_filter_can_be_disabled():
    requests: List[httpx.Request] = []
    adapter = build_adapter(200, PAGE, requests, recency=None)

    await adapter.search("query")
    await adapter.shutdown()

    assert "df" not in requests[0].url.params


@pytest.mark.asyncio
async def test_server_error_is_not_retried():
    requests: List[httpx.Request] = []
    adapter = build_adapter(503, "unavailable", requests)

    with pytest.raises(TransientNetworkError):
        await adapter.search("query")
    await adapter.shutdown()

    assert len(requests) == 1


@pytest.mark.asyncio
async def test_client_error_is_fatal():
    requests: List[httpx.Request] = []
    adapter = build_adapter(403, "forbidden", requests)

    with pytest.raises(FatalRequestError):
        await adapter.search("query")
    await adapter.shutdown()


@pytest.mark.asyncio
async def test_uninitialized_adapter():
    adapter = DuckDuckGoSearchAdapter()

    assert not adapter.is_available
    assert adapter.provider_name == "DuckDuckGo"
    with pytest.raises(RuntimeError):
        await adapter.search("query")
