"""Fake collaborators and builders shared by the tests."""

import asyncio
import json
from typing import Any, Callable, Dict, List, Optional

from httpx import AsyncClient, MockTransport, Request, Response

from verifai.domain.models.model_info import ModelInfo
from verifai.domain.models.search import SearchResult
from verifai.domain.services.credibility import extract_domain


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Replacement for ``asyncio.sleep`` that records delays and returns at once."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


class FakeModelServer:
    """Scripted model server.

    ``chat_responses`` are returned in order; each entry may also be an
    exception to raise. ``metadata`` maps model names to ``/api/show`` bodies.
    """

    def __init__(
        self,
        chat_responses: Optional[List[Any]] = None,
        metadata: Optional[Dict[str, Dict[str, Any]]] = None,
        models: Optional[List[ModelInfo]] = None,
    ):
        self.chat_responses = list(chat_responses or [])
        self.metadata = metadata or {}
        self.models = models or []
        self.chat_calls: List[Dict[str, Any]] = []
        self.show_calls: List[str] = []
        self.show_delay = 0.0
        self.chat_delay = 0.0

    async def initialize(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    async def chat(self, model, messages, tools=None, cancel_token=None):
        # Snapshot the payload; the transcript keeps growing after the call
        self.chat_calls.append({"model": model, "messages": json.loads(json.dumps(messages)), "tools": tools})
        if self.chat_delay:
            if cancel_token is not None:
                await cancel_token.guard(asyncio.sleep(self.chat_delay))
            else:
                await asyncio.sleep(self.chat_delay)
        response = self.chat_responses.pop(0) if self.chat_responses else {"message": {"content": ""}, "done": True}
        if isinstance(response, Exception):
            raise response
        return response

    async def show_model(self, model):
        self.show_calls.append(model)
        if self.show_delay:
            await asyncio.sleep(self.show_delay)
        value = self.metadata.get(model, {})
        if isinstance(value, Exception):
            raise value
        return value

    async def list_models(self):
        return list(self.models)

    @property
    def provider_name(self) -> str:
        return "FakeModels"

    @property
    def is_available(self) -> bool:
        return True


class FakeSearchProvider:
    """Search provider answering from a query -> results table."""

    def __init__(self, results_by_query: Optional[Dict[str, List[SearchResult]]] = None, default=None):
        self.results_by_query = results_by_query or {}
        self.default = default if default is not None else []
        self.queries: List[str] = []

    async def initialize(self) -> None:
        pass

    async def shutdown(self) -> None:
        pass

    async def search(self, query, cancel_token=None):
        self.queries.append(query)
        value = self.results_by_query.get(query, self.default)
        if isinstance(value, Exception):
            raise value
        return list(value)

    @property
    def provider_name(self) -> str:
        return "Fake"


def make_result(url: str, title: Optional[str] = None, snippet: str = "") -> SearchResult:
    domain = extract_domain(url)
    return SearchResult(title=title or domain, snippet=snippet, url=url, source_domain=domain)


def tool_call_response(*queries: str, call_ids: Optional[List[str]] = None, content: str = "") -> Dict[str, Any]:
    """A chat response requesting one ``web_search`` call per query."""
    calls = []
    for index, query in enumerate(queries):
        call: Dict[str, Any] = {"function": {"name": "web_search", "arguments": {"query": query}}}
        if call_ids:
            call["id"] = call_ids[index]
        calls.append(call)
    return {"message": {"role": "assistant", "content": content, "tool_calls": calls}, "done": True}


def answer_response(text: str) -> Dict[str, Any]:
    return {"message": {"role": "assistant", "content": text}, "done": True}


TOOL_MODEL_METADATA = {"template": "{{ if .Tools }}<tools>{{ .Tools }}</tools>{{ end }}", "modelfile": ""}
PLAIN_MODEL_METADATA = {"template": "{{ .Prompt }}", "modelfile": "FROM plain"}


def mock_client(handler: Callable[[Request], Response], base_url: str = "http://ollama.test") -> AsyncClient:
    """AsyncClient whose requests are answered by ``handler``."""
    return AsyncClient(transport=MockTransport(handler), base_url=base_url)
