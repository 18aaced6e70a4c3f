"""Test configuration and common fixtures."""

from typing import Any, Callable

import pytest
import pytest_asyncio

from fakes import (
    PLAIN_MODEL_METADATA,
    TOOL_MODEL_METADATA,
    FakeClock,
    FakeModelServer,
    FakeSearchProvider,
    RecordingSleep,
)
from verifai.domain.cancellation import CancellationToken
from verifai.domain.services.capability_cache import CapabilityCache
from verifai.domain.services.fact_check_orchestrator import FactCheckOrchestrator, OrchestratorConfig
from verifai.domain.services.search_executor import SearchExecutor


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def model_server() -> FakeModelServer:
    return FakeModelServer(metadata={"tool-model": TOOL_MODEL_METADATA, "plain-model": PLAIN_MODEL_METADATA})


@pytest.fixture
def search_provider() -> FakeSearchProvider:
    return FakeSearchProvider()


@pytest.fixture
def build_orchestrator(model_server: FakeModelServer, search_provider: FakeSearchProvider) -> Callable[..., FactCheckOrchestrator]:
    """Factory building an orchestrator over the fake collaborators."""

    def _build(**config: Any) -> FactCheckOrchestrator:
        return FactCheckOrchestrator(
            model_server,
            CapabilityCache(model_server),
            SearchExecutor(search_provider),
            config=OrchestratorConfig(**config),
        )

    return _build


@pytest_asyncio.fixture
async def cancellation_token() -> CancellationToken:
    token = CancellationToken()
    yield token
    token.clear_timer()
