"""Tests for the fact-checking service busy gate."""

import asyncio

import pytest

from fakes import answer_response
from verifai.domain.errors import FactCheckCancelledError, FactCheckValidationError, SessionBusyError
from verifai.domain.models.verification import Verdict
from verifai.domain.services.fact_check_orchestrator import SessionState
from verifai.domain.services.fact_checking_service import FactCheckingService


@pytest.fixture
def service(build_orchestrator) -> FactCheckingService:
    return FactCheckingService(build_orchestrator())


@pytest.mark.asyncio
async def test_fact_check_returns_result(service: FactCheckingService, model_server):
    model_server.chat_responses = [answer_response("**VERDICT:** TRUE\n**CONFIDENCE:** HIGH")]

    result = await service.fact_check("Water boils at 100 C at sea level", "tool-model")

    assert result.verdict == Verdict.TRUE
    assert not service.is_busy()
    status = service.status()
    assert status.state == SessionState.COMPLETE
    assert status.model == "tool-model"


@pytest.mark.asyncio
async def test_second_fact_check_is_rejected_while_busy(service: FactCheckingService, model_server):
    model_server.chat_delay = 30.0

    first = asyncio.ensure_future(service.fact_check("Claim one", "tool-model"))
    await asyncio.sleep(0.01)
    assert service.is_busy()

    with pytest.raises(SessionBusyError):
        await service.fact_check("Claim two", "tool-model")

    assert service.cancel()
    with pytest.raises(FactCheckCancelledError):
        await first
    assert not service.is_busy()


@pytest.mark.asyncio
async def test_gate_released_after_failure(service: FactCheckingService, model_server):
    model_server.chat_responses = [RuntimeError("boom"), answer_response("**VERDICT:** FALSE")]

    with pytest.raises(RuntimeError):
        await service.fact_check("Claim", "tool-model")
    assert not service.is_busy()

    result = await service.fact_check("Claim", "tool-model")
    assert result.verdict == Verdict.FALSE


@pytest.mark.asyncio
async def test_validation_error_does_not_take_gate(service: FactCheckingService):
    with pytest.raises(FactCheckValidationError):
        await service.fact_check("", "tool-model")

    assert not service.is_busy()
    assert service.status().state is None


def test_cancel_when_idle(service: FactCheckingService):
    assert service.cancel() is False


@pytest.mark.asyncio
async def test_cancelled_task_releases_gate(service: FactCheckingService, model_server):
    model_server.chat_delay = 30.0

    task = asyncio.ensure_future(service.fact_check("Claim", "tool-model"))
    await asyncio.sleep(0.01)
    assert service.is_busy()

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert not service.is_busy()
    status = service.status()
    assert status.finished
    assert status.state == SessionState.FAILED
