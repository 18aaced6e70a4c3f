"""Fact-checking API endpoints."""

import asyncio
import contextlib
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from ...domain.errors import CancelReason, SessionBusyError, VerifAIError
from ...domain.models.fact_check_result import FactCheckResult
from ...domain.services.fact_check_orchestrator import FactCheckProgress
from ...domain.services.fact_checking_service import FactCheckingService, FactCheckStatus
from ...domain.services.model_selection_service import ModelSelectionService
from ...infrastructure.dependencies import get_fact_checking_service, get_model_selection_service
from ..errors import error_detail, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fact-check", tags=["fact-check"])


class FactCheckRequest(BaseModel):
    """Request model for claim fact-checking."""

    claim: str = Field(..., description="Claim to fact-check")
    model: Optional[str] = Field(None, description="Model name; defaults to the selected model")


class CancelResponse(BaseModel):
    cancelled: bool


async def _resolve_model(requested: Optional[str], selection: ModelSelectionService) -> str:
    if requested:
        return requested
    return await selection.get_selected_model() or ""


@router.post("", response_model=FactCheckResult)
async def check_claim(
    request: FactCheckRequest,
    service: FactCheckingService = Depends(get_fact_checking_service),
    selection: ModelSelectionService = Depends(get_model_selection_service),
) -> FactCheckResult:
    """Fact-check a single claim.

    Args:
        request: Claim and optional model

    Returns:
        Verdict, confidence, narrative and tiered sources
    """
    model = await _resolve_model(request.model, selection)
    logger.info(f"🔍 Fact-check requested with model {model or '<none>'}")
    try:
        return await service.fact_check(request.claim, model)
    except VerifAIError as e:
        logger.warning(f"⚠️ Fact-check failed: {type(e).__name__}: {e}")
        raise to_http_exception(e)


@router.post("/cancel", response_model=CancelResponse)
async def cancel_fact_check(service: FactCheckingService = Depends(get_fact_checking_service)) -> CancelResponse:
    """Cancel the running fact-check, if any."""
    return CancelResponse(cancelled=service.cancel(CancelReason.USER))


@router.get("/status", response_model=FactCheckStatus)
async def fact_check_status(service: FactCheckingService = Depends(get_fact_checking_service)) -> FactCheckStatus:
    """Report whether a fact-check is running and the last session's state."""
    return service.status()


def _progress_event(progress: FactCheckProgress) -> Dict[str, Any]:
    return {"type": "progress", **progress.model_dump(mode="json")}


def _error_event(error: Exception) -> Dict[str, Any]:
    return {**error_detail(error), "type": "error"}


async def _stream_fact_check(
    websocket: WebSocket, service: FactCheckingService, claim: str, model: str
) -> "asyncio.Future[FactCheckResult]":
    """Run one fact-check, forwarding its progress to the socket.

    The socket is read while the session runs so a disconnect is noticed at
    once. The session task never outlives this call.
    """
    queue: "asyncio.Queue[FactCheckProgress]" = asyncio.Queue()
    task = asyncio.ensure_future(service.fact_check(claim, model, progress=queue.put_nowait))
    receiver = asyncio.ensure_future(websocket.receive())
    getter: Optional["asyncio.Future[FactCheckProgress]"] = None
    try:
        while not task.done():
            getter = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait({task, getter, receiver}, return_when=asyncio.FIRST_COMPLETED)
            if getter in done:
                await websocket.send_json(_progress_event(getter.result()))
                continue
            getter.cancel()
            if receiver in done:
                message = receiver.result()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                await websocket.send_json(_error_event(SessionBusyError("A fact-check is already in progress.")))
                receiver = asyncio.ensure_future(websocket.receive())

        while not queue.empty():
            await websocket.send_json(_progress_event(queue.get_nowait()))
        return task
    finally:
        receiver.cancel()
        if getter is not None:
            getter.cancel()
        if not task.done():
            logger.info("🛑 Stopping fact-check for closed WebSocket")
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError, VerifAIError):
                await task


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    service: FactCheckingService = Depends(get_fact_checking_service),
    selection: ModelSelectionService = Depends(get_model_selection_service),
):
    """Fact-checking via WebSocket.

    Each ``{"claim": ..., "model": ...}`` message starts a fact-check.
    Progress events are streamed, followed by a ``result`` or ``error``
    event. Disconnecting stops the running fact-check.
    """
    await websocket.accept()

    try:
        while True:
            data = await websocket.receive_json()
            claim = data.get("claim", "")
            model = await _resolve_model(data.get("model"), selection)

            task = await _stream_fact_check(websocket, service, claim, model)
            try:
                result = task.result()
            except VerifAIError as e:
                logger.warning(f"⚠️ WebSocket fact-check failed: {type(e).__name__}: {e}")
                await websocket.send_json(_error_event(e))
            else:
                await websocket.send_json({"type": "result", "result": result.model_dump(mode="json")})

    except WebSocketDisconnect:
        logger.info("🔌 WebSocket client disconnected")
    except Exception as e:
        logger.error(f"WebSocket error: {type(e).__name__}: {str(e)}", exc_info=True)
        await websocket.close(code=1011, reason=str(e)[:120])
