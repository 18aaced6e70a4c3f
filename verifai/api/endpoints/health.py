"""Health check endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...domain.services.fact_checking_service import FactCheckingService
from ...infrastructure.dependencies import get_fact_checking_service, get_model_server
from ...infrastructure.ollama.ollama_adapter import OllamaAdapter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

VERSION = "0.1.0"


class ModelServerHealth(BaseModel):
    name: str
    initialized: bool
    reachable: bool
    model_count: Optional[int] = None


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    busy: bool
    model_server: ModelServerHealth


@router.get("/health", response_model=HealthResponse)
async def health_check(
    model_server: OllamaAdapter = Depends(get_model_server),
    service: FactCheckingService = Depends(get_fact_checking_service),
) -> HealthResponse:
    """Check service health and model server reachability.

    Returns:
        ``healthy`` when the model server answers, ``degraded`` otherwise
    """
    reachable = False
    model_count = None
    if model_server.is_available:
        try:
            model_count = len(await model_server.list_models())
            reachable = True
        except Exception as e:
            logger.warning(f"⚠️ Model server unreachable: {e}")

    return HealthResponse(
        status="healthy" if reachable else "degraded",
        version=VERSION,
        busy=service.is_busy(),
        model_server=ModelServerHealth(
            name=model_server.provider_name,
            initialized=model_server.is_available,
            reachable=reachable,
            model_count=model_count,
        ),
    )
