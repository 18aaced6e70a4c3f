"""Model catalog and selection endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ...domain.errors import FactCheckValidationError, VerifAIError
from ...domain.models.model_info import ModelOption
from ...domain.services.model_selection_service import ModelSelectionService
from ...infrastructure.dependencies import get_model_selection_service
from ..errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/models", tags=["models"])


class ModelListResponse(BaseModel):
    models: List[ModelOption]
    selected: Optional[str] = None
    tool_count: int = 0
    status: str


class SelectModelRequest(BaseModel):
    model: str = Field(..., description="Name of an installed model")


class SelectModelResponse(BaseModel):
    selected: str
    persisted: bool


@router.get("", response_model=ModelListResponse)
async def list_models(selection: ModelSelectionService = Depends(get_model_selection_service)) -> ModelListResponse:
    """List installed models, tool-capable first."""
    try:
        catalog = await selection.list_models()
    except VerifAIError as e:
        logger.error(f"❌ Error fetching models: {e}")
        raise to_http_exception(e)

    return ModelListResponse(
        models=catalog.models,
        selected=catalog.selected,
        tool_count=catalog.tool_count,
        status=catalog.status_text,
    )


@router.put("/selected", response_model=SelectModelResponse)
async def select_model(
    request: SelectModelRequest,
    selection: ModelSelectionService = Depends(get_model_selection_service),
) -> SelectModelResponse:
    """Remember the model used when a fact-check names none."""
    model = request.model.strip()
    if not model:
        raise to_http_exception(FactCheckValidationError("Please select a model first."))
    persisted = await selection.save_selected_model(model)
    return SelectModelResponse(selected=model, persisted=persisted)
