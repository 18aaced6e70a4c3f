"""Domain models describing models installed on the model server."""

from pydantic import BaseModel, Field


class ModelCapability(BaseModel):
    """Cached tool-support verdict for one model."""

    name: str
    supports_tools: bool
    checked_at: float = Field(..., description="Clock reading when the probe finished")


class ModelInfo(BaseModel):
    """A model listed by the model server."""

    name: str
    size: int = Field(default=0, ge=0, description="Size on disk in bytes")


class ModelOption(ModelInfo):
    """A listed model annotated for selection."""

    size_label: str
    has_tools: bool = False
