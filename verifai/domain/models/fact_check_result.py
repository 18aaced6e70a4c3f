"""Domain model for fact checking results."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .search import RankedResult
from .verification import ConfidenceLevel, Verdict


class FactCheckResult(BaseModel):
    """Result of a fact check operation."""

    verdict: Verdict = Field(default=Verdict.UNVERIFIABLE)
    confidence: Optional[ConfidenceLevel] = Field(default=None, description="Absent when the model declared none")
    raw_text: str = Field(..., description="Final model answer as received")
    narrative: str = Field(default="", description="Answer with verdict/confidence declarations removed")
    searches_performed: int = Field(default=0, ge=0)
    sources: List[RankedResult] = Field(default_factory=list)
