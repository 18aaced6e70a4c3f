"""Domain models for web search results."""

from typing import List, Optional

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """A result scraped from the search provider's page."""

    title: str = Field(..., min_length=1, description="Result title")
    snippet: str = Field(default="", description="Result snippet, may be empty")
    url: str = Field(..., description="Target URL")
    source_domain: str = Field(..., description="Host name without a leading www.")


class RankedResult(SearchResult):
    """A search result labelled with its credibility tier."""

    tier: int = Field(..., ge=1, le=5, description="1 = most credible, 5 = known unreliable")
    tier_label: str = Field(..., description="Display label for the tier")


class SearchOutcome(BaseModel):
    """Outcome of one web search dispatch."""

    success: bool
    query: str
    results: List[RankedResult] = Field(default_factory=list)
    summary: str = Field(..., description="Text handed back to the model as the tool result")
    error: Optional[str] = None
