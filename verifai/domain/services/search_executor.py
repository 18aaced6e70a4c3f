"""Executes web searches for the model and ranks the sources."""

import logging
from typing import List, Optional

from ..cancellation import CancellationToken
from ..errors import SessionAbortedError
from ..models.search import RankedResult, SearchOutcome
from ..ports.search_provider import SearchProvider
from .credibility import RELIABILITY_GUIDE, rank_result, sort_by_tier

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 7
NO_RESULTS_SUMMARY = "No search results found for this query."


def format_results_for_model(results: List[RankedResult]) -> str:
    """Format search results as the tool result handed to the model.

    Each result carries its reliability label so the model can weight
    tier 1-2 sources over tier 4-5.
    """
    if not results:
        return "No relevant search results found."

    lines = ["Web Search Results (sorted by source reliability):", ""]
    for index, result in enumerate(results, 1):
        lines.append(f"{index}. [{result.tier_label}] **{result.title}**")
        lines.append(f"   Source: {result.source_domain}")
        if result.snippet:
            lines.append(f"   Summary: {result.snippet}")
        lines.append(f"   URL: {result.url}")
        lines.append("")

    return "\n".join(lines) + "\n" + RELIABILITY_GUIDE


def unavailable_summary(error: str) -> str:
    return (
        f"Web search failed: {error}. Please verify this claim using your knowledge "
        "and indicate that real-time web verification was not available."
    )


class SearchExecutor:
    """Runs one search, tiers and sorts the results, and summarizes them."""

    def __init__(self, provider: SearchProvider, max_results: int = MAX_SEARCH_RESULTS):
        """Initialize the executor.

        Args:
            provider: Text-search provider
            max_results: Number of top-ranked results kept
        """
        self._provider = provider
        self._max_results = max_results

    async def search(self, query: str, cancel_token: Optional[CancellationToken] = None) -> SearchOutcome:
        """Search for ``query``.

        Failures degrade to ``success=False`` with an explanatory summary so
        the conversation can continue on the model's own knowledge.
        Session cancellation is not a search failure and propagates.
        """
        try:
            raw_results = await self._provider.search(query, cancel_token=cancel_token)
        except SessionAbortedError:
            raise
        except Exception as e:
            logger.warning(f"⚠️ Web search failed for '{query}': {e}")
            return SearchOutcome(
                success=False,
                query=query,
                summary=unavailable_summary(str(e)),
                error=str(e),
            )

        if not raw_results:
            return SearchOutcome(success=True, query=query, summary=NO_RESULTS_SUMMARY)

        ranked = sort_by_tier(rank_result(result) for result in raw_results)[: self._max_results]
        logger.info(
            f"🏷️ Ranked {len(ranked)} source(s) for '{query}': "
            + ", ".join(f"{r.source_domain}={r.tier}" for r in ranked)
        )
        return SearchOutcome(
            success=True,
            query=query,
            results=ranked,
            summary=format_results_for_model(ranked),
        )
