"""DuckDuckGo HTML implementation of the search provider interface."""

import logging
from typing import List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.cancellation import CancellationToken
from ...domain.models.search import SearchResult
from ...domain.ports.search_provider import SearchProvider
from ..http.resilient_client import ResilientRequestClient
from .result_parser import parse_search_results

logger = logging.getLogger(__name__)


class DuckDuckGoConfig(BaseModel):
    """Configuration for DuckDuckGo adapter."""

    endpoint: str = Field(
        default="https://html.duckduckgo.com/html/",
        description="HTML search endpoint (no API key needed)",
    )
    recency: Optional[str] = Field(default="m", description="Date filter; 'm' = past month, None = any time")
    timeout: float = Field(default=15.0, description="Request timeout in seconds")
    user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
        description="User agent sent with search requests",
    )


class DuckDuckGoSearchAdapter(SearchProvider):
    """Scrapes DuckDuckGo's HTML endpoint for web results."""

    def __init__(
        self,
        config: Optional[DuckDuckGoConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        provider_name: str = "DuckDuckGo",
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            client: Pre-built HTTP client, mainly for tests
            provider_name: Name of the provider
        """
        self._config = config or DuckDuckGoConfig()
        self._name = provider_name
        self._client = client
        # One request per search; failures are reported to the caller, not retried
        self._requests = ResilientRequestClient(client, max_attempts=1) if client is not None else None

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._config.timeout,
                headers={
                    "Accept": "text/html",
                    "User-Agent": self._config.user_agent,
                },
            )
            self._requests = ResilientRequestClient(self._client, max_attempts=1)

    async def search(
        self,
        query: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[SearchResult]:
        """Search the web for ``query``.

        Args:
            query: Search query
            cancel_token: Session token aborting the request

        Returns:
            Parsed results in provider order
        """
        if self._requests is None:
            raise RuntimeError("Provider not initialized")

        params = {"q": query}
        if self._config.recency:
            params["df"] = self._config.recency

        logger.info(f"🌐 Searching {self._name} for: {query}")
        request = self._client.build_request("GET", self._config.endpoint, params=params)
        response = await self._requests.send(request, cancel_token=cancel_token)

        results = parse_search_results(response.text, str(request.url))
        logger.info(f"📄 {self._name} returned {len(results)} result(s)")
        return results

    async def shutdown(self) -> None:
        """Shutdown the provider and clean up resources."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._requests = None

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._client is not None
