"""Search provider interface for web evidence."""

from typing import List, Optional, Protocol

from ..cancellation import CancellationToken
from ..models.search import SearchResult


class SearchProvider(Protocol):
    """Protocol for text-search providers."""

    async def initialize(self) -> None:
        """Initialize the provider."""
        ...

    async def search(
        self,
        query: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[SearchResult]:
        """Run a text search and return the raw results in provider order.

        Raises:
            RequestError: If the provider could not be reached
        """
        ...

    async def shutdown(self) -> None:
        """Shutdown the provider and clean up resources."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...
