"""Protocol for chat-completion model servers."""

from typing import Any, Dict, List, Optional, Protocol

from ..cancellation import CancellationToken
from ..models.model_info import ModelInfo


class ModelServer(Protocol):
    """Protocol defining the interface for locally hosted model servers."""

    async def initialize(self) -> None:
        """Initialize the model server client."""
        ...

    async def shutdown(self) -> None:
        """Clean up resources."""
        ...

    async def chat(
        self,
        model: str,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Any:
        """Send a non-streaming chat request and return the decoded body."""
        ...

    async def show_model(self, model: str) -> Dict[str, Any]:
        """Fetch model metadata (template and modelfile text)."""
        ...

    async def list_models(self) -> List[ModelInfo]:
        """List models installed on the server."""
        ...
