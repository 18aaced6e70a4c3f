"""Ollama implementation of the model server interface."""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.cancellation import CancellationToken
from ...domain.errors import FatalRequestError
from ...domain.models.model_info import ModelInfo
from ...domain.ports.model_server import ModelServer
from ..http.resilient_client import ResilientRequestClient

logger = logging.getLogger(__name__)


class OllamaConfig(BaseModel):
    """Configuration for Ollama adapter."""

    base_url: str = Field(default="http://localhost:11434", description="Ollama server endpoint")
    timeout: float = Field(default=120.0, description="Per-request timeout in seconds")
    max_attempts: int = Field(default=3, description="Attempts per request, including the first")
    retry_base_delay: float = Field(default=1.0, description="Backoff delay before the first retry in seconds")


class OllamaAdapter(ModelServer):
    """Ollama implementation of the model server interface."""

    def __init__(
        self,
        config: Optional[OllamaConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            client: Pre-built HTTP client, mainly for tests
        """
        self._config = config or OllamaConfig()
        self._client = client
        self._requests: Optional[ResilientRequestClient] = None
        if client is not None:
            self._requests = self._build_request_client(client)

    def _build_request_client(self, client: httpx.AsyncClient) -> ResilientRequestClient:
        return ResilientRequestClient(
            client,
            max_attempts=self._config.max_attempts,
            base_delay=self._config.retry_base_delay,
        )

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers={"Content-Type": "application/json"},
            )
            self._requests = self._build_request_client(self._client)
            logger.info(f"🦙 Ollama client ready at {self._config.base_url}")

    def _ensure_client(self) -> ResilientRequestClient:
        if self._requests is None:
            raise RuntimeError("Provider not initialized")
        return self._requests

    async def chat(
        self,
        model: str,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Any:
        """Send a non-streaming chat request.

        Returns:
            The decoded response body; usually a mapping with a ``message``
        """
        requests = self._ensure_client()
        body: Dict[str, Any] = {"model": model, "stream": False, "messages": messages}
        if tools:
            body["tools"] = tools

        request = self._client.build_request("POST", "/api/chat", json=body)
        response = await requests.send(request, cancel_token=cancel_token)
        return self._decode(response)

    async def show_model(self, model: str) -> Dict[str, Any]:
        """Fetch model metadata from ``/api/show``."""
        requests = self._ensure_client()
        request = self._client.build_request("POST", "/api/show", json={"name": model})
        response = await requests.send(request)
        data = self._decode(response)
        if not isinstance(data, dict):
            raise FatalRequestError(f"Unexpected metadata format for model {model}")
        return data

    async def list_models(self) -> List[ModelInfo]:
        """List installed models from ``/api/tags``."""
        requests = self._ensure_client()
        request = self._client.build_request("GET", "/api/tags")
        response = await requests.send(request)
        data = self._decode(response)

        models = data.get("models") if isinstance(data, dict) else None
        if not isinstance(models, list):
            raise FatalRequestError("Invalid response format from Ollama")

        return [
            ModelInfo(name=entry["name"], size=entry.get("size") or 0)
            for entry in models
            if isinstance(entry, dict) and entry.get("name")
        ]

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise FatalRequestError(f"Malformed JSON response from model server: {e}") from e

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._requests = None

    @property
    def provider_name(self) -> str:
        """Get the name of the model server."""
        return "Ollama"

    @property
    def is_available(self) -> bool:
        """Check if the client is ready."""
        return self._client is not None
