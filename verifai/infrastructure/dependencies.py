"""Dependency injection configuration for hexagonal architecture."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..domain.errors import CancelReason
from ..domain.ports.settings_store import SettingsStore
from ..domain.services.capability_cache import CapabilityCache
from ..domain.services.fact_check_orchestrator import FactCheckOrchestrator
from ..domain.services.fact_checking_service import FactCheckingService
from ..domain.services.model_selection_service import ModelSelectionService
from ..domain.services.search_executor import SearchExecutor
from ..domain.services.verdict_parser import VerdictParser
from .config import VerifAIConfig
from .ollama.ollama_adapter import OllamaAdapter
from .search.duckduckgo_adapter import DuckDuckGoSearchAdapter
from .settings.memory_store import InMemorySettingsStore, JsonFileSettingsStore

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection."""

    def __init__(self, config: Optional[VerifAIConfig] = None):
        """Initialize service container.

        Args:
            config: Configuration; read from the environment when omitted
        """
        self.config = config or VerifAIConfig.from_env()
        self._services: Dict[str, Any] = {}
        self._setup_services()

    def _build_settings_store(self) -> SettingsStore:
        if self.config.settings_path:
            return JsonFileSettingsStore(Path(self.config.settings_path), capacity=self.config.storage_capacity)
        return InMemorySettingsStore(capacity=self.config.storage_capacity)

    def _setup_services(self):
        """Setup all services and their dependencies."""
        logger.info("🔧 Setting up service container...")

        # Infrastructure adapters
        model_server = OllamaAdapter(config=self.config.ollama_config())
        search_provider = DuckDuckGoSearchAdapter(config=self.config.search_config())
        settings_store = self._build_settings_store()

        # Domain services
        capability_cache = CapabilityCache(model_server, ttl=self.config.tool_cache_ttl)
        search_executor = SearchExecutor(search_provider, max_results=self.config.max_search_results)
        orchestrator = FactCheckOrchestrator(
            model_server,
            capability_cache,
            search_executor,
            verdict_parser=VerdictParser(),
            config=self.config.orchestrator_config(),
        )
        fact_checking_service = FactCheckingService(orchestrator)
        model_selection_service = ModelSelectionService(
            model_server,
            capability_cache,
            settings_store,
            quota_warning_bytes=self.config.storage_quota_warning,
        )

        self._services = {
            "model_server": model_server,
            "search_provider": search_provider,
            "settings_store": settings_store,
            "capability_cache": capability_cache,
            "fact_checking_service": fact_checking_service,
            "model_selection_service": model_selection_service,
        }

        logger.info("✅ Service container setup completed")

    async def initialize(self) -> None:
        """Open the adapters' HTTP clients."""
        await self.get("model_server").initialize()
        await self.get("search_provider").initialize()
        logger.info("✅ Adapters initialized")

    async def shutdown(self) -> None:
        """Cancel any running fact-check and close the adapters."""
        self.get_fact_checking_service().cancel(CancelReason.SHUTDOWN)
        await self.get("search_provider").shutdown()
        await self.get("model_server").shutdown()
        logger.info("👋 Adapters shut down")

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Args:
            service_name: Name of the service

        Returns:
            Service instance

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    def get_fact_checking_service(self) -> FactCheckingService:
        """Get fact checking service."""
        return self.get("fact_checking_service")

    def get_model_selection_service(self) -> ModelSelectionService:
        """Get model selection service."""
        return self.get("model_selection_service")

    def get_model_server(self) -> OllamaAdapter:
        return self.get("model_server")


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance.

    Returns:
        Service container instance
    """
    load_dotenv()
    logger.info("📁 Environment variables loaded from .env file via python-dotenv")
    return ServiceContainer()


# Convenience functions for FastAPI dependency injection
def get_fact_checking_service() -> FactCheckingService:
    """FastAPI dependency for fact checking service."""
    return get_service_container().get_fact_checking_service()


def get_model_selection_service() -> ModelSelectionService:
    """FastAPI dependency for model selection service."""
    return get_service_container().get_model_selection_service()


def get_model_server() -> OllamaAdapter:
    """FastAPI dependency for the model server adapter."""
    return get_service_container().get_model_server()
