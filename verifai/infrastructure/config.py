"""VerifAI configuration management."""

import logging
import os
from typing import Optional

from pydantic import BaseModel

from ..domain.services.fact_check_orchestrator import OrchestratorConfig
from .ollama.ollama_adapter import OllamaConfig
from .search.duckduckgo_adapter import DuckDuckGoConfig

logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"⚠️ Invalid value for {name}: {raw!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"⚠️ Invalid value for {name}: {raw!r}, using {default}")
        return default


class VerifAIConfig(BaseModel):
    """Runtime settings for the fact-checking service."""

    ollama_endpoint: str = "http://localhost:11434"
    request_timeout: float = 120.0  # whole session, seconds
    max_search_iterations: int = 3
    max_search_results: int = 7
    max_retries: int = 3  # attempts per model request
    retry_base_delay: float = 1.0
    tool_cache_ttl: float = 3600.0
    search_endpoint: str = "https://html.duckduckgo.com/html/"
    search_recency: Optional[str] = "m"
    search_timeout: float = 15.0
    storage_quota_warning: int = 4 * 1024 * 1024
    storage_capacity: int = 5 * 1024 * 1024
    settings_path: Optional[str] = None  # in-memory settings when unset
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "VerifAIConfig":
        """Create configuration from ``VERIFAI_*`` environment variables."""
        defaults = cls()
        recency = os.getenv("VERIFAI_SEARCH_RECENCY", defaults.search_recency)
        config = cls(
            ollama_endpoint=os.getenv("VERIFAI_OLLAMA_ENDPOINT", defaults.ollama_endpoint).rstrip("/"),
            request_timeout=_env_float("VERIFAI_REQUEST_TIMEOUT", defaults.request_timeout),
            max_search_iterations=_env_int("VERIFAI_MAX_SEARCH_ITERATIONS", defaults.max_search_iterations),
            max_search_results=_env_int("VERIFAI_MAX_SEARCH_RESULTS", defaults.max_search_results),
            max_retries=_env_int("VERIFAI_MAX_RETRIES", defaults.max_retries),
            retry_base_delay=_env_float("VERIFAI_RETRY_BASE_DELAY", defaults.retry_base_delay),
            tool_cache_ttl=_env_float("VERIFAI_TOOL_CACHE_TTL", defaults.tool_cache_ttl),
            search_endpoint=os.getenv("VERIFAI_SEARCH_ENDPOINT", defaults.search_endpoint),
            search_recency=recency or None,
            search_timeout=_env_float("VERIFAI_SEARCH_TIMEOUT", defaults.search_timeout),
            storage_quota_warning=_env_int("VERIFAI_STORAGE_QUOTA_WARNING", defaults.storage_quota_warning),
            storage_capacity=_env_int("VERIFAI_STORAGE_CAPACITY", defaults.storage_capacity),
            settings_path=os.getenv("VERIFAI_SETTINGS_PATH") or None,
            log_level=os.getenv("VERIFAI_LOG_LEVEL", defaults.log_level).upper(),
        )

        logger.info(f"🦙 Ollama endpoint: {config.ollama_endpoint}")
        if config.settings_path:
            logger.info(f"💾 Settings file: {config.settings_path}")
        else:
            logger.info("💾 Settings kept in memory (VERIFAI_SETTINGS_PATH not set)")
        return config

    def ollama_config(self) -> OllamaConfig:
        return OllamaConfig(
            base_url=self.ollama_endpoint,
            timeout=self.request_timeout,
            max_attempts=self.max_retries,
            retry_base_delay=self.retry_base_delay,
        )

    def search_config(self) -> DuckDuckGoConfig:
        return DuckDuckGoConfig(
            endpoint=self.search_endpoint,
            recency=self.search_recency,
            timeout=self.search_timeout,
        )

    def orchestrator_config(self) -> OrchestratorConfig:
        return OrchestratorConfig(
            max_search_iterations=self.max_search_iterations,
            request_timeout=self.request_timeout,
        )
