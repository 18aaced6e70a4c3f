"""Detects and caches whether models support tool calling."""

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Optional

from cachetools import TTLCache

from ..models.model_info import ModelCapability
from ..ports.model_server import ModelServer

logger = logging.getLogger(__name__)

TOOL_CACHE_TTL = 3600.0  # 1 hour

# Tool-invocation markers found in chat templates of tool-capable models
TOOL_TEMPLATE_PATTERNS = (
    "<tool_call>",
    "<|tool_call|>",
    "<<tool_call>>",
    "<function_call>",
    "<tools>",
    "</tools>",
    "[tool_calls]",
    "<|python_tag|>",
    '{"name":',
    '"function"',
    "action:",
    "observation:",
)

KNOWN_TOOL_FAMILIES = (
    "qwen", "qwen2", "qwen2.5", "qwen3",
    "llama3", "llama-3", "llama3.1", "llama3.2", "llama3.3",
    "mistral", "mistral-nemo", "mistral-small", "mistral-large",
    "mixtral",
    "command-r", "command-r-plus",
    "hermes", "nous-hermes",
    "functionary",
    "firefunction",
    "nexusraven",
    "gorilla",
    "deepseek",
)


def template_mentions_tools(template: str) -> bool:
    template = (template or "").lower()
    return any(pattern in template for pattern in TOOL_TEMPLATE_PATTERNS)


def modelfile_mentions_tools(modelfile: str) -> bool:
    modelfile = (modelfile or "").lower()
    return "tool" in modelfile or "function call" in modelfile


def is_known_tool_family(model_name: str) -> bool:
    model_lower = (model_name or "").lower()
    return any(family in model_lower for family in KNOWN_TOOL_FAMILIES)


def detect_tool_support(model_name: str, metadata: Dict[str, Any]) -> bool:
    """Heuristic tool-support check over model metadata.

    True if the template carries tool markers, the modelfile mentions tools
    or function calls, or the name belongs to a known tool-capable family.
    """
    template = metadata.get("template") if isinstance(metadata.get("template"), str) else ""
    modelfile = metadata.get("modelfile") if isinstance(metadata.get("modelfile"), str) else ""

    has_tool_template = template_mentions_tools(template)
    has_tool_modelfile = modelfile_mentions_tools(modelfile)
    known_family = is_known_tool_family(model_name)

    logger.debug(
        f"🔧 {model_name}: template={has_tool_template}, modelfile={has_tool_modelfile}, family={known_family}"
    )
    return has_tool_template or has_tool_modelfile or known_family


class CapabilityCache:
    """Per-model tool-support cache with deduplicated probes.

    Entries expire ``ttl`` seconds after the probe finished. Concurrent
    callers for the same model share one in-flight probe. Probe failures are
    cached as ``False`` for the full TTL.
    """

    def __init__(
        self,
        model_server: ModelServer,
        ttl: float = TOOL_CACHE_TTL,
        maxsize: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            model_server: Server queried for model metadata
            ttl: Entry lifetime in seconds
            maxsize: Maximum number of cached models
            clock: Time source, injectable for tests
        """
        self._server = model_server
        self._clock = clock
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=clock)
        self._pending: Dict[str, "asyncio.Future[bool]"] = {}

    async def has_tool_support(self, model_name: str) -> bool:
        """Return whether ``model_name`` supports tool calling."""
        cached: Optional[ModelCapability] = self._cache.get(model_name)
        if cached is not None:
            return cached.supports_tools

        probe = self._pending.get(model_name)
        if probe is None:
            probe = asyncio.ensure_future(self._probe(model_name))
            self._pending[model_name] = probe

        # Shielded so one caller's cancellation does not abort a shared probe
        return await asyncio.shield(probe)

    async def _probe(self, model_name: str) -> bool:
        try:
            try:
                metadata = await self._server.show_model(model_name)
            except Exception as e:
                logger.error(f"❌ Error checking tool support for {model_name}: {e}")
                supports_tools = False
            else:
                supports_tools = detect_tool_support(model_name, metadata)
                logger.info(f"🔧 Model {model_name}: tool support = {supports_tools}")

            self._cache[model_name] = ModelCapability(
                name=model_name,
                supports_tools=supports_tools,
                checked_at=self._clock(),
            )
            return supports_tools
        finally:
            self._pending.pop(model_name, None)

    def get_cached(self, model_name: str) -> Optional[ModelCapability]:
        """Return the unexpired cache entry, if any."""
        return self._cache.get(model_name)

    def is_probing(self, model_name: str) -> bool:
        return model_name in self._pending

    def invalidate(self, model_name: str) -> None:
        self._cache.pop(model_name, None)

    def clear(self) -> None:
        self._cache.clear()
