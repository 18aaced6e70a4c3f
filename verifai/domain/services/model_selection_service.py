"""Lists local models and remembers the user's selection."""

import asyncio
import logging
import math
from typing import List, Optional

from pydantic import BaseModel, Field

from ..errors import SettingsQuotaExceededError
from ..models.model_info import ModelOption
from ..ports.model_server import ModelServer
from ..ports.settings_store import SettingsStore
from .capability_cache import CapabilityCache

logger = logging.getLogger(__name__)

SELECTED_MODEL_KEY = "selectedModel"
STORAGE_QUOTA_WARNING = 4 * 1024 * 1024  # 4 MiB
SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_bytes(size: int) -> str:
    """Human-readable size, e.g. ``4.7 GB``. Trailing ``.0`` is dropped."""
    if size <= 0:
        return "0 B"
    index = min(int(math.floor(math.log(size, 1024))), len(SIZE_UNITS) - 1)
    value = float(f"{size / 1024 ** index:.1f}")
    return f"{value:g} {SIZE_UNITS[index]}"


class ModelCatalog(BaseModel):
    """Models available for fact-checking."""

    models: List[ModelOption] = Field(default_factory=list)
    selected: Optional[str] = None

    @property
    def tool_count(self) -> int:
        return sum(1 for model in self.models if model.has_tools)

    @property
    def status_text(self) -> str:
        if not self.models:
            return "No models available. Run: ollama pull qwen2.5"
        text = f"{len(self.models)} model(s) found • {self.tool_count} with tool support 🔧"
        if self.tool_count == 0:
            text += " • Consider: ollama pull qwen2.5"
        return text


class ModelSelectionService:
    """Model catalog and persisted model selection.

    The selection lives in the settings store. When the store fails, the
    selection is still kept in memory for the lifetime of the service.
    """

    def __init__(
        self,
        model_server: ModelServer,
        capability_cache: CapabilityCache,
        settings_store: SettingsStore,
        quota_warning_bytes: int = STORAGE_QUOTA_WARNING,
    ):
        self._server = model_server
        self._capabilities = capability_cache
        self._store = settings_store
        self._quota_warning_bytes = quota_warning_bytes
        self._selected: Optional[str] = None
        self._loaded = False

    async def get_selected_model(self) -> Optional[str]:
        if not self._loaded:
            await self.load_selected_model()
        return self._selected

    async def load_selected_model(self) -> Optional[str]:
        """Read the stored selection into memory."""
        try:
            stored = await self._store.get(SELECTED_MODEL_KEY)
        except Exception as e:
            logger.error(f"❌ Error loading settings: {e}", exc_info=True)
        else:
            if isinstance(stored, str) and stored:
                self._selected = stored
        self._loaded = True
        return self._selected

    async def save_selected_model(self, model: str) -> bool:
        """Select ``model`` and persist it.

        A full store is cleared and the write retried once. The in-memory
        selection is updated either way.

        Returns:
            True if the selection was persisted
        """
        self._selected = model
        self._loaded = True

        bytes_used = await self._bytes_in_use()
        if bytes_used >= self._quota_warning_bytes:
            logger.warning(f"⚠️ Storage quota warning: {bytes_used} bytes used")

        try:
            await self._store.set(SELECTED_MODEL_KEY, model)
        except SettingsQuotaExceededError as e:
            logger.warning(f"⚠️ Settings storage full ({e}), clearing and retrying")
            try:
                await self._store.clear()
                await self._store.set(SELECTED_MODEL_KEY, model)
            except Exception as retry_error:
                logger.error(f"❌ Failed to recover from quota error: {retry_error}", exc_info=True)
                return False
            logger.info(f"💾 Cleared settings and saved model {model}")
            return True
        except Exception as e:
            logger.error(f"❌ Error saving model selection: {e}", exc_info=True)
            return False

        logger.info(f"💾 Selected model: {model}")
        return True

    async def clear_selected_model(self) -> None:
        self._selected = None
        self._loaded = True
        try:
            await self._store.remove(SELECTED_MODEL_KEY)
        except Exception as e:
            logger.error(f"❌ Error removing model selection: {e}", exc_info=True)

    async def list_models(self) -> ModelCatalog:
        """List installed models with tool support, tool-capable first.

        Drops a stored selection that is no longer installed and selects the
        first tool-capable model when nothing is selected.

        Raises:
            RequestError: The model server could not be reached
        """
        infos = await self._server.list_models()
        selected = await self.get_selected_model()

        if not infos:
            logger.warning("⚠️ Model server reports no models")
            return ModelCatalog(models=[], selected=selected)

        logger.info(f"🔧 Checking {len(infos)} model(s) for tool support")
        support = await asyncio.gather(*(self._capabilities.has_tool_support(info.name) for info in infos))

        options = [
            ModelOption(name=info.name, size=info.size, size_label=format_bytes(info.size), has_tools=has_tools)
            for info, has_tools in zip(infos, support)
        ]
        options.sort(key=lambda option: (not option.has_tools, option.name.lower()))

        names = {option.name for option in options}
        if selected and selected not in names:
            logger.info(f"🗑️ Previously selected model '{selected}' is no longer available locally")
            await self.clear_selected_model()
            selected = None

        if not selected:
            first_tool_model = next((option for option in options if option.has_tools), None)
            if first_tool_model is not None:
                await self.save_selected_model(first_tool_model.name)
                selected = first_tool_model.name

        catalog = ModelCatalog(models=options, selected=selected)
        logger.info(f"📋 {catalog.status_text}")
        return catalog

    async def _bytes_in_use(self) -> int:
        try:
            return await self._store.bytes_in_use()
        except Exception as e:
            logger.warning(f"⚠️ Could not check storage quota: {e}")
            return 0
