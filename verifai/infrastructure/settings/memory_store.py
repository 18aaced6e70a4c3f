"""Settings stores with a byte quota."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ...domain.errors import SettingsQuotaExceededError
from ...domain.ports.settings_store import SettingsStore

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 5 * 1024 * 1024  # 5 MiB


def encoded_size(data: Dict[str, Any]) -> int:
    """Bytes taken by ``data`` serialized as JSON."""
    if not data:
        return 0
    return len(json.dumps(data, ensure_ascii=False).encode("utf-8"))


class InMemorySettingsStore(SettingsStore):
    """Process-local settings, bounded by ``capacity`` bytes."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY, initial: Optional[Dict[str, Any]] = None):
        self.capacity = capacity
        self._data: Dict[str, Any] = dict(initial or {})

    async def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    async def set(self, key: str, value: Any) -> None:
        candidate = {**self._data, key: value}
        size = encoded_size(candidate)
        if size > self.capacity:
            raise SettingsQuotaExceededError(f"QUOTA_BYTES quota exceeded ({size} > {self.capacity} bytes)")
        self._data = candidate
        await self._persist()

    async def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            await self._persist()

    async def clear(self) -> None:
        self._data = {}
        await self._persist()

    async def bytes_in_use(self) -> int:
        return encoded_size(self._data)

    async def _persist(self) -> None:
        pass


class JsonFileSettingsStore(InMemorySettingsStore):
    """Settings kept in a JSON file so the selection survives restarts."""

    def __init__(self, path: Path, capacity: int = DEFAULT_CAPACITY):
        self.path = Path(path)
        super().__init__(capacity=capacity, initial=self._read())

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ Ignoring unreadable settings file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    async def _persist(self) -> None:
        await asyncio.to_thread(self._write, dict(self._data))
