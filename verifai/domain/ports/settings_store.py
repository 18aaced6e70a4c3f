"""Port interface for persistent key-value settings."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class SettingsStore(ABC):
    """Abstract interface for the user's settings storage.

    This port defines how the domain reads and writes user preferences such
    as the selected model. Concrete implementations live in the
    infrastructure layer.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the stored value or None."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store a value.

        Raises:
            SettingsQuotaExceededError: If the store is full
        """
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Remove a key if present."""
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove every key."""
        pass

    @abstractmethod
    async def bytes_in_use(self) -> int:
        """Approximate number of bytes currently stored."""
        pass
