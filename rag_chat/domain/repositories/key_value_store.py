"""Key-value store interface."""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """Durable string storage addressed by key, with no transactions."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value for ``key`` or None if absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``; absent keys are ignored."""
        pass
