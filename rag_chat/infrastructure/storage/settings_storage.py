"""Chat settings persistence."""

import json
import logging

from ...domain.entities import ChatSettings
from ...domain.repositories import KeyValueStore
from ...exceptions import ConfigurationError, StorageUnavailable
from ...error_handler import log_error
from ...logging_config import get_logger

logger = get_logger(__name__)

SETTINGS_KEY = "chat-settings"


class SettingsRepository:
    """Loads and saves ChatSettings through a key-value store."""

    def __init__(self, store: KeyValueStore, key: str = SETTINGS_KEY):
        self._store = store
        self.key = key

    def load(self) -> ChatSettings:
        """Stored settings, or defaults when nothing usable is stored."""
        try:
            raw = self._store.get(self.key)
            if raw is None:
                return ChatSettings()
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("settings are not a JSON object")
            return ChatSettings.from_dict(data)
        except (StorageUnavailable, ConfigurationError, ValueError, TypeError) as e:
            log_error(e, "Could not load chat settings, using defaults", level=logging.WARNING)
            return ChatSettings()

    def save(self, settings: ChatSettings) -> None:
        self._store.set(self.key, json.dumps(settings.to_dict(), ensure_ascii=False))
        logger.info(f"Saved chat settings (provider={settings.provider.value})")
