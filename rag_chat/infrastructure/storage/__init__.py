"""Storage infrastructure module."""

from .key_value_store import InMemoryKeyValueStore, JsonFileKeyValueStore
from .document_storage import KeyValueDocumentRepository
from .settings_storage import SettingsRepository

__all__ = [
    'InMemoryKeyValueStore',
    'JsonFileKeyValueStore',
    'KeyValueDocumentRepository',
    'SettingsRepository'
]
