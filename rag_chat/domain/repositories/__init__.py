"""Repository interfaces package."""

from .key_value_store import KeyValueStore
from .document_repository import DocumentRepository
from .llm_repository import LLMRepository

__all__ = [
    'KeyValueStore',
    'DocumentRepository',
    'LLMRepository'
]
