"""Domain entities package."""

from .document import Document, ScoredChunk
from .conversation import ChatMessage, Role
from .backend import BackendKind, BackendConfig, OpenAIBackend, LocalBackend, FreeCloudBackend
from .settings import ChatSettings

__all__ = [
    'Document',
    'ScoredChunk',
    'ChatMessage',
    'Role',
    'BackendKind',
    'BackendConfig',
    'OpenAIBackend',
    'LocalBackend',
    'FreeCloudBackend',
    'ChatSettings'
]
