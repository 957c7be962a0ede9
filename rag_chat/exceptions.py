"""Custom exceptions for the RAG chat application."""

from typing import Optional


class RagChatError(Exception):
    """Base exception for all RAG chat errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class DocumentProcessingError(RagChatError):
    """Raised when document ingestion fails."""
    pass


class UnsupportedFileType(DocumentProcessingError):
    """Raised when an upload is not a recognised text-like file."""
    pass


class ExtractionError(DocumentProcessingError):
    """Raised when text cannot be extracted from an upload."""
    pass


class StorageError(RagChatError):
    """Raised when key-value storage operations fail."""
    pass


class StorageUnavailable(StorageError):
    """Raised when the store cannot be read or written, or holds corrupted data."""
    pass


class ConcurrentModificationError(StorageError):
    """Raised when the document collection changed between read and write."""
    pass


class LLMError(RagChatError):
    """Raised when a chat backend call fails."""
    pass


class ConfigurationError(RagChatError):
    """Raised when configuration is invalid."""
    pass
