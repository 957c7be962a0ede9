"""Document repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities import Document


class DocumentRepository(ABC):
    """Abstract interface for document storage operations."""

    @abstractmethod
    def list_documents(self) -> List[Document]:
        """List all documents in insertion order; empty if storage is unusable."""
        pass

    @abstractmethod
    def get_document(self, document_id: str) -> Optional[Document]:
        """Get document by ID."""
        pass

    @abstractmethod
    def insert(self, document: Document) -> None:
        """Append a document to the collection."""
        pass

    @abstractmethod
    def remove(self, document_id: str) -> bool:
        """Remove a document; return False if it was not stored."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every document."""
        pass
