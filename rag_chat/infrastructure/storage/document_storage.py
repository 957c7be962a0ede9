"""Document infrastructure implementations."""

from typing import Any, List, Optional
import json
import logging
import threading

from ...domain.entities import Document
from ...domain.repositories import DocumentRepository, KeyValueStore
from ...exceptions import StorageUnavailable, ConcurrentModificationError
from ...error_handler import handle_errors, log_error
from ...logging_config import get_logger

logger = get_logger(__name__)

STORAGE_KEY = "rag-documents"


def _has_id(record: Any, document_id: str) -> bool:
    return isinstance(record, dict) and str(record.get('id')) == document_id


class KeyValueDocumentRepository(DocumentRepository):
    """Keeps the whole document collection as one JSON array under a single key.

    Every write is a read-modify-write of the full collection. Writes are
    serialised by a lock and guarded by a version counter, so a writer that
    read a stale collection fails instead of overwriting newer data.
    Records that do not parse are left out of listings but written back
    untouched.
    """

    def __init__(self, store: KeyValueStore, storage_key: str = STORAGE_KEY):
        self._store = store
        self.storage_key = storage_key
        self.version_key = f"{storage_key}:version"
        self._lock = threading.RLock()

    def _read_records(self) -> List[Any]:
        """Load the raw record array; raises StorageUnavailable on unreadable data."""
        raw = self._store.get(self.storage_key)
        if raw is None:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageUnavailable(
                message="Stored documents are corrupted",
                details={'key': self.storage_key, 'error': str(e)}
            ) from e
        if not isinstance(records, list):
            raise StorageUnavailable(
                message="Stored documents are corrupted",
                details={'key': self.storage_key, 'error': "document collection is not a list"}
            )
        return records

    def _records_or_empty(self) -> List[Any]:
        try:
            return self._read_records()
        except StorageUnavailable as e:
            log_error(e, "Falling back to an empty document list", level=logging.WARNING)
            return []

    def _parse(self, records: List[Any]) -> List[Document]:
        """Build documents from records, skipping the malformed ones."""
        documents = []
        for position, record in enumerate(records):
            try:
                documents.append(Document.from_dict(record))
            except (TypeError, KeyError, ValueError) as e:
                log_error(e, "Skipping malformed stored document",
                          {'key': self.storage_key, 'position': position}, level=logging.WARNING)
        return documents

    def _version(self) -> int:
        try:
            raw = self._store.get(self.version_key)
            return int(raw) if raw is not None else 0
        except (StorageUnavailable, ValueError):
            return 0

    def _write_records(self, records: List[Any], expected_version: int) -> None:
        current = self._version()
        if current != expected_version:
            raise ConcurrentModificationError(
                message="Document collection changed during update",
                details={'expected_version': expected_version, 'current_version': current}
            )
        payload = json.dumps(records, ensure_ascii=False)
        self._store.set(self.storage_key, payload)
        self._store.set(self.version_key, str(expected_version + 1))

    def list_documents(self) -> List[Document]:
        """List all documents in insertion order."""
        with self._lock:
            return self._parse(self._records_or_empty())

    @handle_errors(default_return=None, exception_type=StorageUnavailable)
    def get_document(self, document_id: str) -> Optional[Document]:
        """Retrieve document by ID."""
        for document in self.list_documents():
            if document.id == document_id:
                return document
        return None

    def insert(self, document: Document) -> None:
        """Append ``document`` to the stored collection."""
        with self._lock:
            version = self._version()
            records = self._records_or_empty()
            records.append(document.to_dict())
            self._write_records(records, version)
        logger.info(f"Saved document: {document.id}")

    def remove(self, document_id: str) -> bool:
        """Delete document by ID; unknown ids leave the store untouched."""
        with self._lock:
            version = self._version()
            records = self._records_or_empty()
            remaining = [r for r in records if not _has_id(r, document_id)]
            if len(remaining) == len(records):
                return False
            self._write_records(remaining, version)
        logger.info(f"Deleted document: {document_id}")
        return True

    def clear(self) -> None:
        with self._lock:
            self._write_records([], self._version())
        logger.info("Cleared all documents")
