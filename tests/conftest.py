"""Test configuration and fixtures."""

import os
import tempfile

# Keep test runs from writing logs and data into the working directory
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="rag-chat-test-"))
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
from datetime import datetime, timedelta
from typing import Generator, List, Optional

from rag_chat.container import Container
from rag_chat.domain.entities import ChatMessage, Document
from rag_chat.domain.repositories import LLMRepository
from rag_chat.infrastructure.storage import InMemoryKeyValueStore, KeyValueDocumentRepository


class MockLLMRepository(LLMRepository):
    """Mock implementation of LLMRepository for testing."""

    def __init__(self, mock_response: str = "Mock LLM response", available: bool = True):
        self.mock_response = mock_response
        self.available = available
        self.call_count = 0
        self.last_history: Optional[List[ChatMessage]] = None
        self.last_context: Optional[str] = None

    def send_message(self, history, context=None) -> str:
        self.call_count += 1
        self.last_history = list(history)
        self.last_context = context
        return self.mock_response

    def is_available(self) -> bool:
        return self.available


class FakeUpload:
    """Stands in for an uploaded file with an async read()."""

    def __init__(self, filename: str, data: bytes, content_type: Optional[str] = "text/plain"):
        self.filename = filename
        self.content_type = content_type
        self._data = data

    async def read(self) -> bytes:
        return self._data


def _make_document(doc_id: str, chunks: List[str], filename: Optional[str] = None,
                  minutes_ago: int = 0) -> Document:
    return Document(
        id=doc_id,
        filename=filename or f"{doc_id}.txt",
        content=" ".join(chunks),
        chunks=chunks,
        uploaded_at=datetime(2024, 5, 1, 12, 0, 0) - timedelta(minutes=minutes_ago),
    )


@pytest.fixture
def document_factory():
    """Provide a helper that builds documents with a fixed upload time."""
    return _make_document


@pytest.fixture
def upload_factory():
    """Provide a helper that builds in-memory uploads."""
    return FakeUpload


@pytest.fixture
def kv_store():
    """Provide an empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def document_repository(kv_store):
    """Provide a document repository backed by the in-memory store."""
    return KeyValueDocumentRepository(kv_store)


@pytest.fixture
def mock_llm_repository():
    """Provide mock LLM repository."""
    return MockLLMRepository()


@pytest.fixture
def sample_documents(document_repository):
    """Store two small documents and return them."""
    docs = [
        _make_document("doc_animals", [
            "Cats are mammals Dogs are mammals too",
            "mammals too Fish live in water",
        ], filename="animals.txt"),
        _make_document("doc_space", [
            "The Moon orbits the Earth",
            "Mars is the fourth planet from the Sun",
        ], filename="space.md"),
    ]
    for doc in docs:
        document_repository.insert(doc)
    return docs


@pytest.fixture
def temp_storage_dir() -> Generator[str, None, None]:
    """Provide temporary directory for storage tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def test_container(temp_storage_dir, mock_llm_repository):
    """Provide container with file storage in a temp dir and a mocked backend."""
    container = Container(store_path=os.path.join(temp_storage_dir, "store.json"))
    container._llm_repository = mock_llm_repository
    return container
