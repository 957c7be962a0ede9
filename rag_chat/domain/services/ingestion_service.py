"""Document ingestion domain service."""

from __future__ import annotations
import asyncio
import inspect
import io
import mimetypes
import os
import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union

import docx  # python-docx

from ..entities import Document
from ..repositories import DocumentRepository
from ...chunking import chunk_text
from ...config import CHUNK_SIZE, CHUNK_OVERLAP, MAX_UPLOAD_BYTES
from ...exceptions import UnsupportedFileType, ExtractionError
from ...logging_config import get_logger

logger = get_logger(__name__)

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
SUPPORTED_EXTENSIONS = {".txt", ".md", ".csv", ".json", ".docx"}
TEXT_LIKE_TYPES = {"application/json", "text/csv", DOCX_MIME}


@dataclass
class LocalFile:
    """A file on disk exposed through the upload interface."""
    path: str
    content_type: Optional[str] = None

    def __post_init__(self) -> None:
        if self.content_type is None:
            self.content_type = mimetypes.guess_type(self.path)[0] or ""

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)

    def read(self) -> bytes:
        with open(self.path, 'rb') as f:
            return f.read()


def is_supported(filename: str, content_type: Optional[str]) -> bool:
    """Accept text-like content types or known text/office extensions."""
    ctype = (content_type or "").split(";")[0].strip().lower()
    if ctype.startswith("text/") or ctype in TEXT_LIKE_TYPES:
        return True
    return os.path.splitext(filename)[1].lower() in SUPPORTED_EXTENSIONS


def is_docx(filename: str, content_type: Optional[str]) -> bool:
    return filename.lower().endswith(".docx") or (content_type or "").startswith(DOCX_MIME)


def generate_document_id() -> str:
    """Millisecond timestamp plus a random suffix, unique across rapid uploads."""
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def _read_docx(data: bytes) -> str:
    d = docx.Document(io.BytesIO(data))
    return "\n".join(p.text for p in d.paragraphs)


def _read_text(data: bytes) -> str:
    return data.decode("utf-8-sig")


class IngestionPipeline:
    """Turns uploaded files into stored, chunked documents."""

    def __init__(
        self,
        document_repository: DocumentRepository,
        chunk_size: int = CHUNK_SIZE,
        chunk_overlap: int = CHUNK_OVERLAP,
        max_bytes: int = MAX_UPLOAD_BYTES
    ):
        self._document_repo = document_repository
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.max_bytes = max_bytes

    async def ingest(self, file) -> Document:
        """Validate, extract, chunk and store ``file``.

        ``file`` needs ``filename``, ``content_type`` and a sync or async
        ``read()``. Nothing is stored unless every step succeeds.
        """
        filename = file.filename or "untitled"
        content_type = getattr(file, "content_type", None)
        if not is_supported(filename, content_type):
            raise UnsupportedFileType(
                message=f"Unsupported file type for {filename}",
                details={'filename': filename, 'content_type': content_type,
                         'supported': sorted(SUPPORTED_EXTENSIONS)}
            )

        if inspect.iscoroutinefunction(file.read):
            data = await file.read()
        else:
            data = await asyncio.to_thread(file.read)
        text = await asyncio.to_thread(self.extract_text, filename, content_type, data)

        chunks = chunk_text(text, self.chunk_size, self.chunk_overlap)
        if not chunks:
            # Punctuation-only text has no sentences to chunk
            raise ExtractionError(
                message=f"No text found in {filename}",
                details={'filename': filename}
            )

        document = Document(
            id=generate_document_id(),
            filename=filename,
            content=text,
            chunks=chunks,
            uploaded_at=datetime.now(),
        )
        await asyncio.to_thread(self._document_repo.insert, document)
        logger.info(f"Ingested {filename} as {document.id} ({document.chunk_count} chunks)")
        return document

    def extract_text(self, filename: str, content_type: Optional[str], data: Union[bytes, str]) -> str:
        """Return the text of an upload or raise ExtractionError."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        if len(data) > self.max_bytes:
            raise ExtractionError(
                message=f"{filename} is larger than {self.max_bytes} bytes",
                details={'filename': filename, 'size': len(data)}
            )
        if is_docx(filename, content_type):
            try:
                text = _read_docx(data)
            except Exception as e:
                # Malformed packages surface as zipfile or lxml errors
                raise self._extraction_failed(filename, e) from e
        else:
            try:
                text = _read_text(data)
            except UnicodeDecodeError as e:
                raise self._extraction_failed(filename, e) from e

        if not text.strip():
            raise ExtractionError(
                message=f"No text found in {filename}",
                details={'filename': filename}
            )
        return text

    @staticmethod
    def _extraction_failed(filename: str, error: Exception) -> ExtractionError:
        return ExtractionError(
            message=f"Failed to extract text from {filename}",
            details={'filename': filename, 'error': str(error)}
        )

    def list_documents(self) -> List[Document]:
        return self._document_repo.list_documents()

    def remove(self, document_id: str) -> bool:
        removed = self._document_repo.remove(document_id)
        if removed:
            logger.info(f"Removed document {document_id}")
        return removed
