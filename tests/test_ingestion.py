"""Test cases for document ingestion."""

import asyncio
import io
import os
import re
import zipfile
from unittest.mock import Mock, patch

import docx
import pytest

from rag_chat.domain.services import IngestionPipeline, LocalFile
from rag_chat.domain.services.ingestion_service import (
    DOCX_MIME, generate_document_id, is_docx, is_supported
)
from rag_chat.exceptions import ExtractionError, StorageUnavailable, UnsupportedFileType

ANIMALS = "Cats are mammals. Dogs are mammals too. Fish live in water."


@pytest.fixture
def pipeline(document_repository):
    """Provide a pipeline with small chunks."""
    return IngestionPipeline(document_repository, chunk_size=40, chunk_overlap=2, max_bytes=1024)


def _docx_bytes(*paragraphs):
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def _docx_with_body(body):
    """A valid Word package whose main document part is replaced by ``body``."""
    source = zipfile.ZipFile(io.BytesIO(_docx_bytes("placeholder")))
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as target:
        for item in source.infolist():
            data = body if item.filename == "word/document.xml" else source.read(item.filename)
            target.writestr(item, data)
    return buffer.getvalue()


class TestFileTypeChecks:
    """Test file type helpers."""

    @pytest.mark.parametrize("filename,content_type", [
        ("notes.txt", "text/plain"),
        ("notes", "text/markdown; charset=utf-8"),
        ("data", "application/json"),
        ("table", "text/csv"),
        ("notes.md", ""),
        ("data.json", "application/octet-stream"),
        ("report.docx", None),
        ("report", DOCX_MIME),
    ])
    def test_supported(self, filename, content_type):
        assert is_supported(filename, content_type) is True

    @pytest.mark.parametrize("filename,content_type", [
        ("photo.png", "image/png"),
        ("paper.pdf", "application/pdf"),
        ("archive.zip", "application/zip"),
        ("noextension", None),
    ])
    def test_unsupported(self, filename, content_type):
        assert is_supported(filename, content_type) is False

    def test_is_docx(self):
        """Test docx is recognised by extension or content type."""
        assert is_docx("Report.DOCX", None)
        assert is_docx("report", DOCX_MIME)
        assert not is_docx("notes.txt", "text/plain")

    def test_document_id_format(self):
        """Test IDs are a millisecond timestamp with a random suffix."""
        assert re.fullmatch(r"\d{13,}_[0-9a-f]{8}", generate_document_id())

    def test_document_ids_unique(self):
        """Test IDs generated back to back differ."""
        ids = {generate_document_id() for _ in range(200)}

        assert len(ids) == 200


class TestIngestionPipeline:
    """Test IngestionPipeline.ingest."""

    @pytest.mark.asyncio
    async def test_ingest_text_file(self, pipeline, document_repository, upload_factory):
        """Test a text upload is chunked and stored."""
        document = await pipeline.ingest(upload_factory("animals.txt", ANIMALS.encode()))

        assert document.filename == "animals.txt"
        assert document.content == ANIMALS
        assert document.chunks == [
            "Cats are mammals Dogs are mammals too",
            "mammals too Fish live in water",
        ]
        assert document_repository.list_documents() == [document]

    @pytest.mark.asyncio
    async def test_ingest_by_extension(self, pipeline, upload_factory):
        """Test a generic content type is accepted for a known extension."""
        document = await pipeline.ingest(
            upload_factory("data.json", b'{"animal": "cat"}', "application/octet-stream")
        )

        assert document.content == '{"animal": "cat"}'

    @pytest.mark.asyncio
    async def test_byte_order_mark_stripped(self, pipeline, upload_factory):
        """Test a UTF-8 BOM does not end up in the text."""
        document = await pipeline.ingest(upload_factory("bom.txt", b"\xef\xbb\xbfHello there."))

        assert document.content == "Hello there."
        assert document.chunks == ["Hello there"]

    @pytest.mark.asyncio
    async def test_unsupported_type(self, pipeline, document_repository, upload_factory):
        """Test binary uploads are rejected and nothing is stored."""
        with pytest.raises(UnsupportedFileType):
            await pipeline.ingest(upload_factory("photo.png", b"\x89PNG\r\n", "image/png"))

        assert document_repository.list_documents() == []

    @pytest.mark.asyncio
    async def test_invalid_utf8(self, pipeline, document_repository, upload_factory):
        """Test undecodable text is an extraction error."""
        with pytest.raises(ExtractionError):
            await pipeline.ingest(upload_factory("broken.txt", b"\xff\xfe\xfa"))

        assert document_repository.list_documents() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("data", [b"", b"   \n\t  ", b"... !!! ???"])
    async def test_empty_text(self, pipeline, document_repository, upload_factory, data):
        """Test files without text are rejected."""
        with pytest.raises(ExtractionError, match="No text found"):
            await pipeline.ingest(upload_factory("empty.txt", data))

        assert document_repository.list_documents() == []

    @pytest.mark.asyncio
    async def test_file_too_large(self, document_repository, upload_factory):
        """Test uploads above the size limit are rejected."""
        pipeline = IngestionPipeline(document_repository, max_bytes=10)

        with pytest.raises(ExtractionError, match="larger than"):
            await pipeline.ingest(upload_factory("big.txt", b"x" * 11))

    @pytest.mark.asyncio
    async def test_docx(self, pipeline, upload_factory):
        """Test paragraphs are extracted from Word documents."""
        data = _docx_bytes("Cats are mammals.", "Dogs are mammals too.")

        document = await pipeline.ingest(upload_factory("animals.docx", data, DOCX_MIME))

        assert "Cats are mammals." in document.content
        assert "Dogs are mammals too." in document.content
        assert document.chunks == ["Cats are mammals Dogs are mammals too"]

    @pytest.mark.asyncio
    async def test_corrupted_docx(self, pipeline, document_repository, upload_factory):
        """Test a broken Word file is an extraction error."""
        with pytest.raises(ExtractionError):
            await pipeline.ingest(upload_factory("broken.docx", b"not a zip archive", DOCX_MIME))

        assert document_repository.list_documents() == []

    @pytest.mark.asyncio
    async def test_malformed_docx_body(self, pipeline, document_repository, upload_factory):
        """Test unparseable XML inside a Word package is an extraction error."""
        data = _docx_with_body(b"<w:document><w:body><w:p>")

        with pytest.raises(ExtractionError, match="Failed to extract text"):
            await pipeline.ingest(upload_factory("bad.docx", data, DOCX_MIME))

        assert document_repository.list_documents() == []

    @pytest.mark.asyncio
    async def test_local_file(self, pipeline, temp_storage_dir):
        """Test files on disk are read through LocalFile."""
        path = os.path.join(temp_storage_dir, "animals.md")
        with open(path, "w", encoding="utf-8") as f:
            f.write(ANIMALS)

        document = await pipeline.ingest(LocalFile(path))

        assert document.filename == "animals.md"
        assert document.chunk_count == 2

    @pytest.mark.asyncio
    async def test_local_file_read_off_event_loop(self, pipeline, temp_storage_dir):
        """Test disk reads run in a worker thread."""
        path = os.path.join(temp_storage_dir, "animals.txt")
        with open(path, "w", encoding="utf-8") as f:
            f.write(ANIMALS)
        local_file = LocalFile(path)

        with patch("rag_chat.domain.services.ingestion_service.asyncio.to_thread",
                   wraps=asyncio.to_thread) as mock_to_thread:
            await pipeline.ingest(local_file)

        assert mock_to_thread.call_args_list[0].args[0] == local_file.read

    @pytest.mark.asyncio
    async def test_rapid_uploads_get_distinct_ids(self, pipeline, document_repository, upload_factory):
        """Test two uploads in quick succession are both kept."""
        first = await pipeline.ingest(upload_factory("a.txt", b"First file."))
        second = await pipeline.ingest(upload_factory("a.txt", b"Second file."))

        assert first.id != second.id
        assert [d.id for d in document_repository.list_documents()] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self, upload_factory):
        """Test a failing store surfaces as a storage error."""
        repo = Mock()
        repo.insert.side_effect = StorageUnavailable(message="disk full")
        pipeline = IngestionPipeline(repo)

        with pytest.raises(StorageUnavailable):
            await pipeline.ingest(upload_factory("a.txt", b"Some text."))

    def test_remove(self, pipeline, document_repository, sample_documents):
        """Test removing through the pipeline."""
        assert pipeline.remove("doc_animals") is True
        assert pipeline.remove("doc_animals") is False
        assert [d.id for d in pipeline.list_documents()] == ["doc_space"]
