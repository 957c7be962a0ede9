"""Domain entities for document retrieval."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Dict, Any
from datetime import datetime


def _parse_timestamp(value: str) -> datetime:
    # fromisoformat only accepts a "Z" suffix from Python 3.11 on
    if isinstance(value, str) and value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class Document:
    """An ingested document and its chunks, in source order."""
    id: str
    filename: str
    content: str
    chunks: List[str] = field(default_factory=list)
    uploaded_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Document ID cannot be empty")
        if not self.filename:
            raise ValueError("Document filename cannot be empty")

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted record layout."""
        return {
            'id': self.id,
            'filename': self.filename,
            'content': self.content,
            'chunks': list(self.chunks),
            'uploadedAt': self.uploaded_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Document:
        """Build a Document from a persisted record.

        Raises KeyError, TypeError or ValueError on malformed records.
        """
        chunks = data['chunks']
        if not isinstance(chunks, list) or not all(isinstance(c, str) for c in chunks):
            raise TypeError("chunks must be a list of strings")
        return cls(
            id=str(data['id']),
            filename=str(data['filename']),
            content=str(data['content']),
            chunks=chunks,
            uploaded_at=_parse_timestamp(data['uploadedAt']),
        )


@dataclass
class ScoredChunk:
    """A chunk with its relevance score for one query. Never persisted."""
    chunk: str
    score: float

    def __post_init__(self) -> None:
        if self.score < 0:
            raise ValueError("Score must be non-negative")
