"""Retrieval domain service."""

import math
from typing import List

from ..entities import ScoredChunk
from ..repositories import DocumentRepository
from ...config import RELEVANCE_THRESHOLD, APPLY_RELEVANCE_THRESHOLD, DEFAULT_MAX_CHUNKS
from ...logging_config import get_logger

logger = get_logger(__name__)


def relevance_score(query: str, chunk: str) -> float:
    """Length-normalised lexical overlap between ``query`` and ``chunk``.

    Every (query word, chunk word) pair where one contains the other counts
    once, so plural/singular and prefix matches both hit. The raw count is
    divided by sqrt(#query words * #chunk words).
    """
    query_words = query.lower().split()
    chunk_words = chunk.lower().split()
    if not query_words or not chunk_words:
        return 0.0

    raw = 0
    for q in query_words:
        for c in chunk_words:
            if q in c or c in q:
                raw += 1
    return raw / math.sqrt(len(query_words) * len(chunk_words))


class RelevanceRanker:
    """Ranks stored chunks against a query. Holds no state of its own."""

    def __init__(
        self,
        document_repository: DocumentRepository,
        min_score: float = RELEVANCE_THRESHOLD,
        apply_threshold: bool = APPLY_RELEVANCE_THRESHOLD
    ):
        self._document_repo = document_repository
        self.min_score = min_score
        self.apply_threshold = apply_threshold

    def rank(self, query: str, k: int = DEFAULT_MAX_CHUNKS) -> List[ScoredChunk]:
        """Return the ``k`` best scoring chunks across all documents, best first.

        Ties keep the stored order (documents in insertion order, chunks in
        source order).
        """
        if k <= 0:
            return []

        scored = [
            ScoredChunk(chunk=chunk, score=relevance_score(query, chunk))
            for document in self._document_repo.list_documents()
            for chunk in document.chunks
        ]
        if self.apply_threshold:
            scored = [s for s in scored if s.score > self.min_score]

        ranked = sorted(scored, key=lambda s: s.score, reverse=True)[:k]
        logger.debug(f"Ranked {len(scored)} chunks for query, returning {len(ranked)}")
        return ranked

    def find_relevant_chunks(self, query: str, max_chunks: int = DEFAULT_MAX_CHUNKS) -> List[str]:
        """Chunk texts of ``rank``; empty when nothing is stored or relevant."""
        return [s.chunk for s in self.rank(query, max_chunks)]
