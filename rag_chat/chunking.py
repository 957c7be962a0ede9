from __future__ import annotations
from typing import List
import re

from .config import CHUNK_SIZE, CHUNK_OVERLAP
from .exceptions import ConfigurationError

_SENTENCE_END = re.compile(r"[.!?]+")


def clean_text(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def simple_sentence_split(text: str) -> List[str]:
    # naive: abbreviations, decimals and ellipses get split too
    parts = _SENTENCE_END.split(text)
    return [clean_text(p) for p in parts if p.strip()]


def overlap_words(chunk: str, overlap: int) -> str:
    """Return the last ``overlap`` words of ``chunk`` joined by single spaces."""
    if overlap <= 0:
        return ""
    return " ".join(chunk.split()[-overlap:])


def chunk_text(text: str, chunk_size: int = CHUNK_SIZE, overlap: int = CHUNK_OVERLAP) -> List[str]:
    """Split ``text`` into sentence-aligned chunks of roughly ``chunk_size`` characters.

    Each new chunk starts with the last ``overlap`` words of the previous one.
    A single sentence longer than ``chunk_size`` becomes its own oversized chunk.
    """
    if chunk_size <= 0 or overlap < 0:
        raise ConfigurationError(
            message="chunk_size must be positive and overlap non-negative",
            details={'chunk_size': chunk_size, 'overlap': overlap}
        )

    chunks: List[str] = []
    current = ""
    for sent in simple_sentence_split(text):
        if current and len(current) + len(sent) > chunk_size:
            chunks.append(current)
            carried = overlap_words(current, overlap)
            current = f"{carried} {sent}" if carried else sent
        else:
            current = f"{current} {sent}" if current else sent
    if current:
        chunks.append(current)
    return chunks
