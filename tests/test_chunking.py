"""Tests for sentence-aligned chunking."""

import pytest

from rag_chat.chunking import chunk_text, clean_text, overlap_words, simple_sentence_split
from rag_chat.exceptions import ConfigurationError

ANIMALS = "Cats are mammals. Dogs are mammals too. Fish live in water."


class TestSentenceSplitting:
    """Test sentence splitting helpers."""

    def test_clean_text_collapses_whitespace(self):
        """Test runs of whitespace become single spaces."""
        assert clean_text("  Line one\n\tstill   one  ") == "Line one still one"

    def test_split_drops_terminators(self):
        """Test punctuation runs end sentences and are dropped."""
        assert simple_sentence_split("Hello! How are you?? Fine...") == ["Hello", "How are you", "Fine"]

    def test_split_skips_empty_fragments(self):
        """Test fragments that are only whitespace are dropped."""
        assert simple_sentence_split("...  !! ?") == []

    def test_split_on_decimal_point(self):
        """Test the naive splitter also splits decimals."""
        assert simple_sentence_split("Pi is 3.14 roughly.") == ["Pi is 3", "14 roughly"]

    def test_overlap_words(self):
        """Test the trailing words carried into the next chunk."""
        assert overlap_words("one two three four", 2) == "three four"
        assert overlap_words("one two", 5) == "one two"
        assert overlap_words("one two", 0) == ""


class TestChunkText:
    """Test chunk_text."""

    def test_empty_text(self):
        """Test empty or whitespace-only text produces no chunks."""
        assert chunk_text("", 100, 10) == []
        assert chunk_text("   \n\t ", 100, 10) == []

    def test_text_without_terminator(self):
        """Test a single unterminated sentence becomes one chunk."""
        assert chunk_text("Hello world", 100, 10) == ["Hello world"]

    def test_everything_fits_in_one_chunk(self):
        """Test short text is a single chunk without punctuation."""
        assert chunk_text(ANIMALS, 500, 50) == [
            "Cats are mammals Dogs are mammals too Fish live in water"
        ]

    def test_overlap_carries_trailing_words(self):
        """Test each new chunk starts with the last words of the previous one."""
        assert chunk_text(ANIMALS, 40, 2) == [
            "Cats are mammals Dogs are mammals too",
            "mammals too Fish live in water",
        ]

    def test_zero_overlap(self):
        """Test no words are carried over with overlap 0."""
        assert chunk_text(ANIMALS, 20, 0) == [
            "Cats are mammals",
            "Dogs are mammals too",
            "Fish live in water",
        ]

    def test_oversized_sentence_kept_whole(self):
        """Test a sentence longer than chunk_size is emitted as its own chunk."""
        long_sentence = " ".join(["word"] * 50)
        chunks = chunk_text(f"Short one. {long_sentence}. Tail.", 30, 0)

        assert chunks == ["Short one", long_sentence, "Tail"]
        assert len(chunks[1]) > 30

    def test_whitespace_normalised_inside_chunks(self):
        """Test newlines and repeated spaces collapse."""
        assert chunk_text("Line one\nstill   one.  Two", 100, 0) == ["Line one still one Two"]

    def test_invalid_parameters(self):
        """Test non-positive chunk size and negative overlap are rejected."""
        with pytest.raises(ConfigurationError):
            chunk_text(ANIMALS, 0, 0)
        with pytest.raises(ConfigurationError):
            chunk_text(ANIMALS, 100, -1)


class TestChunkProperties:
    """Test structural properties on a larger text."""

    SENTENCES = [f"Sentence number {i} talks about topic {i % 7}" for i in range(60)]
    TEXT = ". ".join(SENTENCES) + "."
    SIZE = 120
    OVERLAP = 3

    @pytest.fixture
    def chunks(self):
        return chunk_text(self.TEXT, self.SIZE, self.OVERLAP)

    def test_multiple_chunks(self, chunks):
        """Test the text is split into several chunks."""
        assert len(chunks) > 5

    def test_no_empty_chunks(self, chunks):
        """Test no chunk is empty or padded."""
        for chunk in chunks:
            assert chunk
            assert chunk == chunk.strip()
            assert "  " not in chunk

    def test_overlap_prefix(self, chunks):
        """Test every chunk after the first starts with the previous chunk's tail."""
        for prev, cur in zip(chunks, chunks[1:]):
            tail = " ".join(prev.split()[-self.OVERLAP:])
            assert cur.startswith(tail + " ")

    def test_coverage(self, chunks):
        """Test removing overlaps reconstructs every sentence in order."""
        pieces = [chunks[0]]
        for prev, cur in zip(chunks, chunks[1:]):
            tail = " ".join(prev.split()[-self.OVERLAP:])
            pieces.append(cur[len(tail) + 1:])

        assert " ".join(pieces) == " ".join(self.SENTENCES)

    def test_size_bound(self, chunks):
        """Test chunks stay within the size plus one sentence of slack."""
        longest_sentence = max(len(s) for s in self.SENTENCES)
        for chunk in chunks:
            assert len(chunk) <= self.SIZE + longest_sentence + 1

    def test_deterministic(self, chunks):
        """Test chunking the same text twice gives the same result."""
        assert chunk_text(self.TEXT, self.SIZE, self.OVERLAP) == chunks
