"""
Unit Tests for ChunkPrioritizer
===============================

Tests for keyword-density ordering of chunks.
"""

from src.ingest.prioritizer import ChunkPrioritizer
from src.schemas.document import TextChunk


def _chunk(index: int, *lines: str) -> TextChunk:
    return TextChunk(index=index, lines=list(lines))


class TestChunkPrioritizer:
    """Tests for ChunkPrioritizer."""

    def test_relevance_counts_occurrences(self) -> None:
        prioritizer = ChunkPrioritizer(["bottle", "price"])
        assert prioritizer.relevance("Bottle A, bottle B. Price: 1") == 3

    def test_orders_by_descending_relevance(self) -> None:
        prioritizer = ChunkPrioritizer(["bottle"])
        chunks = [
            _chunk(0, "About us"),
            _chunk(1, "Bottle A", "Bottle B"),
            _chunk(2, "Bottle C"),
        ]

        ordered = prioritizer.prioritize(chunks)

        assert [c.index for c in ordered] == [1, 2, 0]
        assert [c.relevance for c in ordered] == [2, 1, 0]

    def test_ties_keep_document_order(self) -> None:
        prioritizer = ChunkPrioritizer(["jar"])
        chunks = [_chunk(i, "Jar %d" % i) for i in range(4)]

        ordered = prioritizer.prioritize(chunks)

        assert [c.index for c in ordered] == [0, 1, 2, 3]

    def test_input_chunks_not_mutated(self) -> None:
        prioritizer = ChunkPrioritizer(["cap"])
        chunks = [_chunk(0, "Cap"), _chunk(1, "Cap Cap")]

        prioritizer.prioritize(chunks)

        assert all(c.relevance == 0 for c in chunks)
