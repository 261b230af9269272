"""
Unit Tests for TokenBudgetChunker
=================================

Tests for line-aligned chunking under a token budget.
"""

import pytest

from src.ingest.chunker import TokenBudgetChunker
from src.schemas.document import estimate_tokens


def _lines(chunks) -> list[str]:
    return [line for chunk in chunks for line in chunk.lines]


class TestChunkerSingleChunk:
    """Text that fits the budget."""

    def test_small_text_is_one_chunk(self) -> None:
        chunker = TokenBudgetChunker(token_budget=100)
        chunks = chunker.chunk("Bottle A\nJar B")

        assert len(chunks) == 1
        assert chunks[0].index == 0
        assert chunks[0].lines == ["Bottle A", "Jar B"]

    def test_empty_text_is_one_chunk(self) -> None:
        chunks = TokenBudgetChunker(token_budget=10).chunk("")

        assert len(chunks) == 1
        assert chunks[0].lines == [""]

    def test_text_exactly_at_budget(self) -> None:
        """40 characters estimate to 10 tokens, which fits a budget of 10."""
        text = "a" * 19 + "\n" + "b" * 20
        chunks = TokenBudgetChunker(token_budget=10).chunk(text)

        assert len(chunks) == 1


class TestChunkerSplitting:
    """Text that exceeds the budget."""

    def test_large_document_scenario(self) -> None:
        """500,000 characters at 7,000 tokens per chunk needs at least 17 chunks."""
        lines = [f"{i:06d} " + "x" * 92 for i in range(5000)]
        text = "\n".join(lines)
        assert len(text) >= 499_000

        chunks = TokenBudgetChunker(token_budget=7000).chunk(text)

        assert len(chunks) >= 17
        assert all(chunk.estimated_tokens <= 7000 for chunk in chunks)
        assert _lines(chunks) == lines

    def test_indices_follow_document_order(self) -> None:
        text = "\n".join("line %d" % i for i in range(50))
        chunks = TokenBudgetChunker(token_budget=10).chunk(text)

        assert [c.index for c in chunks] == list(range(len(chunks)))

    @pytest.mark.parametrize("budget", [1, 2, 5, 17, 64])
    def test_no_line_lost_for_any_budget(self, budget: int) -> None:
        """Concatenated chunk lines reproduce the input lines."""
        lines = ["Bottle A | HDPE | 250ml", "", "Jar B", "x" * 120, "Cap C", ""]
        chunks = TokenBudgetChunker(token_budget=budget).chunk("\n".join(lines))

        assert _lines(chunks) == lines
        assert sum(len(c.lines) for c in chunks) == len(lines)

    @pytest.mark.parametrize("budget", [3, 8, 20])
    def test_chunks_respect_budget_unless_single_line(self, budget: int) -> None:
        lines = ["short", "x" * 50, "medium length line", "y" * 7, "z" * 200]
        chunks = TokenBudgetChunker(token_budget=budget).chunk("\n".join(lines))

        for chunk in chunks:
            assert chunk.estimated_tokens <= budget or len(chunk.lines) == 1

    def test_oversized_line_kept_whole(self) -> None:
        """A single line over the budget is its own chunk and is not split."""
        giant = "g" * 4000
        text = "\n".join(["Bottle A", giant, "Jar B"])
        chunks = TokenBudgetChunker(token_budget=100).chunk(text)

        giant_chunks = [c for c in chunks if giant in c.lines]
        assert len(giant_chunks) == 1
        assert giant_chunks[0].lines == [giant]
        assert estimate_tokens(giant) > 100
        assert _lines(chunks) == ["Bottle A", giant, "Jar B"]


class TestChunkerValidation:
    def test_non_positive_budget_rejected(self) -> None:
        with pytest.raises(ValueError):
            TokenBudgetChunker(token_budget=0)
