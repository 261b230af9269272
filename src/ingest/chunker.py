"""
Token-Budgeted Chunker
======================

Splits document text into line-aligned chunks whose estimated token
count fits a provider's per-request budget.

Token count is estimated as ceil(characters / 4) over the joined
chunk text, newlines included. This is an approximation, so budgets
are configured with a safety margin below the real context window.

Guarantees:
    - Every chunk fits the budget unless it holds a single line that
      alone exceeds it (such a line is never split or dropped)
    - Concatenating chunk lines in order reproduces the input lines
    - Input that fits the budget yields exactly one chunk
"""

import math

from src.schemas.document import CHARS_PER_TOKEN, TextChunk, estimate_tokens
from src.utils.logger import get_logger

logger = get_logger(__name__)


class TokenBudgetChunker:
    """
    Line-aligned text chunker.

    Algorithm:
        Lines accumulate into the current chunk. Before a line is added,
        if the chunk would exceed the budget and is not empty, the chunk
        is closed and the line starts a new one.

    Usage:
        chunker = TokenBudgetChunker(token_budget=7000)
        chunks = chunker.chunk(text)
    """

    def __init__(self, token_budget: int) -> None:
        """
        Initialize chunker.

        Args:
            token_budget: Maximum estimated tokens per chunk (must be positive)
        """
        if token_budget < 1:
            raise ValueError(f"token_budget must be positive, got {token_budget}")
        self._token_budget = token_budget

    @property
    def token_budget(self) -> int:
        return self._token_budget

    def chunk(self, text: str) -> list[TextChunk]:
        """
        Split text into chunks.

        Args:
            text: Filtered document text

        Returns:
            Ordered list of TextChunk (at least one)
        """
        lines = text.split("\n")

        if estimate_tokens(text) <= self._token_budget:
            logger.debug(
                "Text fits token budget, single chunk",
                tokens=estimate_tokens(text),
                token_budget=self._token_budget,
            )
            return [TextChunk(index=0, lines=lines)]

        chunks: list[TextChunk] = []
        current: list[str] = []
        # Characters of "\n".join(current)
        current_chars = 0

        for line in lines:
            added_chars = len(line) if not current else len(line) + 1
            projected = math.ceil((current_chars + added_chars) / CHARS_PER_TOKEN)

            if projected > self._token_budget and current:
                chunks.append(TextChunk(index=len(chunks), lines=current))
                current = [line]
                current_chars = len(line)
            else:
                current.append(line)
                current_chars += added_chars

        if current:
            chunks.append(TextChunk(index=len(chunks), lines=current))

        oversized = sum(1 for c in chunks if c.estimated_tokens > self._token_budget)
        logger.info(
            "Text split into chunks",
            chunks=len(chunks),
            lines=len(lines),
            token_budget=self._token_budget,
            oversized_chunks=oversized,
        )
        return chunks
