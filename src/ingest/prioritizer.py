"""
Chunk Prioritizer
=================

Orders chunks so the most product-dense ones are sent to the LLM first.
"""

from collections.abc import Iterable

from src.schemas.document import TextChunk
from src.utils.logger import get_logger

logger = get_logger(__name__)


class ChunkPrioritizer:
    """Rank chunks by occurrences of high-signal keywords."""

    def __init__(self, keywords: Iterable[str]) -> None:
        self._keywords = tuple(k.lower() for k in keywords if k)

    def relevance(self, text: str) -> int:
        """Total keyword occurrence count in the text."""
        lowered = text.lower()
        return sum(lowered.count(keyword) for keyword in self._keywords)

    def prioritize(self, chunks: list[TextChunk]) -> list[TextChunk]:
        """
        Reorder chunks by descending relevance.

        Ties keep their original relative order. Each returned chunk
        carries its computed relevance; its index stays the document position.
        """
        scored = [
            chunk.model_copy(update={"relevance": self.relevance(chunk.text)})
            for chunk in chunks
        ]
        ordered = sorted(scored, key=lambda c: c.relevance, reverse=True)

        if len(ordered) > 1:
            logger.debug(
                "Chunks prioritized",
                order=[c.index for c in ordered],
                relevance=[c.relevance for c in ordered],
            )
        return ordered
