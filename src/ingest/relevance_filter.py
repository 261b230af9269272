"""
Relevance Filter
================

Keyword-driven line selection with bounded context windows.

Shrinks document text before chunking by keeping only lines that
mention product vocabulary, plus a few neighbouring lines so row
context (headers, continuation lines) survives.
"""

from collections.abc import Iterable

from src.utils.logger import get_logger

logger = get_logger(__name__)


class RelevanceFilter:
    """
    Select product-relevant lines from document text.

    A line is relevant when its lower-cased form contains any keyword.
    For a relevant line at index i, lines [i - context_lines, i + context_lines]
    are kept. Each source line is emitted at most once, in original order;
    identical lines at different positions are all kept.

    If no line is relevant the input is returned unchanged.
    """

    def __init__(self, keywords: Iterable[str], context_lines: int = 2) -> None:
        """
        Initialize filter.

        Args:
            keywords: Domain vocabulary (matched case-insensitively as substrings)
            context_lines: Lines kept on each side of a relevant line
        """
        self._keywords = tuple(k.lower() for k in keywords if k)
        self._context_lines = max(0, context_lines)

    def is_relevant(self, line: str) -> bool:
        lowered = line.lower()
        return any(keyword in lowered for keyword in self._keywords)

    def filter(self, text: str) -> str:
        """
        Keep relevant lines and their context.

        Args:
            text: Normalized document text

        Returns:
            Filtered text, or the original text when nothing matches
        """
        lines = text.split("\n")
        keep: set[int] = set()
        for i, line in enumerate(lines):
            if self.is_relevant(line):
                start = max(0, i - self._context_lines)
                end = min(len(lines), i + self._context_lines + 1)
                keep.update(range(start, end))

        if not keep:
            logger.info(
                "No relevant lines found, keeping full text",
                lines=len(lines),
            )
            return text

        filtered = [lines[i] for i in sorted(keep)]
        logger.debug(
            "Relevance filter applied",
            lines_before=len(lines),
            lines_after=len(filtered),
        )
        return "\n".join(filtered)
