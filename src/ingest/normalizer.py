"""
Text Normalizer
===============

Removes markup noise from extracted document text before filtering
and chunking. Line structure is preserved; only blank-line runs are
collapsed.

Normalization is idempotent: the rule pass is repeated until the text
stops changing, and every rule either shortens the text or leaves it
untouched, so the loop always terminates.
"""

import re
from collections.abc import Iterable

from src.utils.errors import ConfigurationError
from src.utils.logger import get_logger

logger = get_logger(__name__)

# (pattern, replacement) applied in order on every pass
_BASE_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"&nbsp;"), " "),
    (re.compile(r"&[a-zA-Z0-9#]+;"), ""),
    (re.compile(r"\[[^\]\n]*\]"), ""),
    (re.compile(r"\(\s*\)"), ""),
    (re.compile(r"\{\s*\}"), ""),
    (re.compile(r"\|{2,}"), "|"),
    (re.compile(r"-{4,}"), "---"),
    (re.compile(r"={4,}"), "==="),
    (re.compile(r"\.{4,}"), "..."),
]

_BLANK_LINES = re.compile(r"\n\s*\n")


class TextNormalizer:
    """
    Noise-removal pass over document text.

    Removes:
    - HTML/XML named and numeric entities (&nbsp; becomes a space)
    - Bracketed spans [...] within a line
    - Empty () and {}
    - Repeated pipes (collapsed to one)
    - Runs of 3+ '-', '=' or '.' (collapsed to exactly 3)
    - Configured noise patterns (page numbers, table-of-contents headers, ...)
    - Blank-line runs (collapsed to one newline)

    Example:
        >>> TextNormalizer().normalize("Bottle [draft] || 250ml\\n\\n\\nJar ......")
        'Bottle  | 250ml\\nJar ...'
    """

    def __init__(self, extra_noise_patterns: Iterable[str] = ()) -> None:
        """
        Initialize normalizer.

        Args:
            extra_noise_patterns: Additional regexes whose matches are removed

        Raises:
            ConfigurationError: If a noise pattern is not a valid regex
        """
        noise_rules: list[tuple[re.Pattern[str], str]] = []
        for pattern in extra_noise_patterns:
            try:
                noise_rules.append((re.compile(pattern), ""))
            except re.error as e:
                raise ConfigurationError(
                    message=f"Invalid noise pattern: {pattern}",
                    details={"pattern": pattern, "error": str(e)},
                ) from e

        # Noise patterns run before bracket and separator cleanup
        self._rules = noise_rules + _BASE_RULES

    def _apply_rules(self, text: str) -> str:
        for pattern, replacement in self._rules:
            text = pattern.sub(replacement, text)
        return _BLANK_LINES.sub("\n", text)

    def normalize(self, text: str) -> str:
        """
        Normalize text until it reaches a fixed point.

        Args:
            text: Raw extracted text

        Returns:
            Normalized text; normalize(normalize(t)) == normalize(t)
        """
        current = text
        while True:
            updated = self._apply_rules(current)
            if updated == current:
                break
            current = updated

        if len(current) != len(text):
            logger.debug(
                "Text normalized",
                chars_before=len(text),
                chars_after=len(current),
            )
        return current
