"""
Format Extractor Abstract Base Class
====================================

Defines the interface for document text extractors.
All extractors (spreadsheet, PDF, slides) implement this interface.

Contract:
    - Input: raw document bytes
    - Output: ExtractedText (lines in reading order)
    - Errors: never raised for unreadable content; a diagnostic
      placeholder mentioning the byte length is returned instead
"""

from abc import ABC, abstractmethod

from src.schemas.document import DocumentFormat, ExtractedText
from src.utils.logger import get_logger

logger = get_logger(__name__)


def failure_placeholder(label: str, size: int, reason: str) -> str:
    """Diagnostic text used when a container cannot be read."""
    return (
        f"{label} file could not be fully processed: {size} bytes.\n"
        f"Extraction error: {reason}\n"
        "Please provide the product information in a more text-friendly format "
        "(e.g. a spreadsheet or a text-based PDF)."
    )


class FormatExtractor(ABC):
    """
    Abstract base class for document text extraction strategies.

    Subclasses implement `_extract_text`; `extract` wraps it so that
    corrupt or empty containers degrade to placeholder text.
    """

    label: str = "Document"

    @property
    @abstractmethod
    def document_format(self) -> DocumentFormat:
        """Format handled by this extractor."""
        ...

    @abstractmethod
    def _extract_text(self, content: bytes) -> str:
        """
        Read the container and return its text.

        Raises:
            Any exception raised by the underlying reader library
        """
        ...

    def extract(self, content: bytes) -> ExtractedText:
        """
        Extract text lines from raw bytes.

        Blocking; callers on the event loop should run it in a worker thread.

        Args:
            content: Raw document bytes

        Returns:
            Non-empty ExtractedText
        """
        try:
            text = self._extract_text(content)
        except Exception as e:
            logger.warning(
                "Document extraction failed, using placeholder",
                extractor=type(self).__name__,
                size=len(content),
                error=str(e),
            )
            text = failure_placeholder(self.label, len(content), str(e))

        if not text.strip():
            text = self._empty_placeholder(len(content))

        extracted = ExtractedText.from_text(text)
        logger.debug(
            "Document text extracted",
            extractor=type(self).__name__,
            size=len(content),
            lines=len(extracted.lines),
            chars=len(text),
        )
        return extracted

    def _empty_placeholder(self, size: int) -> str:
        return failure_placeholder(self.label, size, "no text content found")
