"""
PDF Extractor
=============

Extracts the text layer of a PDF using pymupdf4llm.

pymupdf4llm renders each page as Markdown, keeping table rows on
single lines, which suits line-based relevance filtering. The output
is passed on unmodified; page and column order are whatever the
library yields.
"""

import pymupdf
import pymupdf4llm

from src.ingest.base import FormatExtractor
from src.schemas.document import DocumentFormat
from src.utils.logger import get_logger

logger = get_logger(__name__)


class PdfExtractor(FormatExtractor):
    """PDF text-layer extraction strategy."""

    label = "PDF"

    def __init__(self, max_pages: int | None = 100) -> None:
        """
        Initialize PDF extractor.

        Args:
            max_pages: Maximum pages to read from the start (None = all)
        """
        self._max_pages = max_pages

    @property
    def document_format(self) -> DocumentFormat:
        return DocumentFormat.PDF

    def _extract_text(self, content: bytes) -> str:
        with pymupdf.open(stream=content, filetype="pdf") as doc:
            page_count = doc.page_count
            limit = page_count
            if self._max_pages is not None:
                limit = min(page_count, self._max_pages)
            if limit < page_count:
                logger.warning(
                    "PDF has more pages than allowed, truncating",
                    pages=page_count,
                    max_pages=self._max_pages,
                )

            text = pymupdf4llm.to_markdown(
                doc,
                pages=list(range(limit)),
                show_progress=False,
            )

        logger.debug("PDF text layer extracted", pages=limit, chars=len(text))
        return text

    def _empty_placeholder(self, size: int) -> str:
        return (
            f"PDF file processed: {size} bytes.\n"
            "No text layer was found; the document may consist of scanned images.\n"
            "Please provide the product information in a more text-friendly format."
        )
