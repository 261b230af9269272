"""
Slide Deck Extractor
====================

Extracts visible text from PowerPoint (.pptx) decks.

A .pptx file is a zip archive of XML parts. Text runs (<a:t>) are
pulled from each slide part with a lightweight pattern match rather
than a full XML parse; the part layout is simple and well known.
"""

import io
import re
import zipfile

from src.ingest.base import FormatExtractor
from src.schemas.document import NOTES_MARKER, SLIDE_BREAK_MARKER, DocumentFormat
from src.utils.logger import get_logger

logger = get_logger(__name__)

_SLIDE_PART = re.compile(r"^ppt/slides/slide\d+\.xml$")
_NOTES_PART = re.compile(r"^ppt/notesSlides/notesSlide\d+\.xml$")
# <a:t> or <a:t xml:space="preserve">, but not <a:tab/>, <a:tbl>, <a:tc>
_TEXT_RUN = re.compile(r"<a:t(?:\s[^>]*)?>(.*?)</a:t>", re.DOTALL)

# &amp; must be replaced last so "&amp;lt;" becomes "&lt;", not "<"
_XML_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&#39;", "'"),
    ("&amp;", "&"),
)


def unescape_xml(text: str) -> str:
    """Replace the standard XML entities with their characters."""
    for entity, char in _XML_ENTITIES:
        text = text.replace(entity, char)
    return text


def extract_text_runs(xml: str) -> list[str]:
    """Return the stripped, non-empty text runs of one XML part."""
    runs = (unescape_xml(m).strip() for m in _TEXT_RUN.findall(xml))
    return [r for r in runs if r]


class SlidesExtractor(FormatExtractor):
    """
    PowerPoint deck extraction strategy.

    Output layout:
        <text runs of slide 1>
        --- SLIDE BREAK ---
        --- NOTES ---
        <text runs of notes 1>
        ...

    Parts are visited in archive order.
    """

    label = "PowerPoint"

    def __init__(self, max_slides: int | None = 200, include_notes: bool = True) -> None:
        """
        Initialize slides extractor.

        Args:
            max_slides: Maximum slide parts to read (None = all)
            include_notes: Whether speaker notes are extracted
        """
        self._max_slides = max_slides
        self._include_notes = include_notes

    @property
    def document_format(self) -> DocumentFormat:
        return DocumentFormat.SLIDES

    def _extract_text(self, content: bytes) -> str:
        lines: list[str] = []
        slides_seen = 0
        runs_found = 0

        with zipfile.ZipFile(io.BytesIO(content)) as archive:
            for name in archive.namelist():
                if _SLIDE_PART.match(name):
                    if self._max_slides is not None and slides_seen >= self._max_slides:
                        continue
                    slides_seen += 1
                    runs = extract_text_runs(archive.read(name).decode("utf-8", errors="replace"))
                    runs_found += len(runs)
                    lines.extend(runs)
                    lines.append(SLIDE_BREAK_MARKER)
                elif self._include_notes and _NOTES_PART.match(name):
                    runs = extract_text_runs(archive.read(name).decode("utf-8", errors="replace"))
                    if runs:
                        runs_found += len(runs)
                        lines.append(NOTES_MARKER)
                        lines.extend(runs)

        logger.debug("Slide deck parsed", slides=slides_seen, text_runs=runs_found)

        if runs_found == 0:
            return ""
        return "\n".join(lines)

    def _empty_placeholder(self, size: int) -> str:
        return (
            f"PowerPoint file processed: {size} bytes\n"
            "This PowerPoint file appears to contain presentation content, "
            "but no readable text was found.\n"
            "The slides may hold product specifications, pricing or images "
            "stored as pictures.\n"
            "For better results, consider providing the information in a more "
            "text-friendly format such as a spreadsheet or a text-based PDF."
        )
