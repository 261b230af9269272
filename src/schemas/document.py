"""
Document Models
===============

Models for the text side of the pipeline: the uploaded document,
the extracted line sequence and the token-budgeted chunks.
"""

import math
from enum import Enum
from pathlib import PurePath

from pydantic import BaseModel, ConfigDict, Field

# Rough approximation: 1 token ~ 4 characters
CHARS_PER_TOKEN = 4

SLIDE_BREAK_MARKER = "--- SLIDE BREAK ---"
NOTES_MARKER = "--- NOTES ---"


def estimate_tokens(text: str) -> int:
    """Estimate token count as ceil(characters / 4)."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


class DocumentFormat(str, Enum):
    """Container formats accepted for product extraction."""

    SPREADSHEET = "spreadsheet"
    PDF = "pdf"
    SLIDES = "slides"

    @classmethod
    def from_mime_type(cls, mime_type: str | None) -> "DocumentFormat | None":
        """
        Map a declared MIME type onto a document format.

        Matching is by substring so vendor types such as
        application/vnd.ms-excel and the OOXML variants both resolve.
        """
        if not mime_type:
            return None
        mime = mime_type.lower()
        if "spreadsheet" in mime or "excel" in mime:
            return cls.SPREADSHEET
        if "pdf" in mime:
            return cls.PDF
        if "presentation" in mime or "powerpoint" in mime:
            return cls.SLIDES
        return None

    @classmethod
    def from_filename(cls, filename: str | None) -> "DocumentFormat | None":
        """Map a file extension onto a document format."""
        if not filename:
            return None
        extension = PurePath(filename).suffix.lower().lstrip(".")
        return _EXTENSION_FORMATS.get(extension)


_EXTENSION_FORMATS: dict[str, DocumentFormat] = {
    "xlsx": DocumentFormat.SPREADSHEET,
    "xlsm": DocumentFormat.SPREADSHEET,
    "xls": DocumentFormat.SPREADSHEET,
    "pdf": DocumentFormat.PDF,
    "pptx": DocumentFormat.SLIDES,
}


class RawDocument(BaseModel):
    """
    Uploaded document as received from the HTTP layer.

    Consumed once by a format extractor and never persisted.

    Attributes:
        content: Raw file bytes
        format: Declared container format
        filename: Original filename, used for prompt context and logging only
        mime_type: Declared MIME type, if any
    """

    model_config = ConfigDict(frozen=True)

    content: bytes = Field(..., repr=False)
    format: DocumentFormat
    filename: str = Field(default="upload")
    mime_type: str | None = None

    @property
    def size(self) -> int:
        """Byte length of the document."""
        return len(self.content)


class ExtractedText(BaseModel):
    """Document text as an ordered line sequence in reading order."""

    lines: list[str] = Field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> "ExtractedText":
        return cls(lines=text.split("\n"))

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def estimated_tokens(self) -> int:
        return estimate_tokens(self.text)


class TextChunk(BaseModel):
    """
    Line-aligned partition of document text submitted as one LLM request.

    Attributes:
        index: Position of the chunk in document order (0-based)
        lines: Consecutive lines of the source text
        relevance: Keyword occurrence count, used for processing order only
    """

    index: int = Field(..., ge=0)
    lines: list[str] = Field(default_factory=list)
    relevance: int = Field(default=0, ge=0)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def estimated_tokens(self) -> int:
        return estimate_tokens(self.text)
