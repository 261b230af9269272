"""
Document Schema Tests
=====================

Tests for format detection, token estimation and chunk models.
"""

import pytest

from src.schemas.document import (
    DocumentFormat,
    ExtractedText,
    RawDocument,
    TextChunk,
    estimate_tokens,
)


class TestDocumentFormat:
    @pytest.mark.parametrize(
        ("mime_type", "expected"),
        [
            ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", DocumentFormat.SPREADSHEET),
            ("application/vnd.ms-excel", DocumentFormat.SPREADSHEET),
            ("application/pdf", DocumentFormat.PDF),
            ("application/vnd.openxmlformats-officedocument.presentationml.presentation", DocumentFormat.SLIDES),
            ("application/vnd.ms-powerpoint", DocumentFormat.SLIDES),
            ("text/plain", None),
            ("application/octet-stream", None),
            (None, None),
        ],
    )
    def test_from_mime_type(self, mime_type, expected) -> None:
        assert DocumentFormat.from_mime_type(mime_type) == expected

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("prices.XLSX", DocumentFormat.SPREADSHEET),
            ("legacy.xls", DocumentFormat.SPREADSHEET),
            ("catalog.pdf", DocumentFormat.PDF),
            ("deck.pptx", DocumentFormat.SLIDES),
            ("notes.txt", None),
            ("no_extension", None),
            (None, None),
        ],
    )
    def test_from_filename(self, filename, expected) -> None:
        assert DocumentFormat.from_filename(filename) == expected


class TestTokenEstimate:
    @pytest.mark.parametrize(("text", "tokens"), [("", 0), ("abc", 1), ("abcd", 1), ("abcde", 2)])
    def test_estimate_tokens(self, text: str, tokens: int) -> None:
        assert estimate_tokens(text) == tokens


class TestModels:
    def test_raw_document_size(self) -> None:
        document = RawDocument(content=b"12345", format=DocumentFormat.PDF)

        assert document.size == 5
        assert document.filename == "upload"

    def test_extracted_text_round_trip_lines(self) -> None:
        extracted = ExtractedText.from_text("a\n\nb")

        assert extracted.lines == ["a", "", "b"]
        assert extracted.text == "a\n\nb"
        assert extracted.estimated_tokens == 1

    def test_chunk_text(self) -> None:
        chunk = TextChunk(index=2, lines=["Bottle A", "Jar B"])

        assert chunk.text == "Bottle A\nJar B"
        assert chunk.estimated_tokens == 4
        assert chunk.relevance == 0
