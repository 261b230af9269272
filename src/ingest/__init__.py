"""
Ingest Package
==============

Document text extraction and text preparation.

Components:
    - FormatExtractor: Abstract base class for extraction strategies
    - SpreadsheetExtractor: Excel workbooks as pipe-joined rows
    - PdfExtractor: PDF text layer via pymupdf4llm
    - SlidesExtractor: PowerPoint text runs with slide/notes markers
    - ExtractorFactory: Factory for selecting extractors
    - TextNormalizer: Idempotent noise removal
    - RelevanceFilter: Keyword line selection with context windows
    - TokenBudgetChunker: Line-aligned token-budgeted chunks
    - ChunkPrioritizer: Keyword-density ordering of chunks
"""

from src.ingest.base import FormatExtractor
from src.ingest.chunker import TokenBudgetChunker
from src.ingest.extractor_factory import ExtractorFactory
from src.ingest.normalizer import TextNormalizer
from src.ingest.pdf_extractor import PdfExtractor
from src.ingest.prioritizer import ChunkPrioritizer
from src.ingest.relevance_filter import RelevanceFilter
from src.ingest.slides_extractor import SlidesExtractor
from src.ingest.spreadsheet_extractor import SpreadsheetExtractor

__all__ = [
    # Extraction
    "FormatExtractor",
    "SpreadsheetExtractor",
    "PdfExtractor",
    "SlidesExtractor",
    "ExtractorFactory",
    # Text preparation
    "TextNormalizer",
    "RelevanceFilter",
    "TokenBudgetChunker",
    "ChunkPrioritizer",
]
