"""
AI Product Entry Service
========================

Extracts structured packaging-product records from supplier documents.

Features:
- Spreadsheet, PDF and slide-deck text extraction
- Noise normalization and keyword relevance filtering
- Token-budgeted chunking with relevance ordering
- LLM-based extraction with lenient response parsing
- Cross-chunk deduplication and catalog similarity scoring

"""

__version__ = "1.0.0"
