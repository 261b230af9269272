"""
Custom Exception Classes
========================

Application-specific exceptions for proper error handling.
"""

from typing import Any


class ProductEntryError(Exception):
    """Base exception for the product entry service."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ParsingError(ProductEntryError):
    """Raised when a document container cannot be read."""

    pass


class UnsupportedFormatError(ProductEntryError):
    """Raised when a document format is not supported."""

    pass


class FileSizeError(ProductEntryError):
    """Raised when a file exceeds the maximum allowed size."""

    pass


class ProviderError(ProductEntryError):
    """
    Raised when the LLM provider call fails.

    Covers network failures, timeouts, non-2xx responses and
    empty completions.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class ResponseParseError(ProductEntryError):
    """Raised when a located JSON object cannot be decoded or lacks a products array."""

    pass


class ResponseValidationError(ProductEntryError):
    """Raised when an extracted product lacks a string name or category."""

    pass


class ConfigurationError(ProductEntryError):
    """Raised when configuration is invalid."""

    pass


# Failures the orchestrator absorbs at the per-chunk boundary
CHUNK_RECOVERABLE_ERRORS = (ProviderError, ResponseParseError, ResponseValidationError)
