"""
Extractor Factory - Strategy Selection
======================================

Factory for instantiating the correct text extractor for a document format.
"""

from src.config.pipeline import PipelineConfig
from src.ingest.base import FormatExtractor
from src.ingest.pdf_extractor import PdfExtractor
from src.ingest.slides_extractor import SlidesExtractor
from src.ingest.spreadsheet_extractor import SpreadsheetExtractor
from src.schemas.document import DocumentFormat
from src.utils.errors import UnsupportedFormatError
from src.utils.logger import get_logger

logger = get_logger(__name__)

# Registry of available extractors
_EXTRACTOR_REGISTRY: dict[DocumentFormat, type[FormatExtractor]] = {
    DocumentFormat.SPREADSHEET: SpreadsheetExtractor,
    DocumentFormat.PDF: PdfExtractor,
    DocumentFormat.SLIDES: SlidesExtractor,
}


class ExtractorFactory:
    """
    Factory for creating document text extractors.

    Usage:
        extractor = ExtractorFactory.create(DocumentFormat.PDF, max_pages=10)
        extractor = ExtractorFactory.for_config(DocumentFormat.SLIDES, config)
    """

    @staticmethod
    def create(document_format: DocumentFormat, **kwargs) -> FormatExtractor:
        """
        Create an extractor for the given format.

        Args:
            document_format: Container format of the document
            **kwargs: Additional arguments passed to the extractor constructor

        Returns:
            FormatExtractor implementation

        Raises:
            UnsupportedFormatError: If no extractor is registered for the format
        """
        extractor_class = _EXTRACTOR_REGISTRY.get(document_format)
        if not extractor_class:
            raise UnsupportedFormatError(
                message=f"Unsupported document format: {document_format}",
                details={
                    "format": str(document_format),
                    "supported_formats": [f.value for f in _EXTRACTOR_REGISTRY],
                },
            )

        logger.debug(
            "Creating extractor",
            format=document_format.value,
            extractor=extractor_class.__name__,
        )
        return extractor_class(**kwargs)

    @staticmethod
    def for_config(document_format: DocumentFormat, config: PipelineConfig) -> FormatExtractor:
        """Create an extractor with the limits from a pipeline configuration."""
        if document_format == DocumentFormat.SPREADSHEET:
            return ExtractorFactory.create(
                document_format,
                max_sheets=config.max_sheets,
                max_rows_per_sheet=config.max_rows_per_sheet,
            )
        if document_format == DocumentFormat.PDF:
            return ExtractorFactory.create(document_format, max_pages=config.max_pdf_pages)
        if document_format == DocumentFormat.SLIDES:
            return ExtractorFactory.create(
                document_format,
                max_slides=config.max_slides,
                include_notes=config.include_slide_notes,
            )
        return ExtractorFactory.create(document_format)

    @staticmethod
    def get_supported_formats() -> list[DocumentFormat]:
        return list(_EXTRACTOR_REGISTRY.keys())

    @staticmethod
    def register_extractor(
        document_format: DocumentFormat,
        extractor_class: type[FormatExtractor],
    ) -> None:
        """
        Register a new extractor, replacing any existing one for the format.

        Args:
            document_format: Format handled by the extractor
            extractor_class: FormatExtractor subclass
        """
        _EXTRACTOR_REGISTRY[document_format] = extractor_class
        logger.info(
            "Extractor registered",
            format=document_format.value,
            extractor=extractor_class.__name__,
        )
