"""
Schemas Package
===============

Pydantic models for documents, products and API responses.
"""

from src.schemas.document import (
    DocumentFormat,
    ExtractedText,
    RawDocument,
    TextChunk,
    estimate_tokens,
)
from src.schemas.product import (
    BottleFilters,
    CapFilters,
    CatalogProduct,
    Certification,
    ClosureFilters,
    CommonFilters,
    Customization,
    DynamicSpec,
    EcoScoreDetails,
    GenericFilters,
    JarFilters,
    Pricing,
    ProductCandidate,
    SimilarProduct,
    Specifications,
    Sustainability,
    TubeFilters,
)
from src.schemas.responses import (
    BulkExtractionResponse,
    ErrorResponse,
    ExtractionResponse,
    ExtractionSummary,
    FileExtractionError,
    HealthCheckResponse,
    ProductExtractionResponse,
)

__all__ = [
    # Document models
    "DocumentFormat",
    "RawDocument",
    "ExtractedText",
    "TextChunk",
    "estimate_tokens",
    # Product models
    "ProductCandidate",
    "Specifications",
    "Pricing",
    "Sustainability",
    "EcoScoreDetails",
    "Customization",
    "Certification",
    "DynamicSpec",
    "CommonFilters",
    "TubeFilters",
    "BottleFilters",
    "JarFilters",
    "CapFilters",
    "ClosureFilters",
    "GenericFilters",
    "CatalogProduct",
    "SimilarProduct",
    # Responses
    "ExtractionSummary",
    "ExtractionResponse",
    "ProductExtractionResponse",
    "BulkExtractionResponse",
    "FileExtractionError",
    "HealthCheckResponse",
    "ErrorResponse",
]
