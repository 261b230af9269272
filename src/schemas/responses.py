"""
Pydantic Response Models
========================

Pipeline results and API response schemas.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.schemas.product import ProductCandidate, WireModel


class ExtractionSummary(WireModel):
    """
    Summary of one extraction run.

    Attributes:
        total_products: Number of products after deduplication
        categories: Distinct categories in first-seen order
        processing_notes: Concatenated parser and chunk notes
    """

    total_products: int = Field(default=0, ge=0)
    categories: list[str] = Field(default_factory=list)
    processing_notes: str = ""

    @classmethod
    def from_products(
        cls,
        products: list[ProductCandidate],
        processing_notes: str = "",
    ) -> "ExtractionSummary":
        categories = list(dict.fromkeys(p.category for p in products))
        return cls(
            total_products=len(products),
            categories=categories,
            processing_notes=processing_notes,
        )


class ExtractionResponse(WireModel):
    """Final output of the extraction pipeline for one document."""

    products: list[ProductCandidate] = Field(default_factory=list)
    summary: ExtractionSummary = Field(default_factory=ExtractionSummary)
    extracted_text_length: int = Field(default=0, ge=0)


class ProductExtractionResponse(WireModel):
    """
    Response for POST /ai/extract-products.

    Attributes:
        success: Always true for a completed run
        products: Extracted, enriched and deduplicated products
        summary: Counts, categories and processing notes
        message: Human-readable status line
        extracted_text_length: Characters of text extracted from the document
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "products": [],
                "summary": {
                    "totalProducts": 0,
                    "categories": [],
                    "processingNotes": "No product information found in the provided text.",
                },
                "message": "Successfully extracted 0 products from catalog.pdf",
                "extractedTextLength": 1234,
            }
        }
    )

    success: bool = True
    products: list[ProductCandidate] = Field(default_factory=list)
    summary: ExtractionSummary = Field(default_factory=ExtractionSummary)
    message: str = ""
    extracted_text_length: int = Field(default=0, ge=0)


class FileExtractionError(WireModel):
    """Per-file failure in a bulk extraction request."""

    filename: str
    error: str


class BulkExtractionResponse(WireModel):
    """Response for POST /ai/extract-products-bulk."""

    success: bool = True
    products: list[ProductCandidate] = Field(default_factory=list)
    summary: ExtractionSummary = Field(default_factory=ExtractionSummary)
    message: str = ""
    files_processed: int = Field(default=0, ge=0)
    errors: list[FileExtractionError] = Field(default_factory=list)


class HealthCheckResponse(BaseModel):
    """Response for GET /health endpoint."""

    status: Annotated[
        Literal["healthy", "degraded"],
        Field(description="Overall service status"),
    ]
    version: str
    provider: str | None = Field(default=None, description="Configured LLM provider")
    model: str | None = Field(default=None, description="Configured LLM model")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: Annotated[str, Field(description="Error type identifier")]
    message: Annotated[str, Field(description="Human-readable error message")]
    details: dict[str, Any] | None = None
