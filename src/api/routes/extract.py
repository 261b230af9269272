"""
Extraction Routes
=================

API endpoints for AI product entry from uploaded documents.

Endpoints:
- POST /ai/extract-products - Extract products from one file
- POST /ai/extract-products-bulk - Extract products from several files

The declared MIME type decides the document format; the filename
extension is only consulted when the MIME type is missing or generic.
"""

from typing import Annotated

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from src.api.dependencies import PipelineDep, SettingsDep
from src.config.settings import Settings
from src.schemas.document import DocumentFormat, RawDocument
from src.schemas.responses import (
    BulkExtractionResponse,
    ExtractionSummary,
    FileExtractionError,
    ProductExtractionResponse,
)
from src.utils.errors import FileSizeError, ProductEntryError, UnsupportedFormatError
from src.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def read_upload(file: UploadFile, settings: Settings) -> RawDocument:
    """
    Read an uploaded file into a RawDocument.

    Raises:
        FileSizeError: If the file exceeds max_file_size_mb
        UnsupportedFormatError: If the file is not a spreadsheet, PDF or slide deck
    """
    filename = file.filename or "upload"
    document_format = DocumentFormat.from_mime_type(file.content_type)
    if document_format is None:
        document_format = DocumentFormat.from_filename(filename)
    if document_format is None:
        raise UnsupportedFormatError(
            message=(
                f"Unsupported file type: {file.content_type}. "
                "Upload an Excel, PDF or PowerPoint file."
            ),
            details={"filename": filename, "content_type": file.content_type},
        )

    content = await file.read()
    if len(content) > settings.max_file_size_bytes:
        raise FileSizeError(
            message=f"File exceeds the {settings.max_file_size_mb} MB limit",
            details={
                "filename": filename,
                "size": len(content),
                "max_size": settings.max_file_size_bytes,
            },
        )

    return RawDocument(
        content=content,
        format=document_format,
        filename=filename,
        mime_type=file.content_type,
    )


@router.post(
    "/extract-products",
    response_model=ProductExtractionResponse,
    status_code=status.HTTP_200_OK,
    summary="Extract products from a document",
    responses={
        400: {"description": "Unsupported file type"},
        413: {"description": "File too large"},
        503: {"description": "No AI provider configured"},
    },
)
async def extract_products(
    file: Annotated[UploadFile, File(description="Excel, PDF or PowerPoint file")],
    settings: SettingsDep,
    pipeline: PipelineDep,
) -> ProductExtractionResponse:
    """
    Extract product candidates from one uploaded document.

    Extraction always completes with a result; chunk-level LLM failures
    are reported in summary.processingNotes.
    """
    document = await read_upload(file, settings)
    logger.info(
        "Extraction requested",
        file_name=document.filename,
        format=document.format.value,
        size=document.size,
    )

    result = await pipeline.run(document)

    return ProductExtractionResponse(
        success=True,
        products=result.products,
        summary=result.summary,
        message=f"Successfully extracted {len(result.products)} products from {document.filename}",
        extracted_text_length=result.extracted_text_length,
    )


@router.post(
    "/extract-products-bulk",
    response_model=BulkExtractionResponse,
    status_code=status.HTTP_200_OK,
    summary="Extract products from several documents",
)
async def extract_products_bulk(
    files: Annotated[list[UploadFile], File(description="Excel, PDF or PowerPoint files")],
    settings: SettingsDep,
    pipeline: PipelineDep,
) -> BulkExtractionResponse:
    """
    Extract product candidates from several documents.

    Each file runs its own pipeline; a failing file is reported in
    `errors` and does not fail the request.
    """
    if len(files) > settings.max_files_per_request:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {settings.max_files_per_request} files per request",
        )

    products = []
    notes: list[str] = []
    errors: list[FileExtractionError] = []
    processed = 0

    for file in files:
        filename = file.filename or "upload"
        try:
            document = await read_upload(file, settings)
            result = await pipeline.run(document)
        except ProductEntryError as e:
            logger.warning("Bulk file failed", file_name=filename, error=e.message)
            errors.append(FileExtractionError(filename=filename, error=e.message))
            continue

        processed += 1
        products.extend(result.products)
        if result.summary.processing_notes:
            notes.append(f"{filename}: {result.summary.processing_notes}")

    return BulkExtractionResponse(
        success=processed > 0,
        products=products,
        summary=ExtractionSummary.from_products(products, " | ".join(notes)),
        message=f"Extracted {len(products)} products from {processed} of {len(files)} files",
        files_processed=processed,
        errors=errors,
    )
