"""
FastAPI Application Entry Point
===============================

Main FastAPI application with health check, middleware,
and lifecycle management.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src import __version__
from src.config.pipeline import resolve_provider_config
from src.config.settings import get_settings
from src.schemas.responses import ErrorResponse, HealthCheckResponse
from src.services.catalog import InMemoryCatalog
from src.utils.errors import (
    ConfigurationError,
    FileSizeError,
    ProductEntryError,
    UnsupportedFormatError,
)
from src.utils.logger import bind_request_context, configure_logging, get_logger

# Configure logging at module load
configure_logging()
logger = get_logger(__name__)

_ERROR_STATUS: dict[type[ProductEntryError], int] = {
    UnsupportedFormatError: status.HTTP_400_BAD_REQUEST,
    FileSizeError: status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    ConfigurationError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(exc: ProductEntryError) -> int:
    """HTTP status code for an application error."""
    for error_type, code in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Logs the resolved provider at startup; a missing provider is not
    fatal, extraction requests report it as 503.
    """
    settings = get_settings()
    logger.info(
        "product-entry service starting",
        version=__version__,
        environment=settings.environment,
        port=settings.fastapi_port,
    )

    try:
        provider_config = resolve_provider_config(settings)
        logger.info(
            "AI provider configured",
            provider=provider_config.name,
            model=provider_config.model,
            token_budget=provider_config.token_budget,
        )
    except ConfigurationError as e:
        logger.warning("No AI provider configured", error=e.message)

    yield

    logger.info("product-entry service shutting down")


def create_app() -> FastAPI:
    """
    FastAPI application factory.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Product Entry API",
        description=(
            "AI-assisted product entry for a packaging marketplace. "
            "Extracts structured product records from supplier spreadsheets, "
            "PDF catalogs and slide decks."
        ),
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.catalog = InMemoryCatalog()

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Request Context Middleware
    # -------------------------------------------------------------------------
    @app.middleware("http")
    async def request_context(request: Request, call_next: Any) -> Any:
        """Bind a request id for pipeline logs and report the upload's timing."""
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        bind_request_context(request_id=request_id, path=request.url.path)
        started = time.perf_counter()

        response = await call_next(request)
        elapsed = time.perf_counter() - started

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.info(
            "Request handled",
            method=request.method,
            status_code=response.status_code,
            content_length=request.headers.get("content-length"),
            duration_ms=round(elapsed * 1000, 2),
        )
        return response

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(ProductEntryError)
    async def product_entry_error_handler(
        request: Request, exc: ProductEntryError
    ) -> JSONResponse:
        """Map rejected uploads and provider setup problems to HTTP errors."""
        body = ErrorResponse(error=type(exc).__name__, message=exc.message, details=exc.details)
        code = status_for(exc)
        if code >= 500:
            logger.error("Extraction request failed", **body.model_dump())
        else:
            logger.warning("Upload rejected", **body.model_dump())
        return JSONResponse(status_code=code, content=body.model_dump())

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error", error_type=type(exc).__name__)
        body = ErrorResponse(error="InternalServerError", message="An unexpected error occurred")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(),
        )

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check endpoint",
        response_model=HealthCheckResponse,
    )
    async def health_check() -> HealthCheckResponse:
        """
        Check service health status.

        Reports "degraded" when no AI provider is configured.
        """
        try:
            provider_config = resolve_provider_config(get_settings())
        except ConfigurationError:
            return HealthCheckResponse(status="degraded", version=__version__)
        return HealthCheckResponse(
            status="healthy",
            version=__version__,
            provider=provider_config.name,
            model=provider_config.model,
        )

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    from src.api.routes import extract_router

    app.include_router(extract_router, prefix="/ai", tags=["Extraction"])

    return app


# Create application instance
app = create_app()


def run() -> None:
    """Serve the application with uvicorn using configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=settings.fastapi_host,
        port=settings.fastapi_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
