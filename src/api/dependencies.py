"""
API Dependencies
================

FastAPI dependency providers for the extraction routes.

Each request gets its own pipeline built from the current settings;
tests override `get_provider_config`, `get_provider` or `get_catalog`.
"""

from typing import Annotated

from fastapi import Depends, Request

from src.config.pipeline import PipelineConfig, ProviderConfig, resolve_provider_config
from src.config.settings import Settings, get_settings
from src.services.catalog import InMemoryCatalog, ProductCatalog
from src.services.pipeline import ProductExtractionPipeline
from src.services.providers import CompletionProvider, create_provider


def get_app_settings() -> Settings:
    return get_settings()


def get_provider_config(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ProviderConfig:
    """
    Resolve the LLM provider from settings.

    Raises:
        ConfigurationError: If no provider is configured (mapped to 503)
    """
    return resolve_provider_config(settings)


def get_provider(
    provider_config: Annotated[ProviderConfig, Depends(get_provider_config)],
) -> CompletionProvider:
    return create_provider(provider_config)


def get_catalog(request: Request) -> ProductCatalog:
    """Catalog attached to the application state at startup."""
    catalog = getattr(request.app.state, "catalog", None)
    if catalog is None:
        catalog = InMemoryCatalog()
        request.app.state.catalog = catalog
    return catalog


def get_pipeline(
    settings: Annotated[Settings, Depends(get_app_settings)],
    provider_config: Annotated[ProviderConfig, Depends(get_provider_config)],
    provider: Annotated[CompletionProvider, Depends(get_provider)],
    catalog: Annotated[ProductCatalog, Depends(get_catalog)],
) -> ProductExtractionPipeline:
    config = PipelineConfig.from_settings(settings, provider_config)
    return ProductExtractionPipeline(config, provider, catalog)


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
PipelineDep = Annotated[ProductExtractionPipeline, Depends(get_pipeline)]
