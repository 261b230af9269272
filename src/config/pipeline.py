"""
Pipeline Configuration
======================

Immutable per-run configuration passed into the extraction pipeline.

Each pipeline run receives its own ProviderConfig and PipelineConfig,
so several provider setups can coexist in one process.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.config.settings import (
    DEFAULT_EXTRA_NOISE_PATTERNS,
    DEFAULT_PRIORITY_KEYWORDS,
    DEFAULT_PRODUCT_KEYWORDS,
    ProviderName,
    Settings,
    token_limit_for,
)
from src.utils.errors import ConfigurationError


class ProviderConfig(BaseModel):
    """Connection and budget settings for one LLM provider."""

    model_config = ConfigDict(frozen=True)

    name: ProviderName
    model: str
    base_url: str
    api_key: str | None = None
    token_budget: int = Field(..., ge=1)
    temperature: float = 0.1
    max_output_tokens: int = 4000
    request_timeout: float = 120.0
    max_retries: int = 3
    retry_delay: float = 1.0


class PipelineConfig(BaseModel):
    """Text-processing and scoring settings for one extraction run."""

    model_config = ConfigDict(frozen=True)

    token_budget: int = Field(default=7000, ge=1)
    temperature: float = 0.1
    max_output_tokens: int = 4000
    product_keywords: tuple[str, ...] = tuple(DEFAULT_PRODUCT_KEYWORDS)
    priority_keywords: tuple[str, ...] = tuple(DEFAULT_PRIORITY_KEYWORDS)
    context_lines: int = Field(default=2, ge=0)
    extra_noise_patterns: tuple[str, ...] = tuple(DEFAULT_EXTRA_NOISE_PATTERNS)
    max_sheets: int = 10
    max_rows_per_sheet: int = 10000
    max_pdf_pages: int = 100
    max_slides: int = 200
    include_slide_notes: bool = True
    similarity_threshold: float = 0.3
    similarity_top_k: int = 5

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        provider: ProviderConfig | None = None,
    ) -> "PipelineConfig":
        """
        Build a pipeline configuration from application settings.

        Args:
            settings: Loaded application settings
            provider: Provider whose token budget and sampling settings apply

        Returns:
            Frozen PipelineConfig
        """
        token_budget = settings.token_budget_override
        if token_budget is None:
            token_budget = provider.token_budget if provider else 7000

        return cls(
            token_budget=token_budget,
            temperature=provider.temperature if provider else settings.llm_temperature,
            max_output_tokens=(
                provider.max_output_tokens if provider else settings.llm_max_output_tokens
            ),
            product_keywords=tuple(settings.product_keywords),
            priority_keywords=tuple(settings.priority_keywords),
            context_lines=settings.context_lines,
            extra_noise_patterns=tuple(settings.extra_noise_patterns),
            max_sheets=settings.max_sheets,
            max_rows_per_sheet=settings.max_rows_per_sheet,
            max_pdf_pages=settings.max_pdf_pages,
            max_slides=settings.max_slides,
            include_slide_notes=settings.include_slide_notes,
            similarity_threshold=settings.similarity_threshold,
            similarity_top_k=settings.similarity_top_k,
        )


def _provider_available(settings: Settings, name: str) -> bool:
    if name == "openai":
        return bool(settings.openai_api_key)
    if name == "groq":
        return bool(settings.groq_api_key)
    if name == "ollama":
        return settings.ollama_enabled
    return False


def resolve_provider_config(settings: Settings) -> ProviderConfig:
    """
    Select an LLM provider from settings.

    An explicitly configured provider wins; otherwise the first provider in
    priority order that has credentials is used.

    Raises:
        ConfigurationError: If no provider can be used
    """
    name = settings.ai_provider
    if name is None:
        name = next(
            (p for p in settings.provider_priority if _provider_available(settings, p)),
            None,
        )
    if name is None:
        raise ConfigurationError(
            message=(
                "No AI provider configured. Set OPENAI_API_KEY or GROQ_API_KEY, "
                "or enable Ollama with OLLAMA_ENABLED=true."
            ),
            details={"provider_priority": list(settings.provider_priority)},
        )

    if name == "openai":
        model, base_url, api_key = (
            settings.openai_model, settings.openai_base_url, settings.openai_api_key
        )
    elif name == "groq":
        model, base_url, api_key = (
            settings.groq_model, settings.groq_base_url, settings.groq_api_key
        )
    else:
        model, base_url, api_key = settings.ollama_llm_model, settings.ollama_base_url, None

    if name in ("openai", "groq") and not api_key:
        raise ConfigurationError(
            message=f"Provider '{name}' selected but no API key is set",
            details={"provider": name},
        )

    return ProviderConfig(
        name=name,
        model=model,
        base_url=base_url.rstrip("/"),
        api_key=api_key,
        token_budget=settings.token_budget_override or token_limit_for(name, model),
        temperature=settings.llm_temperature,
        max_output_tokens=settings.llm_max_output_tokens,
        request_timeout=settings.llm_request_timeout,
        max_retries=settings.llm_max_retries,
        retry_delay=settings.llm_retry_delay,
    )
