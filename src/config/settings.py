"""
Settings Configuration
======================

Environment variable management using pydantic-settings.
Follows the 12-factor app methodology.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["openai", "groq", "ollama"]

# Per-request token budgets, already reduced by a safety margin below the
# provider's context window.
TOKEN_LIMITS: dict[str, dict[str, int]] = {
    "openai": {
        "gpt-4o": 120000,
        "gpt-4": 7000,
        "gpt-3.5-turbo": 15000,
    },
    "groq": {
        "llama-3.1-70b-versatile": 7000,
        "llama-3.1-8b-instant": 7000,
        "mixtral-8x7b-32768": 30000,
    },
    "ollama": {
        "llama3": 7000,
    },
}

DEFAULT_TOKEN_LIMITS: dict[str, int] = {
    "openai": 120000,
    "groq": 7000,
    "ollama": 7000,
}

DEFAULT_PRODUCT_KEYWORDS: list[str] = [
    "product", "bottle", "jar", "cap", "container", "packaging",
    "ml", "oz", "liter", "gallon", "gram", "kg", "pound",
    "material", "plastic", "glass", "aluminum", "steel", "hdpe", "pet",
    "price", "cost", "$", "€", "£", "usd", "eur", "pricing",
    "specification", "dimension", "size", "height", "width", "depth",
    "minimum order", "moq", "quantity", "wholesale", "bulk",
    "certification", "fda", "iso", "compliant", "approved",
    "color", "transparent", "opaque", "clear", "amber", "blue",
    "closure", "screw", "snap", "pump", "spray", "dropper",
    "finish", "glossy", "matte", "smooth", "textured",
]

DEFAULT_PRIORITY_KEYWORDS: list[str] = [
    "product", "bottle", "jar", "cap", "container", "packaging",
    "specification", "price", "cost", "material", "dimension",
]

DEFAULT_EXTRA_NOISE_PATTERNS: list[str] = [
    r"(?i)\bPage \d+\b",
    r"(?im)^Table of Contents",
    r"(?im)^Index$",
    r"(?im)^References$",
    r"(?im)^Appendix",
]


def token_limit_for(provider: str, model: str) -> int:
    """Look up the token budget for a provider/model pair."""
    models = TOKEN_LIMITS.get(provider, {})
    if model in models:
        return models[model]
    return DEFAULT_TOKEN_LIMITS.get(provider, 7000)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Server Configuration
    # -------------------------------------------------------------------------
    fastapi_host: str = Field(default="0.0.0.0", description="Server host")
    fastapi_port: int = Field(default=8002, description="Server port")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development", description="Deployment environment"
    )

    # -------------------------------------------------------------------------
    # LLM Provider Configuration
    # -------------------------------------------------------------------------
    ai_provider: ProviderName | None = Field(
        default=None, description="Force a provider (openai, groq, ollama)"
    )
    provider_priority: list[ProviderName] = Field(
        default_factory=lambda: ["groq", "openai", "ollama"],
        description="Provider preference order when none is forced",
    )
    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1", description="OpenAI API base URL"
    )
    openai_model: str = Field(default="gpt-4o", description="OpenAI model name")
    groq_api_key: str | None = Field(default=None, description="Groq API key")
    groq_base_url: str = Field(
        default="https://api.groq.com/openai/v1", description="Groq API base URL"
    )
    groq_model: str = Field(
        default="llama-3.1-70b-versatile", description="Groq model name"
    )
    ollama_base_url: str = Field(
        default="http://localhost:11434", description="Ollama API base URL"
    )
    ollama_llm_model: str = Field(default="llama3", description="Ollama model name")
    ollama_enabled: bool = Field(
        default=False, description="Allow auto-selection of the local Ollama provider"
    )

    llm_temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    llm_max_output_tokens: int = Field(default=4000, ge=1)
    llm_request_timeout: float = Field(default=120.0, gt=0, description="Seconds")
    llm_max_retries: int = Field(default=3, ge=1, le=10)
    llm_retry_delay: float = Field(default=1.0, ge=0.0, description="Seconds")
    token_budget_override: int | None = Field(
        default=None, ge=1, description="Replace the provider's token budget"
    )

    # -------------------------------------------------------------------------
    # Text Processing Configuration
    # -------------------------------------------------------------------------
    product_keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_PRODUCT_KEYWORDS))
    priority_keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_PRIORITY_KEYWORDS))
    context_lines: int = Field(default=2, ge=0, le=50)
    extra_noise_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTRA_NOISE_PATTERNS)
    )

    # -------------------------------------------------------------------------
    # File Processing Configuration
    # -------------------------------------------------------------------------
    max_file_size_mb: int = Field(default=50, ge=1, le=500, description="Max file size in MB")
    max_sheets: int = Field(default=10, ge=1)
    max_rows_per_sheet: int = Field(default=10000, ge=1)
    max_pdf_pages: int = Field(default=100, ge=1)
    max_slides: int = Field(default=200, ge=1)
    include_slide_notes: bool = Field(default=True)
    max_files_per_request: int = Field(default=10, ge=1, le=50)

    # -------------------------------------------------------------------------
    # Similarity Configuration
    # -------------------------------------------------------------------------
    similarity_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    similarity_top_k: int = Field(default=5, ge=1)

    @property
    def max_file_size_bytes(self) -> int:
        """Upload size limit in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once
    and reused across the application.
    """
    return Settings()
