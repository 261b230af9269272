"""
Configuration Module
====================

Environment variable management using pydantic-settings, plus the
per-run provider and pipeline configuration structs.
"""

from src.config.pipeline import PipelineConfig, ProviderConfig, resolve_provider_config
from src.config.settings import TOKEN_LIMITS, Settings, get_settings, token_limit_for

__all__ = [
    "Settings",
    "get_settings",
    "TOKEN_LIMITS",
    "token_limit_for",
    "PipelineConfig",
    "ProviderConfig",
    "resolve_provider_config",
]
