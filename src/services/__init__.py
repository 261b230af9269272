"""
Business Services
=================

Service layer orchestrating product extraction.

Components:
    - CompletionProvider: LLM completion capability (OpenAI/Groq, Ollama)
    - ResponseParser: Lenient parsing and defaulting of LLM output
    - ExtractionOrchestrator: Sequential per-chunk extraction with failure isolation
    - DeduplicationService: Exact name|category deduplication
    - SimilarityScorer: Weighted similarity against catalog products
    - ProductExtractionPipeline: Document-to-products entry point
"""

from src.services.catalog import InMemoryCatalog, ProductCatalog
from src.services.deduplication_service import DeduplicationService, DeduplicationStats
from src.services.orchestrator import ExtractionOrchestrator, OrchestrationResult
from src.services.pipeline import PipelineStage, ProductExtractionPipeline, build_pipeline
from src.services.providers import (
    CompletionProvider,
    OllamaProvider,
    OpenAICompatibleProvider,
    create_provider,
)
from src.services.response_parser import ResponseParser
from src.services.similarity import SimilarityScorer

__all__ = [
    # Providers
    "CompletionProvider",
    "OpenAICompatibleProvider",
    "OllamaProvider",
    "create_provider",
    # Extraction
    "ResponseParser",
    "ExtractionOrchestrator",
    "OrchestrationResult",
    "DeduplicationService",
    "DeduplicationStats",
    "SimilarityScorer",
    # Pipeline
    "ProductCatalog",
    "InMemoryCatalog",
    "PipelineStage",
    "ProductExtractionPipeline",
    "build_pipeline",
]
