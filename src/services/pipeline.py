"""
Product Extraction Pipeline
===========================

Entry point that turns one uploaded document into enriched, deduplicated
product candidates.

Stages:
    received -> extracting_text -> normalizing -> filtering -> chunking
    -> extracting -> deduplicating -> scoring -> complete

Every run owns its data from RawDocument to the final product list;
pipeline instances only hold configuration and stateless helpers, so
one instance may serve concurrent requests.
"""

import asyncio
import time
from enum import Enum
from typing import Any

from src.config.pipeline import PipelineConfig, ProviderConfig, resolve_provider_config
from src.config.settings import Settings
from src.ingest.chunker import TokenBudgetChunker
from src.ingest.extractor_factory import ExtractorFactory
from src.ingest.normalizer import TextNormalizer
from src.ingest.prioritizer import ChunkPrioritizer
from src.ingest.relevance_filter import RelevanceFilter
from src.schemas.document import ExtractedText, RawDocument, TextChunk
from src.schemas.product import ProductCandidate
from src.schemas.responses import ExtractionResponse, ExtractionSummary
from src.services.catalog import ProductCatalog
from src.services.orchestrator import ExtractionOrchestrator
from src.services.providers import CompletionProvider, create_provider
from src.services.similarity import SimilarityScorer
from src.utils.logger import get_logger

logger = get_logger(__name__)


class PipelineStage(str, Enum):
    """Progress states of one extraction run."""

    RECEIVED = "received"
    EXTRACTING_TEXT = "extracting_text"
    NORMALIZING = "normalizing"
    FILTERING = "filtering"
    CHUNKING = "chunking"
    EXTRACTING = "extracting"
    DEDUPLICATING = "deduplicating"
    SCORING = "scoring"
    COMPLETE = "complete"


class ProductExtractionPipeline:
    """
    Document-to-products pipeline.

    Example:
        pipeline = ProductExtractionPipeline(config, provider, catalog)
        response = await pipeline.run(document)
        print(response.summary.total_products)
    """

    def __init__(
        self,
        config: PipelineConfig,
        provider: CompletionProvider,
        catalog: ProductCatalog | None = None,
    ) -> None:
        """
        Initialize pipeline.

        Args:
            config: Immutable per-run configuration
            provider: LLM completion provider
            catalog: Existing products for similarity scoring (None = skip scoring)
        """
        self.config = config
        self._provider = provider
        self._catalog = catalog
        self._normalizer = TextNormalizer(config.extra_noise_patterns)
        self._relevance_filter = RelevanceFilter(config.product_keywords, config.context_lines)
        self._chunker = TokenBudgetChunker(config.token_budget)
        self._orchestrator = ExtractionOrchestrator(
            provider,
            prioritizer=ChunkPrioritizer(config.priority_keywords),
            temperature=config.temperature,
            max_output_tokens=config.max_output_tokens,
        )
        self._scorer = SimilarityScorer(config.similarity_threshold, config.similarity_top_k)

    def extract_text(self, document: RawDocument) -> ExtractedText:
        """Run the format extractor for the document (blocking)."""
        extractor = ExtractorFactory.for_config(document.format, self.config)
        return extractor.extract(document.content)

    def prepare_chunks(self, text: str, log: Any = None) -> list[TextChunk]:
        """Normalize, filter and chunk extracted text."""
        log = log or logger
        log.info("Pipeline stage", stage=PipelineStage.NORMALIZING.value, chars=len(text))
        normalized = self._normalizer.normalize(text)

        log.info("Pipeline stage", stage=PipelineStage.FILTERING.value, chars=len(normalized))
        filtered = self._relevance_filter.filter(normalized)

        log.info(
            "Pipeline stage",
            stage=PipelineStage.CHUNKING.value,
            chars=len(filtered),
            token_budget=self.config.token_budget,
        )
        return self._chunker.chunk(filtered)

    async def run(self, document: RawDocument) -> ExtractionResponse:
        """
        Extract products from one document.

        Args:
            document: Uploaded document

        Returns:
            ExtractionResponse with products and summary
        """
        log = logger.bind(file_name=document.filename, size=document.size)
        start = time.perf_counter()
        log.info("Pipeline stage", stage=PipelineStage.RECEIVED.value, format=document.format.value)

        log.info("Pipeline stage", stage=PipelineStage.EXTRACTING_TEXT.value)
        extracted = await asyncio.to_thread(self.extract_text, document)
        text = extracted.text
        chunks = self.prepare_chunks(text, log)

        log.info("Pipeline stage", stage=PipelineStage.EXTRACTING.value, chunks=len(chunks))
        result = await self._orchestrator.extract_products(chunks, document.filename)

        log.info(
            "Pipeline stage",
            stage=PipelineStage.DEDUPLICATING.value,
            duplicates_removed=result.dedup_stats.duplicates_removed,
        )
        products = result.products

        log.info("Pipeline stage", stage=PipelineStage.SCORING.value, products=len(products))
        await self._score_similarity(products)

        response = ExtractionResponse(
            products=products,
            summary=ExtractionSummary.from_products(products, result.processing_notes),
            extracted_text_length=len(text),
        )
        log.info(
            "Pipeline stage",
            stage=PipelineStage.COMPLETE.value,
            products=len(products),
            chunks_failed=result.chunks_failed,
            duration_seconds=round(time.perf_counter() - start, 2),
        )
        return response

    async def _score_similarity(self, products: list[ProductCandidate]) -> None:
        if self._catalog is None:
            return
        for product in products:
            existing = await self._catalog.candidates_for(product)
            product.similar_products = self._scorer.analyze_similarity(product, existing)


def build_pipeline(
    settings: Settings,
    provider: CompletionProvider | None = None,
    catalog: ProductCatalog | None = None,
    provider_config: ProviderConfig | None = None,
) -> ProductExtractionPipeline:
    """
    Assemble a pipeline from application settings.

    When no provider is given one is resolved from settings.

    Raises:
        ConfigurationError: If no provider is given and none is configured
    """
    if provider is None:
        provider_config = provider_config or resolve_provider_config(settings)
        provider = create_provider(provider_config)
    config = PipelineConfig.from_settings(settings, provider_config)
    return ProductExtractionPipeline(config, provider, catalog)
