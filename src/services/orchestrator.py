"""
Extraction Orchestrator
=======================

Sends chunks to the LLM provider one at a time, parses each completion
and merges the results.

Chunk calls are strictly sequential, in priority order. A failing chunk
(provider error, unparseable or invalid response) is recorded as a
processing note and skipped; it never aborts the remaining chunks.
Notes name the chunk by its document position and by the order it was
sent in, e.g. "Chunk 3 (request 1 of 4)".
Each run owns its candidate list and notes, so orchestrator instances
hold no per-run state.
"""

import time
from dataclasses import dataclass, field

from src.ingest.prioritizer import ChunkPrioritizer
from src.schemas.document import TextChunk
from src.schemas.product import ProductCandidate
from src.services.deduplication_service import DeduplicationService, DeduplicationStats
from src.services.prompts import build_chunk_prompt, build_extraction_prompt
from src.services.providers import CompletionProvider
from src.services.response_parser import ResponseParser
from src.utils.errors import CHUNK_RECOVERABLE_ERRORS
from src.utils.logger import get_logger

logger = get_logger(__name__)

# Chunks slower than this are logged as warnings
CHUNK_PROCESSING_WARN_THRESHOLD = 30.0


@dataclass
class OrchestrationResult:
    """Merged outcome of all chunk extractions for one document."""

    products: list[ProductCandidate] = field(default_factory=list)
    processing_notes: str = ""
    chunks_total: int = 0
    chunks_failed: int = 0
    dedup_stats: DeduplicationStats = field(default_factory=DeduplicationStats)


class ExtractionOrchestrator:
    """
    Drive LLM extraction over a document's chunks.

    Example:
        orchestrator = ExtractionOrchestrator(provider, prioritizer=prioritizer)
        result = await orchestrator.extract_products(chunks, "catalog.pdf")
    """

    def __init__(
        self,
        provider: CompletionProvider,
        parser: ResponseParser | None = None,
        deduplicator: DeduplicationService | None = None,
        prioritizer: ChunkPrioritizer | None = None,
        temperature: float = 0.1,
        max_output_tokens: int = 4000,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            provider: LLM completion provider
            parser: Response parser (default ResponseParser())
            deduplicator: Cross-chunk deduplicator (default DeduplicationService())
            prioritizer: Orders multiple chunks before submission (None = keep order)
            temperature: Sampling temperature for every call
            max_output_tokens: Completion length limit for every call
        """
        self._provider = provider
        self._parser = parser or ResponseParser()
        self._deduplicator = deduplicator or DeduplicationService()
        self._prioritizer = prioritizer
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        return await self._provider.complete(
            system_prompt,
            user_prompt,
            self._temperature,
            self._max_output_tokens,
        )

    async def extract_products(
        self,
        chunks: list[TextChunk],
        file_name: str,
    ) -> OrchestrationResult:
        """
        Extract and deduplicate products from all chunks.

        Args:
            chunks: Chunks in document order
            file_name: Original file name, used in prompts and logs

        Returns:
            OrchestrationResult with unique products and processing notes
        """
        if not chunks:
            return OrchestrationResult(processing_notes="No text to process.")

        if len(chunks) == 1:
            products, notes, failed = await self._extract_single(chunks[0], file_name)
        else:
            products, notes, failed = await self._extract_chunked(chunks, file_name)

        unique, stats = self._deduplicator.deduplicate(products)

        if failed == len(chunks):
            logger.warning(
                "Every chunk failed",
                file_name=file_name,
                chunks=len(chunks),
            )

        return OrchestrationResult(
            products=unique,
            processing_notes=notes,
            chunks_total=len(chunks),
            chunks_failed=failed,
            dedup_stats=stats,
        )

    async def _extract_single(
        self,
        chunk: TextChunk,
        file_name: str,
    ) -> tuple[list[ProductCandidate], str, int]:
        system_prompt, user_prompt = build_extraction_prompt(chunk.text, file_name)
        start = time.perf_counter()
        try:
            completion = await self._complete(system_prompt, user_prompt)
            parsed = self._parser.parse(completion)
        except CHUNK_RECOVERABLE_ERRORS as e:
            logger.error(
                "Document extraction failed",
                file_name=file_name,
                error_type=type(e).__name__,
                error=e.message,
            )
            return [], f"Processing failed - {e.message}", 1

        logger.info(
            "Document extracted",
            file_name=file_name,
            products=len(parsed.products),
            duration_seconds=round(time.perf_counter() - start, 2),
        )
        return parsed.products, parsed.summary.processing_notes, 0

    async def _extract_chunked(
        self,
        chunks: list[TextChunk],
        file_name: str,
    ) -> tuple[list[ProductCandidate], str, int]:
        ordered = self._prioritizer.prioritize(chunks) if self._prioritizer else list(chunks)
        total = len(ordered)
        all_products: list[ProductCandidate] = []
        notes: list[str] = []
        failed = 0

        logger.info(
            "Starting chunked extraction",
            file_name=file_name,
            chunks=total,
        )

        for position, chunk in enumerate(ordered, start=1):
            label = f"Chunk {chunk.index + 1} (request {position} of {total})"
            system_prompt, user_prompt = build_chunk_prompt(chunk.text, file_name, position, total)
            start = time.perf_counter()

            try:
                completion = await self._complete(system_prompt, user_prompt)
                parsed = self._parser.parse(completion)
            except CHUNK_RECOVERABLE_ERRORS as e:
                failed += 1
                notes.append(f"{label}: Processing failed - {e.message}")
                logger.error(
                    "Chunk extraction failed",
                    chunk_index=chunk.index,
                    position=position,
                    error_type=type(e).__name__,
                    error=e.message,
                )
                continue

            elapsed = time.perf_counter() - start
            all_products.extend(parsed.products)
            if parsed.summary.processing_notes:
                notes.append(f"{label}: {parsed.summary.processing_notes}")

            log = logger.warning if elapsed > CHUNK_PROCESSING_WARN_THRESHOLD else logger.debug
            log(
                "Chunk extracted",
                chunk_index=chunk.index,
                position=position,
                tokens=chunk.estimated_tokens,
                relevance=chunk.relevance,
                products=len(parsed.products),
                duration_seconds=round(elapsed, 2),
            )

        summary = f"Processed {total} chunks. " + "; ".join(notes)
        return all_products, summary.strip(), failed
