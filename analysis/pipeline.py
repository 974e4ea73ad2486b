"""
Analysis Pipeline - drives one analysis attempt end to end

Steps:
1. Mark the attempt (and its document) as processing.
2. Load the cached text artifact, or extract, normalize and cache it.
3. Scan the text for credential evidence.
4. Chunk the text.
5. Send each chunk to the model, normalize the reply, persist partial
   chunk_results and progress after every chunk.
6. Aggregate the chunk results and mark the attempt completed.

Any failure marks the attempt failed with the error message and is re-raised
to the caller. There is no retry here; a retry is a fresh attempt.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from chunking import ChunkingConfig, TextChunker, normalize_text
from credentials import CredentialScanner, summarize
from generation.exceptions import format_error_chain, is_retryable

from .aggregator import ResultAggregator
from .models import AnalysisRecord, AnalysisStatus, DocumentRecord, DocumentStatus, utcnow
from .normalizer import ChunkNormalizer
from .prompts import PromptManager
from .schema import CapabilityReport
from .storage import AnalysisStore

logger = logging.getLogger(__name__)


class PdfExtractor(Protocol):
    def extract(self, document: bytes) -> str: ...


class ChunkAnalyzer(Protocol):
    def analyze_chunk(self, prompt: str, chunk: str, model: str) -> dict[str, Any]: ...


def progress_percent(completed: int, total: int) -> int:
    """Completed share as an integer percentage, rounded half up, capped at 100."""
    if total <= 0:
        return 0
    return int(min(100, math.floor(completed / total * 100 + 0.5)))


@dataclass
class ChunkAccumulator:
    """Normalized chunk results collected so far in one attempt."""

    total: int
    results: list[CapabilityReport] = field(default_factory=list)

    def add(self, result: CapabilityReport) -> None:
        self.results.append(result)

    @property
    def completed(self) -> int:
        return len(self.results)

    @property
    def progress(self) -> int:
        return progress_percent(self.completed, self.total)


class AnalysisPipeline:
    """
    Orchestrates extraction, chunking, model calls and aggregation.

    Usage:
        pipeline = AnalysisPipeline(extractor, prompts, client, store)
        pipeline.run(document, analysis)
    """

    def __init__(
        self,
        extractor: PdfExtractor,
        prompts: PromptManager,
        client: ChunkAnalyzer,
        store: AnalysisStore,
        chunking: Optional[ChunkingConfig] = None,
        scanner: Optional[CredentialScanner] = None,
        normalizer: Optional[ChunkNormalizer] = None,
        aggregator: Optional[ResultAggregator] = None,
    ):
        self.extractor = extractor
        self.prompts = prompts
        self.client = client
        self.store = store
        self.chunker = TextChunker(config=chunking or ChunkingConfig())
        self.scanner = scanner or CredentialScanner()
        self.normalizer = normalizer or ChunkNormalizer()
        self.aggregator = aggregator or ResultAggregator()

    def run(self, document: DocumentRecord, analysis: AnalysisRecord) -> AnalysisRecord:
        """
        Run one analysis attempt.

        Returns:
            The completed AnalysisRecord.

        Raises:
            Whatever failed (extraction, prompt lookup, model call); the
            attempt is persisted as failed first.
        """
        analysis.status = AnalysisStatus.PROCESSING
        analysis.started_at = utcnow()
        analysis.progress = 0
        self.store.save_analysis(analysis)
        document.status = DocumentStatus.PROCESSING
        document.last_error = None
        self.store.save_document(document)
        logger.info(f"Analysis {analysis.id} started for document {document.id}")

        try:
            text = self.document_text(document)

            analysis.credentials = self.scanner.scan(text)
            if analysis.credentials:
                logger.info(
                    f"Analysis {analysis.id}: {len(analysis.credentials)} credential hint(s), "
                    f"types {summarize(analysis.credentials)}"
                )

            chunks = self.chunker.chunk(text)
            analysis.chunk_count = len(chunks)
            analysis.progress = 0
            self.store.save_analysis(analysis)
            logger.info(f"Analysis {analysis.id}: {len(chunks)} chunk(s)")

            if not chunks:
                return self._complete(document, analysis, self.aggregator.aggregate([]))

            prompt = self.prompts.get_prompt(analysis.prompt_version)
            accumulator = ChunkAccumulator(total=len(chunks))

            for chunk in chunks:
                raw = self.client.analyze_chunk(prompt, chunk, analysis.model)
                accumulator.add(self.normalizer.normalize(raw))

                analysis.chunk_results = list(accumulator.results)
                analysis.progress = accumulator.progress
                self.store.save_analysis(analysis)
                logger.debug(
                    f"Analysis {analysis.id}: chunk {accumulator.completed}/{accumulator.total} "
                    f"done ({analysis.progress}%)"
                )

            final = self.aggregator.aggregate(accumulator.results)
            return self._complete(document, analysis, final)

        except Exception as exc:
            message = str(exc) or type(exc).__name__
            analysis.status = AnalysisStatus.FAILED
            analysis.error_message = message
            analysis.completed_at = utcnow()
            self.store.save_analysis(analysis)
            document.status = DocumentStatus.FAILED
            document.last_error = message
            self.store.save_document(document)
            logger.error(f"Analysis {analysis.id} failed:\n{format_error_chain(exc)}")
            if is_retryable(exc):
                logger.warning(f"Analysis {analysis.id} hit a transient model error; it can be rerun")
            raise

    def document_text(self, document: DocumentRecord) -> str:
        """Cached text artifact, or extract, normalize and cache it."""
        if document.extracted_text_path:
            cached = self.store.read_text(document.extracted_text_path)
            if cached is not None:
                return cached

        data = self.store.read_upload(document.storage_path)
        text = normalize_text(self.extractor.extract(data))

        document.extracted_text_path = self.store.write_text(document.id, text)
        document.text_extracted_at = utcnow()
        self.store.save_document(document)
        logger.info(f"Extracted {len(text)} characters from {document.original_name}")
        return text

    def _complete(
        self,
        document: DocumentRecord,
        analysis: AnalysisRecord,
        result: CapabilityReport,
    ) -> AnalysisRecord:
        analysis.status = AnalysisStatus.COMPLETED
        analysis.result = result
        analysis.completed_at = utcnow()
        analysis.progress = 100
        self.store.save_analysis(analysis)
        document.status = DocumentStatus.COMPLETED
        self.store.save_document(document)
        logger.info(f"Analysis {analysis.id} completed")
        return analysis
