"""
Analysis Module - PMS capability analysis of API documentation

Turns extracted documentation text into one capability report: chunk the
text, ask the model about each chunk, normalize every reply into the fixed
schema and merge the chunk results.

Quick Start:
    from analysis import AnalysisService

    service = AnalysisService()
    analysis = service.analyze_file("docs/pms-api.pdf")
    print(analysis.result.to_dict())
"""

__version__ = "1.0.0"

from .aggregator import ResultAggregator, aggregate, merge
from .config import AnalyzerConfig
from .exceptions import (
    AnalysisError,
    AnalysisNotFoundError,
    DocumentNotFoundError,
    EmptyResultError,
    UnknownPromptVersion,
)
from .models import AnalysisRecord, AnalysisStatus, DocumentRecord, DocumentStatus
from .normalizer import ChunkNormalizer, normalize_chunk
from .pipeline import AnalysisPipeline, progress_percent
from .prompts import PromptManager
from .schema import (
    FIELD_KEYS,
    FILTER_KEYS,
    AggregatedResult,
    CapabilityReport,
    FieldInfo,
    FilterInfo,
    NormalizedChunkResult,
)
from .service import AnalysisService
from .storage import AnalysisStore

__all__ = [
    "__version__",
    # Schema
    "CapabilityReport",
    "NormalizedChunkResult",
    "AggregatedResult",
    "FieldInfo",
    "FilterInfo",
    "FIELD_KEYS",
    "FILTER_KEYS",
    # Components
    "ChunkNormalizer",
    "normalize_chunk",
    "ResultAggregator",
    "aggregate",
    "merge",
    "AnalysisPipeline",
    "progress_percent",
    "PromptManager",
    "AnalysisStore",
    "AnalysisService",
    "AnalyzerConfig",
    # Records
    "DocumentRecord",
    "DocumentStatus",
    "AnalysisRecord",
    "AnalysisStatus",
    # Exceptions
    "AnalysisError",
    "UnknownPromptVersion",
    "DocumentNotFoundError",
    "AnalysisNotFoundError",
    "EmptyResultError",
]
