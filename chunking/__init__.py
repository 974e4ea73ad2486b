"""
Chunking Module - Paragraph-aligned text chunking with overlap

Splits extracted PMS documentation text into bounded chunks, each sized for
one language model request.

Quick Start:
    from chunking import TextChunker, normalize_text

    chunker = TextChunker(max_chars=6000, overlap_chars=300)
    chunks = chunker.chunk(normalize_text(raw_text))
"""

__version__ = "1.0.0"

from .chunker import TextChunker, normalize_text
from .models import ChunkingConfig

__all__ = [
    "__version__",
    "TextChunker",
    "ChunkingConfig",
    "normalize_text",
]
