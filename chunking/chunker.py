"""
Text Chunker - paragraph-aligned chunking with character overlap

Splits normalized document text into bounded chunks that each fit one model
request.

Algorithm:
1. Split the text on blank lines into paragraphs, dropping empty ones.
2. Accumulate paragraphs into a buffer (joined by a blank line) while the
   buffer stays within max_chars.
3. Flush the buffer when the next paragraph would overflow it.
4. Paragraphs longer than max_chars flush the buffer, then are hard-split
   into max_chars slices.
5. Every chunk after the first is prefixed with the tail of the previous
   chunk's own content (overlap_chars characters).

Usage:
    from chunking import TextChunker

    chunker = TextChunker(max_chars=6000, overlap_chars=300)
    chunks = chunker.chunk(text)
"""

import re
from typing import Optional

from .models import ChunkingConfig

PARAGRAPH_BREAK = re.compile(r"\n{2,}")
EXCESS_NEWLINES = re.compile(r"\n{3,}")
SEPARATOR = "\n\n"


def normalize_text(text: str) -> str:
    """Unify line endings and collapse runs of blank lines."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = EXCESS_NEWLINES.sub(SEPARATOR, text)
    return text.strip()


class TextChunker:
    """
    Splits text into paragraph-aligned chunks of at most max_chars characters,
    each carrying a short overlap from its predecessor for context continuity.
    """

    def __init__(
        self,
        max_chars: Optional[int] = None,
        overlap_chars: Optional[int] = None,
        config: Optional[ChunkingConfig] = None,
    ):
        if config is None:
            values = {}
            if max_chars is not None:
                values["max_chars"] = max_chars
            if overlap_chars is not None:
                values["overlap_chars"] = overlap_chars
            config = ChunkingConfig(**values)
        self.config = config

    @property
    def max_chars(self) -> int:
        return self.config.max_chars

    @property
    def overlap_chars(self) -> int:
        return self.config.overlap_chars

    def chunk(self, text: str) -> list[str]:
        """
        Chunk text into overlapping pieces.

        Args:
            text: Document text, ideally passed through normalize_text first.

        Returns:
            Ordered list of chunk strings. Empty or whitespace-only input
            yields an empty list.
        """
        paragraphs = PARAGRAPH_BREAK.split((text or "").strip())
        chunks: list[str] = []
        # Pre-overlap content of the last emitted chunk
        previous = ""
        current = ""

        for paragraph in paragraphs:
            paragraph = paragraph.strip()
            if not paragraph:
                continue

            if len(paragraph) > self.max_chars:
                if current:
                    chunks.append(self._apply_overlap(current, previous))
                    previous = current
                    current = ""

                for start in range(0, len(paragraph), self.max_chars):
                    piece = paragraph[start : start + self.max_chars]
                    chunks.append(self._apply_overlap(piece, previous))
                    previous = piece
                continue

            candidate = paragraph if not current else current + SEPARATOR + paragraph

            if len(candidate) > self.max_chars and current:
                chunks.append(self._apply_overlap(current, previous))
                previous = current
                current = paragraph
                continue

            current = candidate

        if current:
            chunks.append(self._apply_overlap(current, previous))

        return chunks

    def _apply_overlap(self, chunk: str, previous: str) -> str:
        if self.overlap_chars <= 0 or not previous:
            return chunk

        overlap = previous[-self.overlap_chars:]
        return (overlap + SEPARATOR + chunk).strip()
