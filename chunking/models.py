"""
Configuration model for the chunking step.

Defaults match the analyzer configuration (6000 characters per chunk with a
300 character overlap), which keeps one chunk comfortably inside a single
model request.
"""

from typing import Any

from pydantic import BaseModel, Field


class ChunkingConfig(BaseModel):
    """
    Configuration for TextChunker.

    Controls the chunk size limit and the overlap carried over from the
    previous chunk.
    """
    max_chars: int = Field(
        6000,
        description="Maximum characters per chunk (before overlap is prepended)",
        ge=1,
    )
    overlap_chars: int = Field(
        300,
        description="Characters copied from the end of the previous chunk",
        ge=0,
    )

    def model_post_init(self, __context: Any) -> None:
        if self.overlap_chars >= self.max_chars:
            raise ValueError(
                f"overlap_chars ({self.overlap_chars}) must be less than "
                f"max_chars ({self.max_chars})"
            )
