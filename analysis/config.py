from dataclasses import dataclass, field
import os

from chunking.models import ChunkingConfig
from generation.config import OpenAIConfig
from ticketing.config import YouTrackConfig

from .prompts import PROMPTS


@dataclass
class AnalyzerConfig:
    data_dir: str = "data/pms_analyzer"
    max_upload_mb: int = 20
    chunk_max_chars: int = 6000
    chunk_overlap_chars: int = 300
    default_prompt_version: str = "v1"
    prompts: dict[str, str] = field(default_factory=lambda: dict(PROMPTS))
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    youtrack: YouTrackConfig = field(default_factory=YouTrackConfig)

    @property
    def chunking(self) -> ChunkingConfig:
        return ChunkingConfig(
            max_chars=self.chunk_max_chars,
            overlap_chars=self.chunk_overlap_chars,
        )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @classmethod
    def from_env(cls) -> "AnalyzerConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        return cls(
            data_dir=os.environ.get("PMS_DATA_DIR", cls.data_dir),
            max_upload_mb=_int("PMS_MAX_UPLOAD_MB", cls.max_upload_mb),
            chunk_max_chars=_int("PMS_CHUNK_MAX_CHARS", cls.chunk_max_chars),
            chunk_overlap_chars=_int("PMS_CHUNK_OVERLAP_CHARS", cls.chunk_overlap_chars),
            default_prompt_version=os.environ.get(
                "PMS_PROMPT_VERSION", cls.default_prompt_version
            ),
            openai=OpenAIConfig.from_env(),
            youtrack=YouTrackConfig.from_env(),
        )
