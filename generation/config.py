from dataclasses import dataclass
import os
from typing import Optional


def normalize_base_url(base_url: str) -> str:
    base_url = base_url.rstrip("/")
    if not base_url.endswith("/v1"):
        base_url += "/v1"
    return base_url


@dataclass
class OpenAIConfig:
    api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    base_url: str = "https://api.openai.com/v1"
    timeout: float = 60.0
    temperature: float = 0.2
    max_retries: int = 3
    retry_delay: float = 1.0

    @classmethod
    def from_env(cls) -> "OpenAIConfig":
        def _float(name: str, default: float) -> float:
            value = os.environ.get(name)
            return float(value) if value else default

        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        return cls(
            api_key=os.environ.get("OPENAI_API_KEY") or None,
            model=os.environ.get("OPENAI_MODEL", cls.model),
            base_url=normalize_base_url(os.environ.get("OPENAI_BASE_URI", cls.base_url)),
            timeout=_float("OPENAI_TIMEOUT", cls.timeout),
            temperature=_float("OPENAI_TEMPERATURE", cls.temperature),
            max_retries=_int("OPENAI_MAX_RETRIES", cls.max_retries),
            retry_delay=_float("OPENAI_RETRY_DELAY", cls.retry_delay),
        )
