"""
OpenAI client for chunk analysis and text drafting.

This module provides the language model collaborator of the analyzer:
- analyze_chunk: send one documentation chunk with the extraction prompt,
  return the parsed JSON object
- generate_text: free-form completion (ticket descriptions)

Transport failures are retried with exponential backoff; anything that
still fails surfaces as a ModelCallError subclass.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

from openai import (
    APIConnectionError as OpenAIConnectionError,
    APIError as OpenAIAPIError,
    OpenAI,
    RateLimitError,
)

from .config import OpenAIConfig
from .exceptions import (
    ConfigurationError,
    ModelCallError,
    ModelConnectionError,
    ModelRateLimitError,
    ModelResponseError,
)
from .json_utils import parse_json_object
from .prompts import CHUNK_USER_TEMPLATE

logger = logging.getLogger(__name__)


@dataclass
class TokenUsage:
    """Cumulative token usage across calls made by one client."""

    input_tokens: int = 0
    output_tokens: int = 0
    request_count: int = 0

    def add(self, usage: Any) -> None:
        self.request_count += 1
        if usage is None:
            return
        self.input_tokens += getattr(usage, "prompt_tokens", 0) or 0
        self.output_tokens += getattr(usage, "completion_tokens", 0) or 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LanguageModelClient:
    """
    OpenAI chat completions client used by the analysis pipeline.

    Usage:
        client = LanguageModelClient(OpenAIConfig.from_env())
        payload = client.analyze_chunk(prompt, chunk, "gpt-4o-mini")
    """

    def __init__(
        self,
        config: Optional[OpenAIConfig] = None,
        client: Optional[OpenAI] = None,
    ):
        """
        Args:
            config: Connection and sampling settings (defaults from env).
            client: Pre-built OpenAI client, mainly for tests.
        """
        self.config = config or OpenAIConfig.from_env()
        self._client = client
        self.usage = TokenUsage()

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.config.api_key:
                raise ConfigurationError("OPENAI_API_KEY")
            self._client = OpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                max_retries=0,
            )
        return self._client

    def analyze_chunk(self, prompt: str, chunk: str, model: str) -> dict[str, Any]:
        """
        Run the extraction prompt over one documentation chunk.

        Returns:
            The decoded JSON object (schema not trusted).

        Raises:
            ConfigurationError: No API key configured.
            ModelCallError: Transport, auth or parse failure.
        """
        messages = [
            {"role": "system", "content": prompt},
            {"role": "user", "content": CHUNK_USER_TEMPLATE.format(chunk=chunk)},
        ]
        content = self._complete(messages, model, json_mode=True)

        parsed = parse_json_object(content)
        if parsed is None:
            raise ModelResponseError("Unable to parse JSON response.", content)
        return parsed

    def generate_text(self, prompt: str, content: str, model: str) -> str:
        """Free-form completion; returns the trimmed response text."""
        messages = [
            {"role": "system", "content": prompt},
            {"role": "user", "content": content},
        ]
        return self._complete(messages, model, json_mode=False).strip()

    def _complete(self, messages: list[dict], model: str, json_mode: bool) -> str:
        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": self.config.temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = self._call_with_retry(kwargs)
        self.usage.add(getattr(response, "usage", None))

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as exc:
            raise ModelResponseError("OpenAI response missing content.") from exc
        if not isinstance(content, str) or not content.strip():
            raise ModelResponseError("OpenAI response missing content.")
        return content

    def _call_with_retry(self, kwargs: dict[str, Any]) -> Any:
        """
        Make API call with retry logic.

        Uses exponential backoff for rate limits, connection errors and 5xx.
        """
        client = self.client
        last_error: Optional[Exception] = None
        delay = self.config.retry_delay
        attempts = max(1, self.config.max_retries)

        for attempt in range(attempts):
            try:
                logger.debug(f"Model call attempt {attempt + 1}/{attempts}")
                return client.chat.completions.create(**kwargs)

            except RateLimitError as e:
                logger.warning(f"Rate limit hit, waiting {delay}s...")
                last_error = e

            except OpenAIConnectionError as e:
                logger.warning(f"Connection error, retrying in {delay}s...")
                last_error = e

            except OpenAIAPIError as e:
                status_code = getattr(e, "status_code", None)
                if status_code is not None and status_code >= 500:
                    logger.warning(f"Server error ({status_code}), retrying...")
                    last_error = e
                else:
                    raise ModelCallError("OpenAI request failed", e, status_code) from e

            if attempt < attempts - 1:
                time.sleep(delay)
                delay *= 2

        if isinstance(last_error, RateLimitError):
            raise ModelRateLimitError(last_error) from last_error
        if isinstance(last_error, OpenAIConnectionError):
            raise ModelConnectionError(last_error) from last_error
        raise ModelCallError(
            "Max retries exceeded",
            last_error,
            getattr(last_error, "status_code", None),
        ) from last_error
