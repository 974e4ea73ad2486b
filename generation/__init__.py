"""
Generation component: language model calls for the PMS analyzer.

Sends documentation chunks to an OpenAI model for structured extraction and
drafts ticket descriptions from finished analyses.
"""

__version__ = "1.0.0"

from .config import OpenAIConfig
from .exceptions import (
    ConfigurationError,
    ModelCallError,
    ModelConnectionError,
    ModelRateLimitError,
    ModelResponseError,
    format_error_chain,
    is_retryable,
)
from .openai_client import LanguageModelClient
from .ticket import TicketDescriptionGenerator

__all__ = [
    "__version__",
    "OpenAIConfig",
    "LanguageModelClient",
    "TicketDescriptionGenerator",
    "ConfigurationError",
    "ModelCallError",
    "ModelConnectionError",
    "ModelRateLimitError",
    "ModelResponseError",
    "format_error_chain",
    "is_retryable",
]
