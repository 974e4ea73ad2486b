"""
Custom Exceptions for language model calls.

Exception Hierarchy:
    ConfigurationError
    ModelCallError (base)
    ├── ModelConnectionError
    ├── ModelRateLimitError
    └── ModelResponseError

Usage:
    from generation.exceptions import ModelCallError

    try:
        payload = client.analyze_chunk(prompt, chunk, model)
    except ModelCallError as e:
        print(format_error_chain(e))
"""

from __future__ import annotations

from typing import Optional


class ConfigurationError(Exception):
    """Raised when a required credential or endpoint is not configured."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"{setting} is not configured.")


class ModelCallError(Exception):
    """
    Base exception for failures talking to the language model.

    Attributes:
        message: Human-readable error description
        original_error: The underlying SDK exception (optional)
        status_code: HTTP status code if available
    """

    def __init__(
        self,
        message: str = "Model request failed",
        original_error: Optional[Exception] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.original_error = original_error
        self.status_code = status_code

        full_message = message
        if status_code:
            full_message = f"{full_message} (HTTP {status_code})"
        if original_error:
            full_message = f"{full_message}: {original_error}"

        super().__init__(full_message)


class ModelConnectionError(ModelCallError):
    """Raised when the model API cannot be reached (network, DNS, timeout)."""

    def __init__(self, original_error: Optional[Exception] = None):
        super().__init__("Cannot connect to the model API", original_error)


class ModelRateLimitError(ModelCallError):
    """Raised when the model API keeps rejecting requests with HTTP 429."""

    def __init__(self, original_error: Optional[Exception] = None):
        super().__init__("Model API rate limit exceeded", original_error, status_code=429)


class ModelResponseError(ModelCallError):
    """
    Raised when the model response is empty or not parsable JSON.

    Attributes:
        response_content: Raw response text, truncated
    """

    def __init__(self, message: str = "Invalid model response", response_content: Optional[str] = None):
        self.response_content = response_content[:500] if response_content else None
        super().__init__(message)


def is_retryable(error: Exception) -> bool:
    """
    Check if an error is potentially recoverable by a fresh attempt.

    Returns True for connection problems, rate limits and 5xx responses.
    """
    if isinstance(error, (ModelConnectionError, ModelRateLimitError)):
        return True
    if isinstance(error, ModelCallError) and error.status_code in (500, 502, 503, 504):
        return True
    return False


def format_error_chain(error: Exception) -> str:
    """
    Format an exception and its chain for logging.

    Returns a multi-line string showing the error hierarchy.
    """
    lines = []
    current: Optional[BaseException] = error
    depth = 0

    while current is not None:
        prefix = "  " * depth + ("└─ " if depth > 0 else "")
        lines.append(f"{prefix}{type(current).__name__}: {current}")

        if getattr(current, "original_error", None):
            current = current.original_error
            depth += 1
        elif current.__cause__:
            current = current.__cause__
            depth += 1
        else:
            break

    return "\n".join(lines)
