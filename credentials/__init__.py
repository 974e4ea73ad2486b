"""
Credentials Module - detection of secrets in API documentation text

Quick Start:
    from credentials import CredentialScanner

    matches = CredentialScanner().scan(text)
"""

__version__ = "1.0.0"

from .models import CredentialMatch, CredentialType
from .scanner import (
    CredentialPattern,
    CredentialScanner,
    is_placeholder,
    mask_value,
    summarize,
)

__all__ = [
    "__version__",
    "CredentialScanner",
    "CredentialPattern",
    "CredentialMatch",
    "CredentialType",
    "is_placeholder",
    "mask_value",
    "summarize",
]
