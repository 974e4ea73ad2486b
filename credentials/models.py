"""
Data models for credential scanning results.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CredentialType(str, Enum):
    """Kinds of secrets the scanner recognizes."""
    USERNAME = "username"
    PASSWORD = "password"
    API_KEY = "api_key"
    CLIENT_ID = "client_id"
    CLIENT_SECRET = "client_secret"
    TOKEN = "token"
    AUTHORIZATION = "authorization"


class CredentialMatch(BaseModel):
    """
    One probable secret found in document text.

    The raw value is kept in memory for the caller of the scan only; it is
    excluded from every dump so it never reaches persisted records.
    """
    model_config = ConfigDict(frozen=True)

    type: CredentialType
    label: str
    value: str = Field(..., description="Masked value")
    raw_value: str = Field("", exclude=True, repr=False)
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    is_placeholder: bool = False
    source_line: str = Field("", max_length=160)
