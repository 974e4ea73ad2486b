"""
Data Models for documents, analysis attempts and the HTTP surface.

A document accumulates one AnalysisRecord per attempt. Each attempt moves
through queued -> processing -> completed | failed and is not touched again
once it reaches a terminal state.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from credentials.models import CredentialMatch

from .schema import CapabilityReport


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


# =============================================================================
# ENUMS
# =============================================================================


class DocumentStatus(str, Enum):
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class AnalysisStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


# =============================================================================
# PERSISTED RECORDS
# =============================================================================


class DocumentRecord(BaseModel):
    """An uploaded PDF and its cached text artifact."""
    id: str = Field(default_factory=new_id)
    original_name: str
    storage_path: str = Field(..., description="Upload location relative to the data dir")
    extracted_text_path: Optional[str] = Field(
        None,
        description="Cached plain-text artifact, written once on first extraction",
    )
    status: DocumentStatus = DocumentStatus.UPLOADED
    text_extracted_at: Optional[datetime] = None
    last_error: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class AnalysisRecord(BaseModel):
    """One analysis attempt over a document."""
    id: str = Field(default_factory=new_id)
    document_id: str
    prompt_version: str
    prompt_hash: str
    model: str
    status: AnalysisStatus = AnalysisStatus.QUEUED
    progress: int = Field(0, ge=0, le=100)
    chunk_count: int = Field(0, ge=0)
    chunk_results: list[CapabilityReport] = Field(default_factory=list)
    result: Optional[CapabilityReport] = None
    credentials: list[CredentialMatch] = Field(
        default_factory=list,
        description="Masked credential evidence found in the document text",
    )
    error_message: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_finished(self) -> bool:
        return self.status in (AnalysisStatus.COMPLETED, AnalysisStatus.FAILED)

    def public_dict(self) -> dict[str, Any]:
        """Serialized view without per-chunk internals."""
        return self.model_dump(mode="json", exclude={"chunk_results", "prompt_hash"})


# =============================================================================
# HTTP REQUEST / RESPONSE MODELS
# =============================================================================


class AnalyzeRequest(BaseModel):
    prompt_version: Optional[str] = None
    model: Optional[str] = None


class TicketDescriptionRequest(BaseModel):
    summary: Optional[str] = None


class TicketDescriptionResponse(BaseModel):
    description: str


class TicketRequest(BaseModel):
    summary: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    include_result: bool = False


class TicketResponse(BaseModel):
    issue_id: Optional[str] = None
    issue_id_readable: Optional[str] = None
    issue_url: Optional[str] = None


class ScanRequest(BaseModel):
    text: str = ""


class ScanResponse(BaseModel):
    matches: list[CredentialMatch] = Field(default_factory=list)
    credential_types: list[str] = Field(default_factory=list)
