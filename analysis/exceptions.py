"""Custom exceptions for the analysis pipeline."""

from __future__ import annotations


class AnalysisError(Exception):
    """Base exception for analysis errors."""

    pass


class UnknownPromptVersion(AnalysisError):
    """Raised when a request or configuration references an undefined prompt."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Unknown prompt version: {version}")


class DocumentNotFoundError(AnalysisError):
    """Raised when a document id does not exist in the store."""

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__(f"Document not found: {document_id}")


class AnalysisNotFoundError(AnalysisError):
    """Raised when an analysis id does not exist in the store."""

    def __init__(self, analysis_id: str):
        self.analysis_id = analysis_id
        super().__init__(f"Analysis not found: {analysis_id}")


class EmptyResultError(AnalysisError):
    """Raised when an operation needs a completed result the analysis lacks."""

    def __init__(self, analysis_id: str):
        self.analysis_id = analysis_id
        super().__init__("Analysis result is empty.")
