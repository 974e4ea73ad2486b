"""
Custom Exceptions for PDF text extraction.

Exception Hierarchy:
    ExtractionError (base)
    ├── PDFCorruptedError
    └── ExtractorUnavailableError

Usage:
    from pdf_extractor.exceptions import ExtractionError

    try:
        text = extractor.extract(pdf_bytes)
    except ExtractionError as e:
        print(f"Extraction failed: {e}")
"""

from __future__ import annotations

from typing import Optional


class ExtractionError(Exception):
    """
    Base exception for all extraction-related errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "An extraction error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


class PDFCorruptedError(ExtractionError):
    """
    Raised when the PDF cannot be opened by the extraction backend.

    Attributes:
        original_error: The underlying error from the PDF library
    """

    def __init__(self, original_error: Optional[Exception] = None):
        self.original_error = original_error
        details = str(original_error) if original_error else None
        super().__init__("PDF file is corrupted or unreadable", details)


class ExtractorUnavailableError(ExtractionError):
    """Raised when no extraction backend can produce text for the document."""

    def __init__(self, details: Optional[str] = None):
        super().__init__("No PDF text extraction backend available", details)
