"""
PDF Extractor - text layer extraction for uploaded PMS API documents

Quick Start:
    from pdf_extractor import PdfTextExtractor

    extractor = PdfTextExtractor()
    text = extractor.extract(pdf_bytes)
"""

__version__ = "2.0.0"

from .exceptions import (
    ExtractionError,
    ExtractorUnavailableError,
    PDFCorruptedError,
)
from .text_extractor import PdfTextExtractor, pdftotext_available

__all__ = [
    "__version__",
    "PdfTextExtractor",
    "pdftotext_available",
    "ExtractionError",
    "ExtractorUnavailableError",
    "PDFCorruptedError",
]
