"""Reporting: printable renditions of analysis results."""

__version__ = "1.0.0"

from .pdf_report import AnalysisPdfGenerator

__all__ = ["__version__", "AnalysisPdfGenerator"]
