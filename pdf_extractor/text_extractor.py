"""
Text-native PDF extraction.

Extracts the selectable text layer of a PDF. The `pdftotext` binary
(poppler) is preferred because its layout mode keeps API tables readable;
when it is not installed the extractor falls back to PyMuPDF.

Whether `pdftotext` exists is probed once per process and memoized.
"""

from __future__ import annotations

import functools
import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

import fitz  # PyMuPDF

from .exceptions import ExtractionError, ExtractorUnavailableError, PDFCorruptedError

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=1)
def pdftotext_available() -> bool:
    """Probe for a working pdftotext binary (memoized for the process)."""
    binary = shutil.which("pdftotext")
    if not binary:
        return False
    try:
        completed = subprocess.run(
            [binary, "-v"],
            capture_output=True,
            timeout=10,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.warning(f"pdftotext probe failed: {exc}")
        return False
    return completed.returncode == 0


class PdfTextExtractor:
    """
    Turns PDF bytes into plain text.

    Usage:
        extractor = PdfTextExtractor()
        text = extractor.extract(Path("api.pdf").read_bytes())
    """

    def __init__(self, use_pdftotext: Optional[bool] = None, timeout: int = 120):
        """
        Args:
            use_pdftotext: Force (True) or disable (False) the pdftotext
                backend. None probes for the binary.
            timeout: Seconds allowed for one pdftotext run.
        """
        self.use_pdftotext = use_pdftotext
        self.timeout = timeout

    @property
    def backend(self) -> str:
        if self.use_pdftotext is None:
            return "pdftotext" if pdftotext_available() else "pymupdf"
        return "pdftotext" if self.use_pdftotext else "pymupdf"

    def extract(self, document: bytes) -> str:
        """
        Extract the text layer of a PDF.

        Args:
            document: Raw PDF bytes.

        Returns:
            The document text (not yet normalized).

        Raises:
            ExtractionError: The document cannot be read or no backend works.
        """
        if not document:
            raise ExtractionError("Document is empty")

        backend = self.backend
        logger.debug(f"Extracting text with {backend}")
        if backend == "pdftotext":
            return self._extract_pdftotext(document)
        return self._extract_pymupdf(document)

    def extract_file(self, pdf_path: str | Path) -> str:
        return self.extract(Path(pdf_path).read_bytes())

    def _extract_pdftotext(self, document: bytes) -> str:
        with tempfile.TemporaryDirectory(prefix="pms_pdf_") as workdir:
            pdf_path = os.path.join(workdir, "document.pdf")
            text_path = os.path.join(workdir, "document.txt")
            Path(pdf_path).write_bytes(document)

            try:
                completed = subprocess.run(
                    ["pdftotext", "-layout", "-nopgbrk", pdf_path, text_path],
                    capture_output=True,
                    timeout=self.timeout,
                    check=False,
                )
            except FileNotFoundError as exc:
                raise ExtractorUnavailableError(str(exc)) from exc
            except subprocess.TimeoutExpired as exc:
                raise ExtractionError("pdftotext timed out", str(exc)) from exc

            if completed.returncode != 0:
                stderr = completed.stderr.decode("utf-8", errors="replace").strip()
                raise ExtractionError("pdftotext failed", stderr or None)

            return Path(text_path).read_text(encoding="utf-8", errors="replace")

    def _extract_pymupdf(self, document: bytes) -> str:
        try:
            doc = fitz.open(stream=document, filetype="pdf")
        except Exception as exc:
            raise PDFCorruptedError(exc) from exc

        with doc:
            pages = [page.get_text("text") for page in doc]
        return "\n\n".join(pages)
