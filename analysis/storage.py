"""
File-based persistence for documents, analysis attempts and artifacts.

Layout under data_dir:
    documents/<id>.json    DocumentRecord
    analyses/<id>.json     AnalysisRecord
    uploads/<id>.pdf       uploaded bytes
    text/<id>-<uuid>.txt   cached extracted text (write-once)

Writes go through a temp file and os.replace, so readers never observe a
half-written record.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import threading
import uuid
from pathlib import Path
from typing import Optional

from .exceptions import AnalysisNotFoundError, DocumentNotFoundError
from .models import AnalysisRecord, DocumentRecord, utcnow

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


class AnalysisStore:
    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)
        self.documents_dir = self.data_dir / "documents"
        self.analyses_dir = self.data_dir / "analyses"
        self.uploads_dir = self.data_dir / "uploads"
        self.text_dir = self.data_dir / "text"
        for directory in (self.documents_dir, self.analyses_dir, self.uploads_dir, self.text_dir):
            directory.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def save_document(self, document: DocumentRecord) -> DocumentRecord:
        document.updated_at = utcnow()
        self._write(self.documents_dir / f"{document.id}.json", document.model_dump_json(indent=2))
        return document

    def get_document(self, document_id: str) -> DocumentRecord:
        path = self.documents_dir / f"{document_id}.json"
        if not _ID_PATTERN.match(document_id) or not path.exists():
            raise DocumentNotFoundError(document_id)
        return DocumentRecord.model_validate_json(path.read_text(encoding="utf-8"))

    def list_documents(self) -> list[DocumentRecord]:
        documents = [
            DocumentRecord.model_validate_json(path.read_text(encoding="utf-8"))
            for path in self.documents_dir.glob("*.json")
        ]
        return sorted(documents, key=lambda doc: doc.created_at, reverse=True)

    def delete_document(self, document_id: str) -> None:
        """Delete a document together with its analyses and artifacts."""
        document = self.get_document(document_id)
        for analysis in self.list_analyses(document_id):
            (self.analyses_dir / f"{analysis.id}.json").unlink(missing_ok=True)
        for relative in (document.storage_path, document.extracted_text_path):
            if relative:
                (self.data_dir / relative).unlink(missing_ok=True)
        (self.documents_dir / f"{document_id}.json").unlink(missing_ok=True)
        logger.info(f"Deleted document {document_id}")

    # -------------------------------------------------------------------------
    # Analyses
    # -------------------------------------------------------------------------

    def save_analysis(self, analysis: AnalysisRecord) -> AnalysisRecord:
        analysis.updated_at = utcnow()
        self._write(self.analyses_dir / f"{analysis.id}.json", analysis.model_dump_json(indent=2))
        return analysis

    def get_analysis(self, analysis_id: str) -> AnalysisRecord:
        path = self.analyses_dir / f"{analysis_id}.json"
        if not _ID_PATTERN.match(analysis_id) or not path.exists():
            raise AnalysisNotFoundError(analysis_id)
        return AnalysisRecord.model_validate_json(path.read_text(encoding="utf-8"))

    def list_analyses(self, document_id: str) -> list[AnalysisRecord]:
        """Analyses of one document, newest first."""
        analyses = []
        for path in self.analyses_dir.glob("*.json"):
            analysis = AnalysisRecord.model_validate_json(path.read_text(encoding="utf-8"))
            if analysis.document_id == document_id:
                analyses.append(analysis)
        return sorted(analyses, key=lambda item: item.created_at, reverse=True)

    def latest_analysis(self, document_id: str) -> Optional[AnalysisRecord]:
        analyses = self.list_analyses(document_id)
        return analyses[0] if analyses else None

    # -------------------------------------------------------------------------
    # Artifacts
    # -------------------------------------------------------------------------

    def save_upload(self, document_id: str, data: bytes) -> str:
        relative = f"uploads/{document_id}.pdf"
        self._write_bytes(self.data_dir / relative, data)
        return relative

    def read_upload(self, relative: str) -> bytes:
        return (self.data_dir / relative).read_bytes()

    def read_text(self, relative: str) -> Optional[str]:
        path = self.data_dir / relative
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write_text(self, document_id: str, text: str) -> str:
        """Write a new text artifact; concurrent writers each get their own file."""
        relative = f"text/{document_id}-{uuid.uuid4().hex}.txt"
        self._write(self.data_dir / relative, text)
        return relative

    # -------------------------------------------------------------------------
    # Internal methods
    # -------------------------------------------------------------------------

    def _write(self, path: Path, content: str) -> None:
        self._write_bytes(path, content.encode("utf-8"))

    def _write_bytes(self, path: Path, data: bytes) -> None:
        with self._lock:
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
