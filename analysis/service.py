from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from credentials import CredentialMatch, CredentialScanner
from generation import LanguageModelClient, TicketDescriptionGenerator
from pdf_extractor import PdfTextExtractor
from reporting import AnalysisPdfGenerator
from ticketing import YouTrackClient

from .config import AnalyzerConfig
from .exceptions import EmptyResultError
from .models import AnalysisRecord, AnalysisStatus, DocumentRecord
from .pipeline import AnalysisPipeline, ChunkAnalyzer, PdfExtractor
from .prompts import PromptManager
from .storage import AnalysisStore

logger = logging.getLogger(__name__)


class AnalysisService:
    """Application facade used by the HTTP app and the CLI."""

    def __init__(
        self,
        config: AnalyzerConfig | None = None,
        store: Optional[AnalysisStore] = None,
        extractor: Optional[PdfExtractor] = None,
        client: Optional[ChunkAnalyzer] = None,
        ticket_client: Optional[YouTrackClient] = None,
    ):
        self.config = config or AnalyzerConfig.from_env()
        self.store = store or AnalysisStore(self.config.data_dir)
        self.extractor = extractor or PdfTextExtractor()
        self.client = client or LanguageModelClient(self.config.openai)
        self.prompts = PromptManager(self.config.prompts, self.config.default_prompt_version)
        self.scanner = CredentialScanner()
        self.pipeline = AnalysisPipeline(
            extractor=self.extractor,
            prompts=self.prompts,
            client=self.client,
            store=self.store,
            chunking=self.config.chunking,
            scanner=self.scanner,
        )
        self.report_generator = AnalysisPdfGenerator()
        self._ticket_client = ticket_client

    @property
    def ticket_client(self) -> YouTrackClient:
        if self._ticket_client is None:
            self._ticket_client = YouTrackClient(self.config.youtrack)
        return self._ticket_client

    # -------------------------------------------------------------------------
    # Documents and analyses
    # -------------------------------------------------------------------------

    def upload(
        self,
        filename: str,
        data: bytes,
        prompt_version: Optional[str] = None,
        model: Optional[str] = None,
    ) -> tuple[DocumentRecord, AnalysisRecord]:
        """Store an uploaded PDF and queue its first analysis."""
        # Reject unknown prompt versions before anything is written
        self.prompts.get_prompt(prompt_version or self.prompts.default_version)

        document = DocumentRecord(original_name=filename, storage_path="")
        document.storage_path = self.store.save_upload(document.id, data)
        self.store.save_document(document)
        logger.info(f"Stored upload {filename} as document {document.id}")
        return document, self.create_analysis(document, prompt_version, model)

    def create_analysis(
        self,
        document: DocumentRecord,
        prompt_version: Optional[str] = None,
        model: Optional[str] = None,
    ) -> AnalysisRecord:
        version = prompt_version or self.prompts.default_version
        prompt = self.prompts.get_prompt(version)
        analysis = AnalysisRecord(
            document_id=document.id,
            prompt_version=version,
            prompt_hash=self.prompts.prompt_hash(prompt),
            model=model or self.config.openai.model,
            status=AnalysisStatus.QUEUED,
        )
        return self.store.save_analysis(analysis)

    def run_analysis(self, analysis_id: str) -> AnalysisRecord:
        analysis = self.store.get_analysis(analysis_id)
        document = self.store.get_document(analysis.document_id)
        return self.pipeline.run(document, analysis)

    def analyze_file(
        self,
        pdf_path: str | Path,
        prompt_version: Optional[str] = None,
        model: Optional[str] = None,
    ) -> AnalysisRecord:
        path = Path(pdf_path)
        _, analysis = self.upload(path.name, path.read_bytes(), prompt_version, model)
        return self.run_analysis(analysis.id)

    def get_document(self, document_id: str) -> DocumentRecord:
        return self.store.get_document(document_id)

    def list_documents(self) -> list[DocumentRecord]:
        return self.store.list_documents()

    def list_analyses(self, document_id: str) -> list[AnalysisRecord]:
        return self.store.list_analyses(document_id)

    def delete_document(self, document_id: str) -> None:
        self.store.delete_document(document_id)

    def get_analysis(self, analysis_id: str) -> AnalysisRecord:
        return self.store.get_analysis(analysis_id)

    # -------------------------------------------------------------------------
    # Outputs
    # -------------------------------------------------------------------------

    def download_payload(self, analysis: AnalysisRecord) -> dict[str, Any]:
        payload = analysis.result.to_dict() if analysis.result else {}
        if analysis.credentials:
            payload["credentials"] = [match.model_dump(mode="json") for match in analysis.credentials]
        return payload

    def render_pdf(self, analysis: AnalysisRecord) -> bytes:
        document = self.store.get_document(analysis.document_id)
        return self.report_generator.generate(analysis, document)

    def ticket_description(self, analysis: AnalysisRecord, summary: Optional[str] = None) -> str:
        if analysis.result is None:
            raise EmptyResultError(analysis.id)
        document = self.store.get_document(analysis.document_id)
        generator = TicketDescriptionGenerator(self.client, self.config.openai.model)
        return generator.generate(analysis.result.to_dict(), document.original_name, analysis.id, summary)

    def create_ticket(
        self,
        analysis: AnalysisRecord,
        summary: str,
        description: Optional[str] = None,
        include_result: bool = False,
    ) -> dict[str, Optional[str]]:
        description = (description or "").strip()
        if include_result:
            result = analysis.result.to_dict() if analysis.result else {}
            if description:
                description += "\n\n"
            description += "PMS result:\n" + json.dumps(result, ensure_ascii=False, indent=4)

        issue = self.ticket_client.create_issue(summary, description)
        issue_id = issue.get("idReadable") or issue.get("id")
        return {
            "issue_id": issue.get("id"),
            "issue_id_readable": issue.get("idReadable"),
            "issue_url": self.ticket_client.issue_url(str(issue_id)) if issue_id else None,
        }

    def scan_text(self, text: str) -> list[CredentialMatch]:
        return self.scanner.scan(text)
