from __future__ import annotations

import json
import logging
from typing import Callable, Optional

from dotenv import load_dotenv
from fastapi import BackgroundTasks, FastAPI, File, Form, HTTPException, Response, UploadFile

from credentials import summarize
from generation.exceptions import ConfigurationError, ModelCallError
from ticketing.exceptions import TicketingError

from .exceptions import (
    AnalysisNotFoundError,
    DocumentNotFoundError,
    EmptyResultError,
    UnknownPromptVersion,
)
from .models import (
    AnalysisRecord,
    AnalyzeRequest,
    ScanRequest,
    ScanResponse,
    TicketDescriptionRequest,
    TicketDescriptionResponse,
    TicketRequest,
    TicketResponse,
)
from .service import AnalysisService

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}


def create_app(service: AnalysisService | None = None) -> FastAPI:
    state: dict[str, Optional[AnalysisService]] = {"service": service}

    def get_service() -> AnalysisService:
        # Built on first request so importing the app needs no data dir or API key
        if state["service"] is None:
            load_dotenv()
            state["service"] = AnalysisService()
        return state["service"]

    app = FastAPI(
        title="PMS Analyzer Service",
        version="1.0.0",
        description="Capability analysis of PMS API documentation PDFs.",
    )

    def run_in_background(analysis_id: str) -> None:
        try:
            get_service().run_analysis(analysis_id)
        except Exception as exc:
            # Failure is already persisted on the analysis record
            logger.error(f"Background analysis {analysis_id} failed: {exc}")

    def load_analysis(analysis_id: str) -> AnalysisRecord:
        try:
            return get_service().get_analysis(analysis_id)
        except AnalysisNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    def document_detail(document_id: str) -> dict:
        svc = get_service()
        try:
            document = svc.get_document(document_id)
        except DocumentNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        analyses = svc.list_analyses(document_id)
        return {
            "document": document.model_dump(mode="json"),
            "analyses": [analysis.public_dict() for analysis in analyses],
        }

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/documents")
    def list_documents() -> list[dict]:
        svc = get_service()
        items = []
        for document in svc.list_documents():
            latest = svc.store.latest_analysis(document.id)
            items.append({
                "document": document.model_dump(mode="json"),
                "latest_analysis": latest.public_dict() if latest else None,
            })
        return items

    @app.post("/documents", status_code=201)
    async def upload_document(
        background_tasks: BackgroundTasks,
        file: UploadFile = File(...),
        prompt_version: Optional[str] = Form(None),
        model: Optional[str] = Form(None),
    ) -> dict:
        svc = get_service()
        filename = file.filename or "document.pdf"
        if file.content_type not in PDF_CONTENT_TYPES and not filename.lower().endswith(".pdf"):
            raise HTTPException(status_code=422, detail="Only PDF uploads are supported.")

        data = await file.read()
        if not data:
            raise HTTPException(status_code=422, detail="Uploaded file is empty.")
        if len(data) > svc.config.max_upload_bytes:
            raise HTTPException(
                status_code=422,
                detail=f"File exceeds the {svc.config.max_upload_mb} MB upload limit.",
            )

        try:
            document, analysis = svc.upload(filename, data, prompt_version or None, model or None)
        except UnknownPromptVersion as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

        background_tasks.add_task(run_in_background, analysis.id)
        return {
            "document": document.model_dump(mode="json"),
            "analysis": analysis.public_dict(),
        }

    @app.get("/documents/{document_id}")
    def get_document(document_id: str) -> dict:
        return document_detail(document_id)

    @app.post("/documents/{document_id}/analyze", status_code=202)
    def analyze_document(
        document_id: str,
        background_tasks: BackgroundTasks,
        request: AnalyzeRequest | None = None,
    ) -> dict:
        svc = get_service()
        request = request or AnalyzeRequest()
        try:
            document = svc.get_document(document_id)
            analysis = svc.create_analysis(document, request.prompt_version, request.model)
        except DocumentNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except UnknownPromptVersion as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

        background_tasks.add_task(run_in_background, analysis.id)
        return analysis.public_dict()

    @app.delete("/documents/{document_id}", status_code=204)
    def delete_document(document_id: str) -> Response:
        try:
            get_service().delete_document(document_id)
        except DocumentNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return Response(status_code=204)

    @app.get("/analyses/{analysis_id}")
    def get_analysis(analysis_id: str) -> dict:
        return load_analysis(analysis_id).public_dict()

    @app.get("/analyses/{analysis_id}/download")
    def download_json(analysis_id: str) -> Response:
        analysis = load_analysis(analysis_id)
        payload = get_service().download_payload(analysis)
        return Response(
            content=json.dumps(payload, ensure_ascii=False, indent=4),
            media_type="application/json",
            headers={
                "Content-Disposition": f'attachment; filename="pms-analysis-{analysis.id}.json"',
            },
        )

    @app.get("/analyses/{analysis_id}/download/pdf")
    def download_pdf(analysis_id: str) -> Response:
        analysis = load_analysis(analysis_id)
        if analysis.result is None:
            raise HTTPException(status_code=422, detail=str(EmptyResultError(analysis.id)))
        content = get_service().render_pdf(analysis)
        return Response(
            content=content,
            media_type="application/pdf",
            headers={
                "Content-Disposition": f'attachment; filename="pms-analysis-{analysis.id}.pdf"',
            },
        )

    @app.post(
        "/analyses/{analysis_id}/ticket/description",
        response_model=TicketDescriptionResponse,
    )
    def ticket_description(
        analysis_id: str,
        request: TicketDescriptionRequest | None = None,
    ) -> TicketDescriptionResponse:
        analysis = load_analysis(analysis_id)
        summary = request.summary if request else None
        description = _collaborator_call(
            lambda: get_service().ticket_description(analysis, summary)
        )
        return TicketDescriptionResponse(description=description)

    @app.post("/analyses/{analysis_id}/ticket", response_model=TicketResponse)
    def create_ticket(analysis_id: str, request: TicketRequest) -> TicketResponse:
        analysis = load_analysis(analysis_id)
        issue = _collaborator_call(
            lambda: get_service().create_ticket(
                analysis,
                request.summary,
                request.description,
                request.include_result,
            )
        )
        return TicketResponse(**issue)

    @app.post("/credentials/scan", response_model=ScanResponse)
    def scan_credentials(request: ScanRequest) -> ScanResponse:
        matches = get_service().scan_text(request.text)
        return ScanResponse(matches=matches, credential_types=summarize(matches))

    return app


def _collaborator_call(call: Callable):
    """Run a model or tracker call, mapping its failures to 422."""
    try:
        return call()
    except (EmptyResultError, ConfigurationError, ModelCallError, TicketingError) as exc:
        logger.warning(f"Ticket request failed: {exc}")
        raise HTTPException(status_code=422, detail=str(exc)) from exc


app = create_app()
