"""
Tests for the FastAPI app in analysis.app.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from analysis import AnalysisService
from analysis.app import create_app
from ticketing import TicketingError

PDF = ("acme.pdf", b"%PDF-1.4 fake", "application/pdf")


@pytest.fixture
def ticket_client():
    client = MagicMock()
    client.create_issue.return_value = {"id": "2-15", "idReadable": "PMS-15"}
    client.issue_url.side_effect = lambda issue_id: f"https://tracker.example.com/issue/{issue_id}"
    return client


@pytest.fixture
def service(analyzer_config, mock_extractor, mock_client, ticket_client):
    return AnalysisService(
        config=analyzer_config,
        extractor=mock_extractor,
        client=mock_client,
        ticket_client=ticket_client,
    )


@pytest.fixture
def http(service):
    return TestClient(create_app(service))


@pytest.fixture
def uploaded(http):
    """Upload a PDF; the background analysis runs before the client returns."""
    response = http.post("/documents", files={"file": PDF})
    assert response.status_code == 201
    return response.json()


class TestHealth:
    def test_health(self, http):
        assert http.get("/health").json() == {"status": "ok"}


class TestDocuments:
    def test_upload_runs_analysis(self, http, uploaded):
        document_id = uploaded["document"]["id"]
        assert uploaded["analysis"]["status"] == "queued"

        detail = http.get(f"/documents/{document_id}").json()
        assert detail["document"]["status"] == "completed"
        assert detail["analyses"][0]["status"] == "completed"
        assert detail["analyses"][0]["result"]["pms_name"] == "Acme PMS"
        assert "chunk_results" not in detail["analyses"][0]

    def test_list_documents(self, http, uploaded):
        items = http.get("/documents").json()
        assert len(items) == 1
        assert items[0]["latest_analysis"]["status"] == "completed"

    def test_rejects_non_pdf(self, http):
        response = http.post("/documents", files={"file": ("notes.txt", b"hello", "text/plain")})
        assert response.status_code == 422

    def test_rejects_empty_upload(self, http):
        response = http.post("/documents", files={"file": ("acme.pdf", b"", "application/pdf")})
        assert response.status_code == 422

    def test_rejects_oversized_upload(self, http, service):
        service.config.max_upload_mb = 0
        response = http.post("/documents", files={"file": PDF})
        assert response.status_code == 422
        assert "upload limit" in response.json()["detail"]

    def test_rejects_unknown_prompt_version(self, http):
        response = http.post("/documents", files={"file": PDF}, data={"prompt_version": "v9"})
        assert response.status_code == 422
        assert response.json()["detail"] == "Unknown prompt version: v9"

    def test_missing_document(self, http):
        assert http.get(f"/documents/{'0' * 32}").status_code == 404

    def test_reanalyze(self, http, uploaded, mock_client):
        document_id = uploaded["document"]["id"]
        response = http.post(f"/documents/{document_id}/analyze", json={"model": "gpt-4o"})

        assert response.status_code == 202
        assert response.json()["model"] == "gpt-4o"
        assert len(http.get(f"/documents/{document_id}").json()["analyses"]) == 2

    def test_reanalyze_unknown_prompt(self, http, uploaded):
        document_id = uploaded["document"]["id"]
        response = http.post(f"/documents/{document_id}/analyze", json={"prompt_version": "v9"})
        assert response.status_code == 422

    def test_delete(self, http, uploaded):
        document_id = uploaded["document"]["id"]
        assert http.delete(f"/documents/{document_id}").status_code == 204
        assert http.get(f"/documents/{document_id}").status_code == 404
        assert http.delete(f"/documents/{document_id}").status_code == 404

    def test_failed_analysis_reported(self, http, mock_client):
        mock_client.analyze_chunk.side_effect = RuntimeError("model down")

        uploaded = http.post("/documents", files={"file": PDF}).json()
        detail = http.get(f"/documents/{uploaded['document']['id']}").json()

        assert detail["analyses"][0]["status"] == "failed"
        assert detail["analyses"][0]["error_message"] == "model down"


class TestDownloads:
    def test_json_download(self, http, uploaded):
        analysis_id = uploaded["analysis"]["id"]
        response = http.get(f"/analyses/{analysis_id}/download")

        assert response.status_code == 200
        assert "attachment" in response.headers["content-disposition"]
        assert response.json()["pms_name"] == "Acme PMS"

    def test_pdf_download(self, http, uploaded):
        response = http.get(f"/analyses/{uploaded['analysis']['id']}/download/pdf")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    def test_get_analysis(self, http, uploaded):
        body = http.get(f"/analyses/{uploaded['analysis']['id']}").json()
        assert body["status"] == "completed"
        assert body["progress"] == 100
        assert "prompt_hash" not in body

    def test_missing_analysis(self, http):
        assert http.get(f"/analyses/{'f' * 32}/download").status_code == 404


class TestTickets:
    def test_description(self, http, uploaded):
        response = http.post(
            f"/analyses/{uploaded['analysis']['id']}/ticket/description",
            json={"summary": "Integrate Acme"},
        )
        assert response.status_code == 200
        assert response.json() == {"description": "Drafted description"}

    def test_create_ticket(self, http, uploaded):
        response = http.post(
            f"/analyses/{uploaded['analysis']['id']}/ticket",
            json={"summary": "Integrate Acme", "description": "Build it", "include_result": True},
        )
        assert response.status_code == 200
        assert response.json()["issue_url"] == "https://tracker.example.com/issue/PMS-15"

    def test_ticket_failure_is_422(self, http, uploaded, ticket_client):
        ticket_client.create_issue.side_effect = TicketingError("YouTrack request failed")
        response = http.post(
            f"/analyses/{uploaded['analysis']['id']}/ticket",
            json={"summary": "Integrate Acme"},
        )
        assert response.status_code == 422

    def test_summary_required(self, http, uploaded):
        response = http.post(f"/analyses/{uploaded['analysis']['id']}/ticket", json={"summary": ""})
        assert response.status_code == 422


class TestCredentialScan:
    def test_scan(self, http):
        response = http.post("/credentials/scan", json={"text": "api_key: abcdef123456\npassword: string"})
        body = response.json()

        assert response.status_code == 200
        assert body["credential_types"] == ["api_key"]
        assert [match["type"] for match in body["matches"]] == ["api_key", "password"]
        assert all("raw_value" not in match for match in body["matches"])
