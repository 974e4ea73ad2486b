"""
Pytest fixtures for PMS analyzer tests.
"""

import pytest
from unittest.mock import MagicMock

from analysis import AnalysisStore, AnalyzerConfig
from analysis.models import AnalysisRecord, AnalysisStatus, DocumentRecord
from analysis.schema import CapabilityReport, FieldInfo
from credentials import CredentialMatch, CredentialType
from generation import OpenAIConfig
from ticketing import YouTrackConfig


SAMPLE_DOC_TEXT = """Acme PMS API Reference

Authentication

Send your client_id: acme-client-7781 together with the client_secret.

GET /v2/reservations

Returns reservations. Supports filters arrival_from, departure_to and status.
"""


@pytest.fixture
def sample_text():
    """Plain documentation text with one credential hint."""
    return SAMPLE_DOC_TEXT


@pytest.fixture
def raw_chunk_result():
    """A well-formed raw model reply for one chunk."""
    return {
        "has_get_reservations_endpoint": True,
        "pms_name": "Acme PMS",
        "get_reservations_endpoint_names": ["List reservations"],
        "get_reservations_endpoints": ["GET /v2/reservations"],
        "supports_webhooks": False,
        "credentials_available": True,
        "credential_types": ["client_id"],
        "get_reservations_filters": {
            "check_in_date": {"available": True, "source_fields": ["arrival_from"], "confidence": 0.8},
            "status": {"available": True, "source_fields": ["status"], "confidence": 0.9},
        },
        "get_reservations_available_filters": ["arrival_from", "departure_to", "status"],
        "fields": {
            "first_name": {"available": True, "source_fields": ["guest.firstName"], "confidence": 0.7},
            "email": {"available": True, "source_fields": ["guest.email"], "confidence": "0.6"},
        },
        "reservation_statuses": ["Confirmed", "Cancelled"],
        "notes": ["Pagination via cursor"],
    }


@pytest.fixture
def sample_report():
    """A populated aggregated report."""
    return CapabilityReport(
        has_get_reservations_endpoint=True,
        pms_name="Acme PMS",
        get_reservations_endpoints=["GET /v2/reservations"],
        credentials_available=True,
        credential_types=["client_id"],
        get_reservations_filters={
            "check_in_date": FieldInfo(available=True, source_fields=["arrival_from"], confidence=0.8),
            "check_out_date": FieldInfo(),
            "status": FieldInfo(available=True, source_fields=["status"], confidence=0.9),
        },
        reservation_statuses=["confirmed", "cancelled"],
        notes=["Pagination via cursor"],
    )


@pytest.fixture
def analyzer_config(tmp_path):
    """AnalyzerConfig rooted in a temporary data directory."""
    return AnalyzerConfig(
        data_dir=str(tmp_path / "data"),
        chunk_max_chars=200,
        chunk_overlap_chars=20,
        openai=OpenAIConfig(api_key="sk-test"),
        youtrack=YouTrackConfig(
            base_uri="https://tracker.example.com",
            token="perm:test",
            project_key="PMS",
        ),
    )


@pytest.fixture
def store(tmp_path):
    """An empty AnalysisStore in a temporary directory."""
    return AnalysisStore(str(tmp_path / "store"))


@pytest.fixture
def stored_document(store):
    """A DocumentRecord with uploaded bytes already persisted."""
    document = DocumentRecord(original_name="acme.pdf", storage_path="")
    document.storage_path = store.save_upload(document.id, b"%PDF-1.4 fake")
    return store.save_document(document)


@pytest.fixture
def queued_analysis(store, stored_document):
    """A queued analysis attempt for stored_document."""
    analysis = AnalysisRecord(
        document_id=stored_document.id,
        prompt_version="v1",
        prompt_hash="abc",
        model="gpt-4o-mini",
        status=AnalysisStatus.QUEUED,
    )
    return store.save_analysis(analysis)


@pytest.fixture
def mock_extractor(sample_text):
    """Extractor double returning sample_text."""
    extractor = MagicMock()
    extractor.extract.return_value = sample_text
    return extractor


@pytest.fixture
def mock_client(raw_chunk_result):
    """Language model double returning raw_chunk_result for every chunk."""
    client = MagicMock()
    client.analyze_chunk.return_value = raw_chunk_result
    client.generate_text.return_value = "Drafted description"
    return client


@pytest.fixture
def sample_credential():
    """A masked credential match."""
    return CredentialMatch(
        type=CredentialType.CLIENT_ID,
        label="Client ID",
        value="ac************81",
        raw_value="acme-client-7781",
        confidence=0.75,
        source_line="Send your client_id: ac************81 together with the client_secret.",
    )
