"""
Tests for reporting.pdf_report.
"""

import fitz
import pytest

from analysis.models import AnalysisRecord, AnalysisStatus, DocumentRecord
from analysis.schema import FieldInfo
from reporting import AnalysisPdfGenerator
from reporting.pdf_report import LINES_PER_PAGE, MAX_WIDTH


@pytest.fixture
def generator():
    return AnalysisPdfGenerator()


@pytest.fixture
def completed_analysis(sample_report, sample_credential):
    return AnalysisRecord(
        document_id="d" * 32,
        prompt_version="v1",
        prompt_hash="h",
        model="gpt-4o-mini",
        status=AnalysisStatus.COMPLETED,
        progress=100,
        result=sample_report,
        credentials=[sample_credential],
    )


@pytest.fixture
def document():
    return DocumentRecord(original_name="acme.pdf", storage_path="uploads/x.pdf")


class TestBuildLines:
    def test_sections_present(self, generator, completed_analysis, document):
        lines = generator.build_lines(completed_analysis, document)
        text = "\n".join(lines)

        assert lines[0] == "PMS Analysis Report"
        for heading in ("Capability snapshot", "Field coverage", "Reservation statuses",
                        "Credentials detected", "Notes"):
            assert heading in lines
        assert "Key filters - GET /v2/reservations" in lines
        assert "acme.pdf" in text
        assert "confirmed, cancelled" in text
        assert "- Pagination via cursor" in text

    def test_credentials_listed_masked(self, generator, completed_analysis):
        text = "\n".join(generator.build_lines(completed_analysis))
        assert "Client ID (75%): ac************81" in text
        assert "acme-client-7781" not in text

    def test_field_count(self, generator, completed_analysis):
        text = "\n".join(generator.build_lines(completed_analysis))
        assert "0 / 10" in text

    def test_field_count_matches_report(self, generator, completed_analysis, sample_report):
        fields = dict(sample_report.fields)
        fields["email"] = FieldInfo(available=True, source_fields=["guest.email"], confidence=0.7)
        fields["last_name"] = FieldInfo(available=True, confidence=0.5)
        report = sample_report.model_copy(update={"fields": fields})
        analysis = completed_analysis.model_copy(update={"result": report})

        text = "\n".join(generator.build_lines(analysis))
        assert report.available_field_count == 2
        assert "2 / 10" in text

    def test_empty_result(self, generator):
        analysis = AnalysisRecord(document_id="d" * 32, prompt_version="v1", prompt_hash="h", model="m")
        lines = generator.build_lines(analysis)

        assert "No filters detected." in lines
        assert "- No fields detected." in lines
        assert any(line.startswith("Document") and line.endswith(": Unknown") for line in lines)


class TestWrap:
    def test_strips_non_ascii(self):
        wrapped = AnalysisPdfGenerator.wrap(["Café \u2013 ok"])
        assert wrapped[0].startswith("Caf")
        assert wrapped[0].isascii()

    def test_long_lines_wrapped(self):
        wrapped = AnalysisPdfGenerator.wrap(["word " * 60])
        assert len(wrapped) > 1
        assert all(len(line) <= MAX_WIDTH for line in wrapped)

    def test_blank_lines_kept(self):
        assert AnalysisPdfGenerator.wrap(["a", "", "b"]) == ["a", "", "b"]


class TestRender:
    def test_generates_pdf(self, generator, completed_analysis, document):
        content = generator.generate(completed_analysis, document)

        assert content.startswith(b"%PDF")
        with fitz.open(stream=content, filetype="pdf") as doc:
            assert "PMS Analysis Report" in doc[0].get_text()

    def test_paginates(self):
        lines = [f"line {i}" for i in range(LINES_PER_PAGE * 2 + 1)]
        content = AnalysisPdfGenerator.render(lines)

        with fitz.open(stream=content, filetype="pdf") as doc:
            assert doc.page_count == 3

    def test_empty_lines_still_one_page(self):
        with fitz.open(stream=AnalysisPdfGenerator.render([]), filetype="pdf") as doc:
            assert doc.page_count == 1
