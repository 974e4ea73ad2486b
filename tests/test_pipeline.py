"""
Tests for analysis.pipeline.
"""

import logging

import pytest

from analysis import AnalysisPipeline, PromptManager, aggregate, normalize_chunk, progress_percent
from analysis.exceptions import UnknownPromptVersion
from analysis.models import AnalysisStatus, DocumentStatus
from analysis.pipeline import ChunkAccumulator
from analysis.schema import CapabilityReport
from chunking import ChunkingConfig, TextChunker, normalize_text
from credentials import CredentialType
from generation.exceptions import ModelRateLimitError, ModelResponseError
from pdf_extractor import ExtractionError


CHUNKING = ChunkingConfig(max_chars=120, overlap_chars=10)


@pytest.fixture
def pipeline(store, mock_extractor, mock_client):
    return AnalysisPipeline(
        extractor=mock_extractor,
        prompts=PromptManager(),
        client=mock_client,
        store=store,
        chunking=CHUNKING,
    )


def _expected_chunks(text: str) -> list[str]:
    return TextChunker(config=CHUNKING).chunk(normalize_text(text))


class TestProgressPercent:
    @pytest.mark.parametrize("completed,total,expected", [
        (0, 4, 0),
        (1, 2, 50),
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),
        (4, 4, 100),
        (5, 4, 100),
        (0, 0, 0),
    ])
    def test_rounding(self, completed, total, expected):
        assert progress_percent(completed, total) == expected


class TestChunkAccumulator:
    def test_tracks_progress(self):
        accumulator = ChunkAccumulator(total=3)
        assert accumulator.progress == 0

        accumulator.add(CapabilityReport())
        assert accumulator.completed == 1
        assert accumulator.progress == 33


class TestPipelineRun:
    def test_completes_analysis(self, pipeline, store, stored_document, queued_analysis,
                                mock_client, sample_text, raw_chunk_result):
        """A successful run persists a completed attempt with the merged result."""
        chunks = _expected_chunks(sample_text)
        assert len(chunks) > 1

        result = pipeline.run(stored_document, queued_analysis)

        assert result.status == AnalysisStatus.COMPLETED
        assert result.progress == 100
        assert result.chunk_count == len(chunks)
        assert len(result.chunk_results) == len(chunks)
        assert result.result == aggregate([normalize_chunk(raw_chunk_result)] * len(chunks))
        assert result.started_at is not None
        assert result.completed_at is not None
        assert mock_client.analyze_chunk.call_count == len(chunks)

        persisted = store.get_analysis(queued_analysis.id)
        assert persisted.status == AnalysisStatus.COMPLETED
        assert persisted.result == result.result
        assert store.get_document(stored_document.id).status == DocumentStatus.COMPLETED

    def test_chunks_sent_in_order_with_prompt(self, pipeline, stored_document, queued_analysis,
                                              mock_client, sample_text):
        pipeline.run(stored_document, queued_analysis)

        prompt = PromptManager().get_prompt("v1")
        sent = [call.args for call in mock_client.analyze_chunk.call_args_list]
        assert sent == [(prompt, chunk, "gpt-4o-mini") for chunk in _expected_chunks(sample_text)]

    def test_progress_persisted_after_each_chunk(self, pipeline, store, stored_document,
                                                 queued_analysis, mock_client, raw_chunk_result):
        seen = []

        def analyze(prompt, chunk, model):
            seen.append(store.get_analysis(queued_analysis.id).progress)
            return raw_chunk_result

        mock_client.analyze_chunk.side_effect = analyze
        pipeline.run(stored_document, queued_analysis)

        assert seen[0] == 0
        assert seen == sorted(seen)
        assert seen[-1] < 100

    def test_credentials_detected(self, pipeline, stored_document, queued_analysis):
        result = pipeline.run(stored_document, queued_analysis)

        assert [match.type for match in result.credentials] == [CredentialType.CLIENT_ID]
        assert result.credentials[0].value == "ac************81"

    def test_text_is_cached(self, pipeline, store, stored_document, queued_analysis, mock_extractor):
        """The extracted text is written once and reused by later attempts."""
        pipeline.run(stored_document, queued_analysis)
        document = store.get_document(stored_document.id)
        assert document.extracted_text_path
        assert document.text_extracted_at is not None

        second = queued_analysis.model_copy(update={"id": "f" * 32, "status": AnalysisStatus.QUEUED})
        store.save_analysis(second)
        pipeline.run(document, second)

        assert mock_extractor.extract.call_count == 1

    def test_zero_chunks(self, pipeline, stored_document, queued_analysis, mock_extractor, mock_client):
        """Text without content completes immediately with the default report."""
        mock_extractor.extract.return_value = "  \n\n  "

        result = pipeline.run(stored_document, queued_analysis)

        assert result.status == AnalysisStatus.COMPLETED
        assert result.chunk_count == 0
        assert result.progress == 100
        assert result.result == CapabilityReport()
        mock_client.analyze_chunk.assert_not_called()


class TestPipelineFailure:
    def test_model_failure_marks_failed(self, pipeline, store, stored_document, queued_analysis, mock_client):
        mock_client.analyze_chunk.side_effect = ModelResponseError("Unable to parse JSON response.")

        with pytest.raises(ModelResponseError):
            pipeline.run(stored_document, queued_analysis)

        persisted = store.get_analysis(queued_analysis.id)
        assert persisted.status == AnalysisStatus.FAILED
        assert "Unable to parse JSON response." in persisted.error_message
        assert persisted.result is None
        document = store.get_document(stored_document.id)
        assert document.status == DocumentStatus.FAILED
        assert "Unable to parse JSON response." in document.last_error

    def test_transient_failure_logged_as_retryable(self, pipeline, store, stored_document,
                                                   queued_analysis, mock_client, caplog):
        mock_client.analyze_chunk.side_effect = ModelRateLimitError()

        with caplog.at_level(logging.WARNING, logger="analysis.pipeline"):
            with pytest.raises(ModelRateLimitError):
                pipeline.run(stored_document, queued_analysis)

        assert store.get_analysis(queued_analysis.id).status == AnalysisStatus.FAILED
        assert any("can be rerun" in record.getMessage() for record in caplog.records)

    def test_permanent_failure_not_logged_as_retryable(self, pipeline, stored_document,
                                                       queued_analysis, mock_client, caplog):
        mock_client.analyze_chunk.side_effect = ModelResponseError("Unable to parse JSON response.")

        with caplog.at_level(logging.WARNING, logger="analysis.pipeline"):
            with pytest.raises(ModelResponseError):
                pipeline.run(stored_document, queued_analysis)

        assert not any("can be rerun" in record.getMessage() for record in caplog.records)

    def test_partial_results_kept_on_failure(self, pipeline, store, stored_document,
                                             queued_analysis, mock_client, raw_chunk_result):
        mock_client.analyze_chunk.side_effect = [raw_chunk_result, RuntimeError("boom")]

        with pytest.raises(RuntimeError):
            pipeline.run(stored_document, queued_analysis)

        persisted = store.get_analysis(queued_analysis.id)
        assert persisted.status == AnalysisStatus.FAILED
        assert len(persisted.chunk_results) == 1
        assert persisted.error_message == "boom"

    def test_extraction_failure(self, pipeline, store, stored_document, queued_analysis, mock_extractor):
        mock_extractor.extract.side_effect = ExtractionError("No text layer")

        with pytest.raises(ExtractionError):
            pipeline.run(stored_document, queued_analysis)

        assert store.get_analysis(queued_analysis.id).status == AnalysisStatus.FAILED

    def test_unknown_prompt_version(self, pipeline, store, stored_document, queued_analysis):
        queued_analysis.prompt_version = "v99"

        with pytest.raises(UnknownPromptVersion):
            pipeline.run(stored_document, queued_analysis)

        assert store.get_analysis(queued_analysis.id).error_message == "Unknown prompt version: v99"
