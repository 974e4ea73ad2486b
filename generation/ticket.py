"""Draft an issue tracker description from an aggregated analysis result."""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from .openai_client import LanguageModelClient
from .prompts import TICKET_DESCRIPTION_PROMPT


class TicketDescriptionGenerator:
    def __init__(self, client: LanguageModelClient, model: str):
        self.client = client
        self.model = model

    def build_payload(
        self,
        result: Mapping[str, Any],
        document_name: str,
        analysis_id: str,
        summary: Optional[str] = None,
    ) -> str:
        payload = {
            "ticket_summary": summary,
            "document": document_name or "Unknown",
            "analysis_id": analysis_id,
            "result": dict(result),
        }
        return json.dumps(payload, ensure_ascii=False, indent=4)

    def generate(
        self,
        result: Mapping[str, Any],
        document_name: str,
        analysis_id: str,
        summary: Optional[str] = None,
    ) -> str:
        """Ask the model for a concise description grounded in the result JSON."""
        content = self.build_payload(result, document_name, analysis_id, summary)
        return self.client.generate_text(TICKET_DESCRIPTION_PROMPT, content, self.model)
