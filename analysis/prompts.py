"""
Extraction prompts and their lookup.

Prompts are versioned so an analysis records exactly which instructions
produced it (the version plus a sha256 of the text).
"""

from __future__ import annotations

import hashlib
from typing import Mapping, Optional

from .exceptions import UnknownPromptVersion

PROMPT_V1 = """You are analyzing a chunk of PMS API documentation. Use semantic matching and best-effort inference.

Rules:
- Return strict JSON only. No markdown, no prose.
- Prefer recall over precision. If a field seems likely, mark it available but use lower confidence.
- Handle SOAP, REST, or GraphQL docs and nested objects.
- Confidence must be a number between 0 and 1.
- Use lowercase for reservation_statuses.
- Identify the Get Reservations endpoint path(s) and any query/filter parameters.
- Capture the exact endpoint/operation name from the docs in get_reservations_endpoint_names.
- For filters, set get_reservations_filters for check_in_date, check_out_date, and status.
- For filter source_fields, use the exact parameter names from the docs.
- If the PMS name is mentioned, set pms_name to the exact product name; otherwise set it to an empty string.
- If credentials or auth tokens are mentioned, set credentials_available true and list credential_types
  (username, password, api_key, token, client_id, client_secret, authorization). Do not include secrets.
- If something is not found, set available false, source_fields empty, confidence 0.
- Fields should reflect the Get Reservations (or equivalent) response when possible.

Return this schema exactly:
{
  "has_get_reservations_endpoint": true,
  "pms_name": "",
  "get_reservations_endpoint_names": [],
  "get_reservations_endpoints": [],
  "supports_webhooks": false,
  "credentials_available": false,
  "credential_types": [],
  "get_reservations_filters": {
    "check_in_date": { "available": true, "source_fields": ["checkInDate"], "confidence": 0.78 },
    "check_out_date": { "available": false, "source_fields": [], "confidence": 0.0 },
    "status": { "available": false, "source_fields": [], "confidence": 0.0 }
  },
  "get_reservations_available_filters": ["check_in_date", "status"],
  "fields": {
    "checkout_date": { "available": true, "source_fields": ["CheckOutDate"], "confidence": 0.92 },
    "check_in_date": { "available": true, "source_fields": ["CheckInDate"], "confidence": 0.88 },
    "first_name": { "available": true, "source_fields": ["guest.firstName"], "confidence": 0.97 },
    "last_name": { "available": false, "source_fields": [], "confidence": 0.0 },
    "country": { "available": false, "source_fields": [], "confidence": 0.0 },
    "mobile_phone": { "available": false, "source_fields": [], "confidence": 0.0 },
    "email": { "available": false, "source_fields": [], "confidence": 0.0 },
    "reservation_status": { "available": false, "source_fields": [], "confidence": 0.0 },
    "property_name": { "available": false, "source_fields": [], "confidence": 0.0 },
    "special_package": { "available": false, "source_fields": [], "confidence": 0.0 }
  },
  "reservation_statuses": ["confirmed", "cancelled"],
  "notes": ["Reservation status inferred from example response payload"]
}
"""

PROMPTS: dict[str, str] = {
    "v1": PROMPT_V1,
}


class PromptManager:
    def __init__(
        self,
        prompts: Optional[Mapping[str, str]] = None,
        default_version: str = "v1",
    ):
        self.prompts = dict(PROMPTS if prompts is None else prompts)
        self.default_version = default_version

    def versions(self) -> list[str]:
        return list(self.prompts)

    def get_prompt(self, version: str) -> str:
        if version not in self.prompts:
            raise UnknownPromptVersion(version)
        return self.prompts[version]

    @staticmethod
    def prompt_hash(prompt: str) -> str:
        return hashlib.sha256(prompt.encode("utf-8")).hexdigest()
