"""
YouTrack issue client.

Creates issues in a configured project through the YouTrack REST API.
The configured base URI may point at the instance root or at its `/api`
endpoint; both forms are accepted.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from generation.exceptions import ConfigurationError

from . import http_client
from .config import YouTrackConfig
from .exceptions import TicketingError

logger = logging.getLogger(__name__)

ISSUE_FIELDS = "id,idReadable,summary"


def normalize_api_base(base_uri: str) -> str:
    base_uri = base_uri.rstrip("/")
    if "/api" not in base_uri:
        base_uri += "/api"
    return base_uri.rstrip("/")


def strip_api_suffix(api_base: str) -> str:
    return re.sub(r"/api$", "", api_base.rstrip("/")).rstrip("/")


class YouTrackClient:
    def __init__(self, config: Optional[YouTrackConfig] = None):
        self.config = config or YouTrackConfig.from_env()
        if not self.config.base_uri:
            raise ConfigurationError("YOUTRACK_BASE_URI")

        self.api_base = normalize_api_base(self.config.base_uri)
        self.base_url = strip_api_suffix(self.api_base)

    def create_issue(self, summary: str, description: str) -> dict[str, Any]:
        """
        Create an issue and return the tracker's JSON reply.

        Raises:
            ConfigurationError: Token or project is not configured.
            TicketingError: The request failed.
        """
        if not self.config.token:
            raise ConfigurationError("YOUTRACK_TOKEN")

        payload = {
            "summary": summary,
            "description": description,
            "project": self.project_reference(),
        }
        try:
            data = http_client.post_json(
                f"{self.api_base}/issues",
                payload,
                headers={
                    "Authorization": f"Bearer {self.config.token}",
                    "Accept": "application/json",
                },
                query={"fields": ISSUE_FIELDS},
                timeout=self.config.timeout,
            )
        except (RuntimeError, ConnectionError) as exc:
            raise TicketingError("YouTrack request failed", exc) from exc

        issue = data if isinstance(data, dict) else {}
        logger.info(f"Created YouTrack issue {issue.get('idReadable') or issue.get('id')}")
        return issue

    def issue_url(self, issue_id: str) -> str:
        return f"{self.base_url}/issue/{issue_id}"

    def project_reference(self) -> dict[str, str]:
        if self.config.project_id:
            return {"id": self.config.project_id}
        if self.config.project_key:
            return {"shortName": self.config.project_key}
        raise ConfigurationError("YOUTRACK_PROJECT_ID or YOUTRACK_PROJECT_KEY")
