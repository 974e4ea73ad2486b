"""
PDF rendering of a finished analysis.

Builds a plain-text report (run metadata, capability snapshot, filters,
field coverage, statuses, credential evidence, notes), wraps it at 92
columns and lays it out 46 lines per US Letter page with PyMuPDF.
"""

from __future__ import annotations

import re
import textwrap
from typing import TYPE_CHECKING, Any, Optional

import fitz  # PyMuPDF

if TYPE_CHECKING:
    from analysis.models import AnalysisRecord, DocumentRecord

PAGE_WIDTH = 612
PAGE_HEIGHT = 792
MARGIN = 72
FONT_SIZE = 12
LEADING = 14
LINES_PER_PAGE = 46
MAX_WIDTH = 92
RULE = "-" * 72

_NON_PRINTABLE = re.compile(r"[^\x20-\x7E]")


def _label(label: str, value: str, width: int = 20) -> str:
    return f"{label.ljust(width)} : {value}"


def _columns(values: list[str], widths: list[Optional[int]]) -> str:
    parts = [value.ljust(width) if width else value for value, width in zip(values, widths)]
    return "  ".join(parts).rstrip()


def _yes_no(value: Any) -> str:
    return "Yes" if value else "No"


def _percent(confidence: Any) -> str:
    try:
        return f"{int(round(float(confidence) * 100))}%"
    except (TypeError, ValueError):
        return "0%"


def _heading(title: str) -> list[str]:
    return [title, "-" * len(title)]


def _timestamp(value: Any) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else "N/A"


class AnalysisPdfGenerator:
    def generate(self, analysis: "AnalysisRecord", document: Optional["DocumentRecord"] = None) -> bytes:
        """Render the analysis report; returns the PDF bytes."""
        return self.render(self.build_lines(analysis, document))

    def build_lines(self, analysis: "AnalysisRecord", document: Optional["DocumentRecord"] = None) -> list[str]:
        result = analysis.result.to_dict() if analysis.result else {}

        lines = ["PMS Analysis Report", "==================="]
        lines.append(_label("Document", document.original_name if document else "Unknown"))
        lines.append(_label("Analysis ID", analysis.id))
        lines.append(_label("Status", analysis.status.value))
        lines.append(_label("Prompt version", analysis.prompt_version))
        lines.append(_label("Model", analysis.model))
        lines.append(_label("Started", _timestamp(analysis.started_at)))
        lines.append(_label("Completed", _timestamp(analysis.completed_at)))
        lines.append(_label("Progress", f"{analysis.progress}%"))
        lines.append("")

        lines += _heading("Capability snapshot")
        if result.get("pms_name"):
            lines.append(_label("PMS", result["pms_name"]))
        lines.append(_label("Get Reservations", _yes_no(result.get("has_get_reservations_endpoint"))))
        lines.append(_label("Webhook support", _yes_no(result.get("supports_webhooks"))))
        lines.append(_label("Credentials mentioned", _yes_no(result.get("credentials_available"))))
        if result.get("credential_types"):
            lines.append(_label("Credential types", ", ".join(result["credential_types"])))
        lines.append("")

        lines += self._filter_lines(result)
        lines.append("")
        available_count = analysis.result.available_field_count if analysis.result else 0
        lines += self._field_lines(result, available_count)
        lines.append("")

        lines += _heading("Reservation statuses")
        statuses = result.get("reservation_statuses") or []
        lines.append(", ".join(statuses) if statuses else "None detected.")
        lines.append("")

        lines += _heading("Credentials detected")
        if analysis.credentials:
            for credential in analysis.credentials:
                lines.append(f"- {credential.label} ({_percent(credential.confidence)}): {credential.value}")
                if credential.source_line:
                    lines.append(f"  Source: {credential.source_line}")
        else:
            lines.append("None detected.")
        lines.append("")

        lines += _heading("Notes")
        notes = result.get("notes") or []
        lines += [f"- {note}" for note in notes] if notes else ["None."]

        return self.wrap(lines)

    def _filter_lines(self, result: dict[str, Any]) -> list[str]:
        title = "Key filters"
        endpoint = ", ".join(
            result.get("get_reservations_endpoints")
            or result.get("get_reservations_endpoint_names")
            or []
        )
        if endpoint:
            title += f" - {endpoint}"
        lines = _heading(title)

        filters = result.get("get_reservations_filters") or {}
        if not filters:
            lines.append("No filters detected.")
        else:
            widths: list[Optional[int]] = [20, 10, 12, None]
            lines.append(_columns(["Filter", "Status", "Confidence", "Doc filter name(s)"], widths))
            lines.append(RULE)
            for key, info in filters.items():
                lines.append(_columns([
                    key,
                    "available" if info.get("available") else "missing",
                    _percent(info.get("confidence")),
                    ", ".join(info.get("source_fields") or []) or "-",
                ], widths))

        available = result.get("get_reservations_available_filters") or []
        if available:
            lines += ["", "All filters: " + ", ".join(available)]
        return lines

    def _field_lines(self, result: dict[str, Any], available_count: int) -> list[str]:
        lines = _heading("Field coverage")
        fields = result.get("fields") or {}
        if not fields:
            return lines + ["- No fields detected."]

        widths: list[Optional[int]] = [22, 10, 12, None]
        lines.append(_columns(["Field", "Status", "Confidence", "Source fields"], widths))
        lines.append(RULE)
        for key, info in fields.items():
            lines.append(_columns([
                key,
                "available" if info.get("available") else "missing",
                _percent(info.get("confidence")),
                ", ".join(info.get("source_fields") or []) or "-",
            ], widths))
        lines += ["", _label("Available fields", f"{available_count} / {len(fields)}")]
        return lines

    @staticmethod
    def wrap(lines: list[str]) -> list[str]:
        """ASCII-sanitize and hard-wrap lines at MAX_WIDTH columns."""
        wrapped: list[str] = []
        for line in lines:
            line = _NON_PRINTABLE.sub("", line).strip()
            if not line:
                wrapped.append("")
                continue
            wrapped += textwrap.wrap(line, MAX_WIDTH, break_long_words=True) or [""]
        return wrapped

    @staticmethod
    def render(lines: list[str]) -> bytes:
        pages = [lines[i : i + LINES_PER_PAGE] for i in range(0, len(lines), LINES_PER_PAGE)]
        if not pages:
            pages = [["No content"]]

        doc = fitz.open()
        try:
            for page_lines in pages:
                page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
                y = MARGIN
                for line in page_lines:
                    if line:
                        page.insert_text((MARGIN, y), line, fontsize=FONT_SIZE, fontname="helv")
                    y += LEADING
            return doc.tobytes()
        finally:
            doc.close()
