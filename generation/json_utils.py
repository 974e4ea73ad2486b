"""JSON parsing helpers.

Models sometimes wrap JSON in prose or code fences even when asked for a
JSON object. These helpers recover the outermost object.
"""

from __future__ import annotations

import json
from typing import Any, Optional


def extract_json_span(text: str) -> Optional[str]:
    """Return the substring between the first "{" and the last "}".

    Returns None when no such span exists.
    """
    if not text:
        return None

    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end <= start:
        return None
    return text[start : end + 1]


def parse_json_object(text: str) -> Optional[dict[str, Any]]:
    """Parse a JSON object from a model response.

    Strategy:
    1) Try full parse.
    2) Parse the span between the first "{" and the last "}".
    3) Return None if neither yields an object.
    """
    try:
        data = json.loads(text)
        if isinstance(data, dict):
            return data
    except (TypeError, ValueError):
        pass

    span = extract_json_span(text)
    if span is None:
        return None
    try:
        data = json.loads(span)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None
