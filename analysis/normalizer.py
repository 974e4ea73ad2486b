"""
Chunk normalizer.

The model's JSON has no enforced contract, so normalization is a total
function: every missing or malformed value silently falls back to its
default, and partial completions still contribute whatever signal they
carry.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .schema import (
    BOOLEAN_KEYS,
    FIELD_KEYS,
    FILTER_KEYS,
    STRING_SET_KEYS,
    CapabilityReport,
    FieldInfo,
    clamp_confidence,
)

_TRUE_STRINGS = frozenset({"true", "yes", "y", "1", "on"})


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def to_string_set(value: Any, lowercase: bool = False) -> list[str]:
    """Trim, drop empties and de-duplicate while keeping first-seen order."""
    if value is None:
        return []
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        items: Iterable[Any] = [value]
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        return []

    result: list[str] = []
    seen: set[str] = set()
    for item in items:
        if isinstance(item, bool) or not isinstance(item, (str, int, float)):
            continue
        text = str(item).strip()
        if lowercase:
            text = text.lower()
        if text and text not in seen:
            seen.add(text)
            result.append(text)
    return result


def normalize_info(value: Any) -> FieldInfo:
    if not isinstance(value, Mapping):
        return FieldInfo()
    return FieldInfo(
        available=to_bool(value.get("available", False)),
        source_fields=to_string_set(value.get("source_fields", [])),
        confidence=clamp_confidence(value.get("confidence", 0.0)),
    )


def _normalize_infos(value: Any, keys: Iterable[str]) -> dict[str, FieldInfo]:
    mapping = value if isinstance(value, Mapping) else {}
    return {key: normalize_info(mapping.get(key)) for key in keys}


def normalize_chunk(raw: Any) -> CapabilityReport:
    """
    Coerce one chunk's raw extraction output into the canonical schema.

    Args:
        raw: Untyped mapping returned by the language model. Anything that
            is not a mapping yields the schema defaults.

    Returns:
        A fully populated CapabilityReport. Never raises.
    """
    data = raw if isinstance(raw, Mapping) else {}

    values: dict[str, Any] = {key: to_bool(data.get(key, False)) for key in BOOLEAN_KEYS}
    for key in STRING_SET_KEYS:
        values[key] = to_string_set(
            data.get(key, []),
            lowercase=key == "reservation_statuses",
        )

    pms_name = data.get("pms_name", "")
    values["pms_name"] = pms_name.strip() if isinstance(pms_name, str) else ""
    values["fields"] = _normalize_infos(data.get("fields"), FIELD_KEYS)
    values["get_reservations_filters"] = _normalize_infos(
        data.get("get_reservations_filters"), FILTER_KEYS
    )

    return CapabilityReport(**values)


class ChunkNormalizer:
    """Object wrapper around normalize_chunk for injection into the pipeline."""

    def normalize(self, raw: Any) -> CapabilityReport:
        return normalize_chunk(raw)
