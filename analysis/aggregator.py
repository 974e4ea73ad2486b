"""
Result aggregator.

Folds normalized chunk results into a single capability report:

- booleans: logical OR (any positive evidence wins)
- string sets: union, trimmed and de-duplicated (statuses lowercased)
- pms_name: first non-empty value wins
- fields / filters, per fixed key: available OR, confidence MAX,
  source_fields union

Every rule is commutative and associative, so the result does not depend on
chunk order except for pms_name and the enumeration order of set members.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Union

from .normalizer import normalize_chunk, to_string_set
from .schema import (
    BOOLEAN_KEYS,
    FIELD_KEYS,
    FILTER_KEYS,
    STRING_SET_KEYS,
    CapabilityReport,
    FieldInfo,
)

ChunkInput = Union[CapabilityReport, Mapping[str, Any]]


def merge_strings(left: list[str], right: list[str], lowercase: bool = False) -> list[str]:
    return to_string_set([*left, *right], lowercase=lowercase)


def merge_info(left: FieldInfo, right: FieldInfo) -> FieldInfo:
    return FieldInfo(
        available=left.available or right.available,
        confidence=max(left.confidence, right.confidence),
        source_fields=merge_strings(left.source_fields, right.source_fields),
    )


def _merge_infos(
    left: dict[str, FieldInfo],
    right: dict[str, FieldInfo],
    keys: Iterable[str],
) -> dict[str, FieldInfo]:
    return {
        key: merge_info(left.get(key, FieldInfo()), right.get(key, FieldInfo()))
        for key in keys
    }


def merge(left: CapabilityReport, right: CapabilityReport) -> CapabilityReport:
    """Merge two reports; `left` takes precedence for pms_name."""
    values: dict[str, Any] = {
        key: getattr(left, key) or getattr(right, key) for key in BOOLEAN_KEYS
    }
    for key in STRING_SET_KEYS:
        values[key] = merge_strings(
            getattr(left, key),
            getattr(right, key),
            lowercase=key == "reservation_statuses",
        )
    values["pms_name"] = left.pms_name or right.pms_name
    values["fields"] = _merge_infos(left.fields, right.fields, FIELD_KEYS)
    values["get_reservations_filters"] = _merge_infos(
        left.get_reservations_filters, right.get_reservations_filters, FILTER_KEYS
    )
    return CapabilityReport(**values)


def aggregate(results: Iterable[ChunkInput]) -> CapabilityReport:
    """
    Fold chunk results into the final report.

    Args:
        results: Normalized chunk results. Raw mappings are normalized first.

    Returns:
        The aggregated CapabilityReport; schema defaults for empty input.
    """
    final = CapabilityReport()
    for item in results:
        if not isinstance(item, CapabilityReport):
            item = normalize_chunk(item)
        final = merge(final, item)
    return final


class ResultAggregator:
    """Object wrapper around aggregate for injection into the pipeline."""

    def aggregate(self, results: Iterable[ChunkInput]) -> CapabilityReport:
        return aggregate(results)
