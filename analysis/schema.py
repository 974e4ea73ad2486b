"""
Canonical capability schema.

Every per-chunk model output is coerced into CapabilityReport before any
merge logic runs, and the aggregated report has exactly the same shape.
All keys are always present; fixed field and filter keys are always
populated, defaulting to "not available".
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

FIELD_KEYS: tuple[str, ...] = (
    "checkout_date",
    "check_in_date",
    "first_name",
    "last_name",
    "country",
    "mobile_phone",
    "email",
    "reservation_status",
    "property_name",
    "special_package",
)

FILTER_KEYS: tuple[str, ...] = (
    "check_in_date",
    "check_out_date",
    "status",
)

BOOLEAN_KEYS: tuple[str, ...] = (
    "has_get_reservations_endpoint",
    "supports_webhooks",
    "credentials_available",
)

STRING_SET_KEYS: tuple[str, ...] = (
    "get_reservations_endpoint_names",
    "get_reservations_endpoints",
    "credential_types",
    "get_reservations_available_filters",
    "reservation_statuses",
    "notes",
)


def clamp_confidence(value: Any) -> float:
    """Coerce to a float in [0, 1]; anything non-numeric becomes 0.0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            confidence = float(value)
        except OverflowError:
            # Integers beyond float range
            return 1.0 if value > 0 else 0.0
    elif isinstance(value, str):
        try:
            confidence = float(value.strip())
        except (ValueError, OverflowError):
            return 0.0
    else:
        return 0.0

    if math.isnan(confidence) or confidence < 0:
        return 0.0
    if confidence > 1:
        return 1.0
    return confidence


class FieldInfo(BaseModel):
    """
    Availability of one reservation field or filter.

    Used for both `fields` and `get_reservations_filters` entries.
    """
    model_config = ConfigDict(frozen=True)

    available: bool = False
    source_fields: list[str] = Field(default_factory=list)
    confidence: float = 0.0

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp(cls, value: Any) -> float:
        return clamp_confidence(value)


FilterInfo = FieldInfo


def default_fields() -> dict[str, FieldInfo]:
    return {key: FieldInfo() for key in FIELD_KEYS}


def default_filters() -> dict[str, FieldInfo]:
    return {key: FieldInfo() for key in FILTER_KEYS}


class CapabilityReport(BaseModel):
    """
    What a PMS API supports for reservation retrieval.

    Serves as both the normalized result of one chunk and the aggregated
    result of a whole analysis run.
    """
    model_config = ConfigDict(frozen=True)

    has_get_reservations_endpoint: bool = False
    pms_name: str = ""
    get_reservations_endpoint_names: list[str] = Field(default_factory=list)
    get_reservations_endpoints: list[str] = Field(default_factory=list)
    supports_webhooks: bool = False
    credentials_available: bool = False
    credential_types: list[str] = Field(default_factory=list)
    get_reservations_filters: dict[str, FieldInfo] = Field(default_factory=default_filters)
    get_reservations_available_filters: list[str] = Field(default_factory=list)
    fields: dict[str, FieldInfo] = Field(default_factory=default_fields)
    reservation_statuses: list[str] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @property
    def available_field_count(self) -> int:
        return sum(1 for info in self.fields.values() if info.available)


NormalizedChunkResult = CapabilityReport
AggregatedResult = CapabilityReport
