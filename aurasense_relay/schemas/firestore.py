"""
Firestore REST field values and the per-user display document.
Each value type knows its wire wrapper (stringValue, doubleValue, timestampValue, mapValue).
"""

from datetime import datetime, timezone
from typing import Any, Union

from pydantic import BaseModel


def format_timestamp(dt: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and Z suffix, e.g. 2026-10-17T08:30:00.000Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class StringValue(BaseModel):
    value: str

    def to_wire(self) -> dict[str, Any]:
        return {"stringValue": self.value}


class DoubleValue(BaseModel):
    value: Any  # sensor values are forwarded as received

    def to_wire(self) -> dict[str, Any]:
        return {"doubleValue": self.value}


class TimestampValue(BaseModel):
    value: datetime

    def to_wire(self) -> dict[str, Any]:
        return {"timestampValue": format_timestamp(self.value)}


class MapValue(BaseModel):
    fields: dict[str, "FieldValue"]

    def to_wire(self) -> dict[str, Any]:
        return {"mapValue": {"fields": encode_fields(self.fields)}}


FieldValue = Union[StringValue, DoubleValue, TimestampValue, MapValue]
MapValue.model_rebuild()


def encode_fields(fields: dict[str, FieldValue]) -> dict[str, Any]:
    return {name: value.to_wire() for name, value in fields.items()}


class DisplayDocument(BaseModel):
    """Latest prediction shown to the user; overwritten on every reading."""

    user_id: str
    stress_level: str
    hr: Any
    timestamp: datetime
    probabilities: dict[str, Any] | None = None

    def to_fields(self) -> dict[str, FieldValue]:
        fields: dict[str, FieldValue] = {
            "stress_level": StringValue(value=self.stress_level),
            "hr": DoubleValue(value=self.hr),
            "timestamp": TimestampValue(value=self.timestamp),
        }
        if self.probabilities is not None:
            fields["probabilities"] = MapValue(
                fields={label: DoubleValue(value=p) for label, p in self.probabilities.items()}
            )
        return fields


def encode_document(document: DisplayDocument) -> dict[str, Any]:
    """Request body for a Firestore PATCH: {"fields": {...}}."""
    return {"fields": encode_fields(document.to_fields())}
