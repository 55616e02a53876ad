"""Base model and timestamp helpers shared by all incidentsync models.

Every document model inherits from :class:`SyncBaseModel` which provides:

* ``alias_generator=to_camel`` so the camelCase keys written by the mobile
  clients map to snake_case attributes.
* A ``model_validator(mode="before")`` that drops ``None`` values so the
  field default is used (the store encodes absent optionals as ``null``).
* Frozen instances: a local change always produces a new record.

Timestamps use :data:`UtcTimestamp`, which accepts ISO-8601 strings
(``Z`` suffix or offset), epoch seconds/milliseconds and ``datetime``
objects, and always yields an aware UTC ``datetime``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer, model_validator
from pydantic.alias_generators import to_camel

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def utcnow() -> datetime:
    """Current time as an aware UTC datetime truncated to milliseconds.

    Truncation keeps the local value equal to what survives a round trip
    through the wire format.
    """
    now = datetime.now(UTC)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def parse_timestamp(value: Any) -> Any:
    """Coerce wire timestamps to aware UTC datetimes.

    Unknown shapes are returned unchanged so pydantic reports the error.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = float(value)
        if ts >= _MS_THRESHOLD:
            ts /= 1000.0
        return datetime.fromtimestamp(ts, tz=UTC)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return value
        return parsed.replace(tzinfo=UTC) if parsed.tzinfo is None else parsed.astimezone(UTC)
    return value


def format_timestamp(value: datetime) -> str:
    """Render *value* the way JavaScript's ``Date.toISOString`` does."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


UtcTimestamp = Annotated[
    datetime,
    BeforeValidator(parse_timestamp),
    PlainSerializer(format_timestamp, return_type=str, when_used="json"),
]
"""Annotated type for aware UTC datetimes serialized as ``...sssZ`` strings."""


class SyncBaseModel(BaseModel):
    """Base for documents exchanged with the remote store."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        return {key: value for key, value in values.items() if value is not None}
