"""Typed-value codec for the document REST API.

The API wraps every field value in a single-key object naming its type,
e.g. ``{"stringValue": "open"}`` or ``{"arrayValue": {"values": [...]}}``.
Encoding works on JSON-compatible Python values, i.e. the camelCase wire
dicts the cache builds with ``model_dump(by_alias=True, mode="json")``.
Decoding yields plain Python values suitable for ``model_validate``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any


def encode_value(value: Any) -> dict[str, Any]:
    """Wrap a JSON-compatible Python value in its typed representation."""
    if value is None:
        return {"nullValue": None}
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return {"doubleValue": str(value)}
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, Mapping):
        return {"mapValue": {"fields": encode_fields(value)}}
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        if not value:
            return {"arrayValue": {}}
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    raise TypeError(f"cannot encode {type(value).__name__} as a document value")


def encode_fields(fields: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    return {str(key): encode_value(value) for key, value in fields.items()}


def decode_value(typed: Mapping[str, Any]) -> Any:
    """Unwrap a typed value. Raises ``ValueError`` for unknown shapes."""
    if len(typed) != 1:
        raise ValueError(f"typed value must have exactly one key, got {sorted(typed)}")
    kind, raw = next(iter(typed.items()))

    if kind == "nullValue":
        return None
    if kind == "booleanValue":
        return bool(raw)
    if kind == "integerValue":
        return int(raw)
    if kind == "doubleValue":
        return float(raw)
    if kind in ("stringValue", "timestampValue", "referenceValue", "bytesValue"):
        return str(raw)
    if kind == "geoPointValue":
        return {
            "latitude": float(raw.get("latitude", 0.0)),
            "longitude": float(raw.get("longitude", 0.0)),
        }
    if kind == "arrayValue":
        return [decode_value(v) for v in (raw or {}).get("values", [])]
    if kind == "mapValue":
        return decode_fields((raw or {}).get("fields", {}))
    raise ValueError(f"unsupported value type {kind!r}")


def decode_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key): decode_value(value) for key, value in fields.items()}


def document_id(name: str) -> str:
    """Return the document id, i.e. the last segment of a resource name."""
    doc_id = name.rstrip("/").rsplit("/", 1)[-1]
    if not doc_id:
        raise ValueError(f"resource name has no document id: {name!r}")
    return doc_id


def decode_document(document: Mapping[str, Any]) -> dict[str, Any]:
    """Decode a document resource into its fields plus ``id``."""
    name = document.get("name")
    if not isinstance(name, str):
        raise ValueError("document has no resource name")
    data = decode_fields(document.get("fields", {}))
    data["id"] = document_id(name)
    return data
