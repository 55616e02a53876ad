from __future__ import annotations

import pytest

from incidentsync._api._codec import decode_document, decode_value, document_id, encode_fields, encode_value


def test_encode_scalars() -> None:
    assert encode_value(None) == {"nullValue": None}
    assert encode_value(True) == {"booleanValue": True}
    assert encode_value(7) == {"integerValue": "7"}
    assert encode_value(1.5) == {"doubleValue": 1.5}
    assert encode_value("open") == {"stringValue": "open"}


def test_encode_nested_incident_fields() -> None:
    encoded = encode_fields(
        {
            "location": {"latitude": 1.0, "longitude": 2.0},
            "followedBy": ["U1", "U2"],
            "photoUrl": None,
        }
    )
    assert encoded == {
        "location": {
            "mapValue": {"fields": {"latitude": {"doubleValue": 1.0}, "longitude": {"doubleValue": 2.0}}},
        },
        "followedBy": {"arrayValue": {"values": [{"stringValue": "U1"}, {"stringValue": "U2"}]}},
        "photoUrl": {"nullValue": None},
    }


def test_empty_follower_list_encodes_as_empty_array() -> None:
    assert encode_value([]) == {"arrayValue": {}}
    assert decode_value({"arrayValue": {}}) == []


def test_encode_rejects_unsupported_types() -> None:
    with pytest.raises(TypeError):
        encode_value(object())


def test_decode_handles_values_written_by_other_clients() -> None:
    assert decode_value({"integerValue": "42"}) == 42
    assert decode_value({"timestampValue": "2026-01-01T00:00:00Z"}) == "2026-01-01T00:00:00Z"
    assert decode_value({"geoPointValue": {"latitude": 1, "longitude": 2}}) == {"latitude": 1.0, "longitude": 2.0}
    assert decode_value({"mapValue": {}}) == {}


def test_decode_rejects_unknown_shapes() -> None:
    with pytest.raises(ValueError):
        decode_value({"weirdValue": 1})
    with pytest.raises(ValueError):
        decode_value({"stringValue": "a", "integerValue": "1"})


def test_decode_document_adds_id_from_resource_name() -> None:
    document = {
        "name": "projects/p/databases/(default)/documents/notifications/abc123",
        "fields": {"title": {"stringValue": "Pothole"}},
        "createTime": "2026-01-01T00:00:00Z",
    }
    assert decode_document(document) == {"title": "Pothole", "id": "abc123"}


def test_document_id_requires_a_segment() -> None:
    assert document_id("a/b/c") == "c"
    with pytest.raises(ValueError):
        document_id("")
