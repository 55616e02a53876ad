"""Tests for document models, timestamps and wire aliases."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from incidentsync.models import (
    CreateIncidentData,
    EmergencyAlert,
    Identity,
    IncidentPatch,
    IncidentRecord,
    IncidentStatus,
    Role,
    format_timestamp,
    parse_timestamp,
)

_WIRE_RECORD = {
    "id": "abc",
    "type": "fire",
    "title": "Smoke in hallway",
    "description": "Second floor",
    "location": {"latitude": 40.4, "longitude": -3.7, "address": "Main St 1"},
    "photoUrl": None,
    "status": "in_progress",
    "createdBy": "U1",
    "createdByName": "User One",
    "createdAt": "2026-01-05T08:30:00.000Z",
    "updatedAt": "2026-01-05T09:00:00.250Z",
    "followedBy": ["U1", "U2", "U1"],
}

# ------------------------------------------------------------------
# Timestamps
# ------------------------------------------------------------------


class TestTimestamps:
    def test_parse_iso_with_z_suffix(self) -> None:
        assert parse_timestamp("2026-01-05T08:30:00.000Z") == datetime(2026, 1, 5, 8, 30, tzinfo=UTC)

    def test_parse_offset_is_normalised_to_utc(self) -> None:
        parsed = parse_timestamp("2026-01-05T10:30:00+02:00")
        assert parsed == datetime(2026, 1, 5, 8, 30, tzinfo=UTC)
        assert parsed.tzinfo == UTC

    def test_parse_epoch_milliseconds(self) -> None:
        assert parse_timestamp(1_767_600_000_000) == datetime.fromtimestamp(1_767_600_000, tz=UTC)

    def test_naive_datetime_is_assumed_utc(self) -> None:
        assert parse_timestamp(datetime(2026, 1, 1)) == datetime(2026, 1, 1, tzinfo=UTC)

    def test_unparseable_string_is_left_for_validation(self) -> None:
        assert parse_timestamp("yesterday") == "yesterday"

    def test_format_matches_javascript_iso_string(self) -> None:
        value = datetime(2026, 1, 5, 10, 30, 0, 250_999, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(value) == "2026-01-05T08:30:00.250Z"


# ------------------------------------------------------------------
# IncidentRecord
# ------------------------------------------------------------------


class TestIncidentRecord:
    def test_parses_camel_case_wire_document(self) -> None:
        record = IncidentRecord.model_validate(_WIRE_RECORD)

        assert record.status == IncidentStatus.IN_PROGRESS
        assert record.created_by_name == "User One"
        assert record.location.address == "Main St 1"
        assert record.photo_url is None
        assert record.updated_at == datetime(2026, 1, 5, 9, 0, 0, 250_000, tzinfo=UTC)

    def test_follower_duplicates_are_dropped_keeping_first(self) -> None:
        record = IncidentRecord.model_validate(_WIRE_RECORD)
        assert record.followed_by == ("U1", "U2")
        assert record.is_followed_by("U2")
        assert not record.is_followed_by("U3")

    def test_json_dump_uses_wire_shape(self) -> None:
        record = IncidentRecord.model_validate(_WIRE_RECORD)
        fields = record.model_dump(by_alias=True, mode="json", exclude={"id"}, exclude_none=True)

        assert fields["createdAt"] == "2026-01-05T08:30:00.000Z"
        assert fields["followedBy"] == ["U1", "U2"]
        assert "photoUrl" not in fields
        assert "id" not in fields

    def test_records_are_frozen(self) -> None:
        record = IncidentRecord.model_validate(_WIRE_RECORD)
        with pytest.raises(ValidationError):
            record.title = "changed"  # type: ignore[misc]

    def test_unknown_status_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            IncidentRecord.model_validate({**_WIRE_RECORD, "status": "archived"})

    def test_latitude_out_of_range_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            IncidentRecord.model_validate({**_WIRE_RECORD, "location": {"latitude": 91, "longitude": 0}})


# ------------------------------------------------------------------
# Caller input models
# ------------------------------------------------------------------


class TestInputs:
    def test_create_data_accepts_either_naming(self) -> None:
        data = CreateIncidentData.model_validate(
            {"type": "road", "title": "Pothole", "location": {"latitude": 0, "longitude": 0}, "photoUrl": "x.jpg"}
        )
        assert data.photo_url == "x.jpg"

    def test_create_data_requires_title(self) -> None:
        with pytest.raises(ValidationError):
            CreateIncidentData.model_validate({"type": "road", "title": "", "location": {"latitude": 0, "longitude": 0}})

    def test_patch_changes_only_include_set_fields(self) -> None:
        patch = IncidentPatch(title="New", status=IncidentStatus.CLOSED)
        assert patch.changes() == {"title": "New", "status": IncidentStatus.CLOSED}

    def test_patch_none_clears_photo_but_not_status(self) -> None:
        patch = IncidentPatch.model_validate({"photo_url": None, "status": None})
        assert patch.changes() == {"photo_url": None}


# ------------------------------------------------------------------
# Identity / EmergencyAlert
# ------------------------------------------------------------------


def test_identity_role_from_wire() -> None:
    identity = Identity.model_validate(
        {"id": "A1", "email": "a@example.com", "fullName": "Admin", "department": "Ops", "role": "admin"}
    )
    assert identity.role == Role.ADMIN
    assert identity.is_admin
    assert identity.created_at.tzinfo is not None


def test_emergency_alert_from_wire() -> None:
    alert = EmergencyAlert.model_validate(
        {"id": "x", "title": "Flood", "message": "Move uphill", "createdAt": "2026-02-01T00:00:00Z", "createdBy": "A1"}
    )
    assert alert.created_at == datetime(2026, 2, 1, tzinfo=UTC)
    assert alert.model_dump(by_alias=True, mode="json", exclude={"id"}) == {
        "title": "Flood",
        "message": "Move uphill",
        "createdAt": "2026-02-01T00:00:00.000Z",
        "createdBy": "A1",
    }
