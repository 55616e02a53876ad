from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from incidentsync.models import IncidentRecord, IncidentStatus
from incidentsync.optimistic import (
    PendingWrites,
    find_record,
    remove_from,
    replace_in,
    replace_record,
    toggled_followers,
    wire_patch,
)


def _record(incident_id: str, **overrides: object) -> IncidentRecord:
    values: dict[str, object] = {
        "id": incident_id,
        "type": "road",
        "title": "Pothole",
        "location": {"latitude": 0.0, "longitude": 0.0},
        "created_by": "U1",
        "created_at": datetime(2026, 1, 1, tzinfo=UTC),
        "updated_at": datetime(2026, 1, 1, tzinfo=UTC),
        "followed_by": ("U1",),
    }
    values.update(overrides)
    return IncidentRecord.model_validate(values)


def test_toggled_followers_adds_then_removes() -> None:
    added = toggled_followers(("U1",), "U2")
    assert added == ("U1", "U2")
    assert toggled_followers(added, "U2") == ("U1",)


def test_toggled_followers_uses_id_equality_and_collapses_duplicates() -> None:
    assert toggled_followers(["U1", "U1", "U3"], "U1") == ("U3",)


def test_creator_can_unfollow_own_record() -> None:
    assert toggled_followers(("U1",), "U1") == ()


def test_replace_record_revalidates_and_returns_new_instance() -> None:
    original = _record("i1")
    updated = replace_record(original, {"status": "closed"})

    assert updated is not original
    assert updated.status == IncidentStatus.CLOSED
    assert original.status == IncidentStatus.OPEN

    with pytest.raises(ValidationError):
        replace_record(original, {"status": "bogus"})


def test_replace_in_and_remove_from_keep_order() -> None:
    records = [_record("a"), _record("b"), _record("c")]
    updated = replace_record(records[1], {"title": "B!"})

    replaced = replace_in(records, updated)
    assert [r.id for r in replaced] == ["a", "b", "c"]
    assert replaced[1].title == "B!"
    assert records[1].title == "Pothole"

    assert [r.id for r in remove_from(records, "b")] == ["a", "c"]
    assert find_record(records, "c") is records[2]
    assert find_record(records, "zzz") is None


def test_wire_patch_uses_camel_case_and_keeps_nulls() -> None:
    record = _record("i1", photo_url=None, status="resolved")
    assert wire_patch(record, ["status", "photo_url", "updated_at"]) == {
        "status": "resolved",
        "photoUrl": None,
        "updatedAt": "2026-01-01T00:00:00.000Z",
    }


def test_pending_writes_counts_overlapping_writes() -> None:
    pending = PendingWrites()

    with pending.track("i1"):
        with pending.track("i1"):
            assert pending.is_pending("i1")
        assert pending.is_pending("i1")
        assert not pending.is_pending("i2")
    assert not pending.is_pending("i1")


def test_pending_writes_cleared_on_error() -> None:
    pending = PendingWrites()

    with pytest.raises(RuntimeError), pending.track("i1"):
        raise RuntimeError("boom")
    assert not pending.is_pending("i1")
