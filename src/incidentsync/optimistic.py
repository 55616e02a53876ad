"""Optimistic mutation helpers.

Everything here is synchronous and side-effect free apart from
:class:`PendingWrites`: the cache computes the next local value from its
current snapshot with these helpers, applies it, and only then awaits the
remote write. There is no revert path: a failed write leaves
the optimistic value in place until the next refresh.
"""

from __future__ import annotations

import contextlib
from collections import Counter
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

from incidentsync.models.incident import IncidentRecord, unique_ids


def find_record(records: Sequence[IncidentRecord], incident_id: str) -> IncidentRecord | None:
    return next((record for record in records if record.id == incident_id), None)


def replace_record(record: IncidentRecord, changes: Mapping[str, Any]) -> IncidentRecord:
    """Return a fully re-validated copy of *record* with *changes* applied.

    The result is a new record; callers swap it in whole so no reader ever
    observes a partially updated document.
    """
    return IncidentRecord.model_validate({**record.model_dump(), **changes})


def replace_in(records: Iterable[IncidentRecord], updated: IncidentRecord) -> list[IncidentRecord]:
    """Swap the record sharing *updated*'s id, keeping sequence order."""
    return [updated if record.id == updated.id else record for record in records]


def remove_from(records: Iterable[IncidentRecord], incident_id: str) -> list[IncidentRecord]:
    return [record for record in records if record.id != incident_id]


def toggled_followers(followers: Iterable[str], identity_id: str) -> tuple[str, ...]:
    """Add *identity_id* to the follower set, or remove it if present.

    Applying it twice with the same id restores the original membership.
    """
    current = unique_ids(followers)
    if identity_id in current:
        return tuple(follower for follower in current if follower != identity_id)
    return (*current, identity_id)


def wire_patch(record: IncidentRecord, attributes: Iterable[str]) -> dict[str, Any]:
    """CamelCase wire values of the named attributes of *record*.

    ``None`` is kept so a cleared optional field is written as null.
    """
    return record.model_dump(by_alias=True, mode="json", include=set(attributes))


class PendingWrites:
    """In-flight remote write count per record id.

    A record with a non-zero count is in the ``pending-write`` state; it
    returns to ``synced`` when its last write completes, whatever the
    outcome.
    """

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()

    def is_pending(self, incident_id: str) -> bool:
        return self._counts[incident_id] > 0

    @contextlib.contextmanager
    def track(self, incident_id: str) -> Iterator[None]:
        self._counts[incident_id] += 1
        try:
            yield
        finally:
            self._counts[incident_id] -= 1
            if self._counts[incident_id] <= 0:
                del self._counts[incident_id]
