"""Incident record models."""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from incidentsync.models._base import SyncBaseModel, UtcTimestamp


class IncidentStatus(StrEnum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


_CLEARABLE_FIELDS: frozenset[str] = frozenset({"photo_url"})


def unique_ids(values: Iterable[str]) -> tuple[str, ...]:
    """Drop duplicate ids, keeping the first occurrence of each."""
    return tuple(dict.fromkeys(values))


class Location(SyncBaseModel):
    """Where an incident was reported."""

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    address: str | None = None


class IncidentRecord(SyncBaseModel):
    """A reported incident as held by the cache and the remote store.

    ``followed_by`` has set semantics: membership is unique, order carries
    no meaning beyond being preserved for display.
    """

    id: str = Field(min_length=1)
    type: str
    title: str
    description: str = ""
    location: Location
    photo_url: str | None = None
    status: IncidentStatus = IncidentStatus.OPEN
    created_by: str
    created_by_name: str = ""
    created_at: UtcTimestamp
    updated_at: UtcTimestamp
    followed_by: tuple[str, ...] = ()

    @field_validator("followed_by", mode="before")
    @classmethod
    def _dedupe_followers(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple, set, frozenset)):
            return unique_ids(str(v) for v in value)
        return value

    def is_followed_by(self, identity_id: str) -> bool:
        return identity_id in self.followed_by


class CreateIncidentData(BaseModel):
    """Caller-supplied fields for a new incident.

    Status, authorship, timestamps and the follower set are assigned by
    :meth:`incidentsync.cache.NotificationCache.create_incident`.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, alias_generator=to_camel)

    type: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = ""
    location: Location
    photo_url: str | None = None


class IncidentPatch(BaseModel):
    """Subset of user-editable incident fields for ``update_fields``.

    Only explicitly set keys are applied; setting ``photo_url=None`` clears
    the photo.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, alias_generator=to_camel)

    type: str | None = Field(default=None, min_length=1)
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    location: Location | None = None
    photo_url: str | None = None
    status: IncidentStatus | None = None

    def changes(self) -> dict[str, Any]:
        """Explicitly set fields, keyed by attribute name.

        ``photo_url`` is the only field an explicit ``None`` clears; for the
        others ``None`` means "leave unchanged".
        """
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in _CLEARABLE_FIELDS
        }
