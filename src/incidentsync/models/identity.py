"""Signed-in identity model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from incidentsync.models._base import SyncBaseModel, UtcTimestamp, utcnow


class Role(StrEnum):
    USER = "user"
    ADMIN = "admin"


class Identity(SyncBaseModel):
    """Profile of the identity currently signed in.

    Owned by the session provider; the cache only reads it.
    """

    id: str = Field(min_length=1)
    email: str = ""
    full_name: str = ""
    department: str = ""
    role: Role = Role.USER
    created_at: UtcTimestamp = Field(default_factory=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
