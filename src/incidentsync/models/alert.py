"""Emergency alert model."""

from __future__ import annotations

from pydantic import Field

from incidentsync.models._base import SyncBaseModel, UtcTimestamp


class EmergencyAlert(SyncBaseModel):
    """Broadcast message created by an admin.

    Alerts are immutable once created: there is no update or delete path.
    """

    id: str = Field(min_length=1)
    title: str
    message: str
    created_at: UtcTimestamp
    created_by: str
