"""Data models for incident records, alerts and identities."""

from incidentsync.models._base import SyncBaseModel, UtcTimestamp, format_timestamp, parse_timestamp, utcnow
from incidentsync.models.alert import EmergencyAlert
from incidentsync.models.identity import Identity, Role
from incidentsync.models.incident import (
    CreateIncidentData,
    IncidentPatch,
    IncidentRecord,
    IncidentStatus,
    Location,
    unique_ids,
)

__all__ = [
    "CreateIncidentData",
    "EmergencyAlert",
    "Identity",
    "IncidentPatch",
    "IncidentRecord",
    "IncidentStatus",
    "Location",
    "Role",
    "SyncBaseModel",
    "UtcTimestamp",
    "format_timestamp",
    "parse_timestamp",
    "unique_ids",
    "utcnow",
]
