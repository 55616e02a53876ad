"""Incident record collection endpoints.

Operations:
  - list    GET    .../documents/{incidents}
  - create  POST   .../documents/{incidents}
  - patch   PATCH  .../documents/{incidents}/{id}
  - delete  DELETE .../documents/{incidents}/{id}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from incidentsync._api._common import create_document, delete_document, list_documents, patch_document
from incidentsync._transport import Transport
from incidentsync.config import SyncConfig
from incidentsync.models.incident import IncidentRecord


async def list_incidents(config: SyncConfig, transport: Transport) -> list[IncidentRecord]:
    """Fetch all incident records, newest first."""
    return await list_documents(
        config,
        transport,
        config.incidents_collection,
        IncidentRecord.model_validate,
        operation="list_incidents",
    )


async def create_incident(config: SyncConfig, transport: Transport, fields: Mapping[str, Any]) -> str:
    """Store a new incident record; returns the assigned id."""
    return await create_document(
        config,
        transport,
        config.incidents_collection,
        fields,
        operation="create_incident",
    )


async def patch_incident(
    config: SyncConfig,
    transport: Transport,
    incident_id: str,
    fields: Mapping[str, Any],
) -> None:
    await patch_document(
        config,
        transport,
        config.incidents_collection,
        incident_id,
        fields,
        operation="patch_incident",
    )


async def delete_incident(config: SyncConfig, transport: Transport, incident_id: str) -> None:
    await delete_document(
        config,
        transport,
        config.incidents_collection,
        incident_id,
        operation="delete_incident",
    )
