"""Emergency alert collection endpoints.

Alerts are append-only: only list and create are exposed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from incidentsync._api._common import create_document, list_documents
from incidentsync._transport import Transport
from incidentsync.config import SyncConfig
from incidentsync.models.alert import EmergencyAlert


async def list_alerts(config: SyncConfig, transport: Transport) -> list[EmergencyAlert]:
    """Fetch all emergency alerts, newest first."""
    return await list_documents(
        config,
        transport,
        config.alerts_collection,
        EmergencyAlert.model_validate,
        operation="list_alerts",
    )


async def create_alert(config: SyncConfig, transport: Transport, fields: Mapping[str, Any]) -> str:
    return await create_document(
        config,
        transport,
        config.alerts_collection,
        fields,
        operation="create_alert",
    )
