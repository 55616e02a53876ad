"""Remote store adapter: the durable copy of incidents and alerts."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

import aiohttp

from incidentsync._api import alerts as _alerts_api
from incidentsync._api import incidents as _incidents_api
from incidentsync._transport import HttpTransport, TokenProvider
from incidentsync.config import SyncConfig
from incidentsync.exceptions import IncidentSyncError
from incidentsync.models.alert import EmergencyAlert
from incidentsync.models.incident import IncidentRecord

_logger = logging.getLogger(__name__)


@runtime_checkable
class RemoteStore(Protocol):
    """Async document operations the cache relies on.

    ``fields`` arguments are camelCase wire dicts. Every method raises
    :class:`incidentsync.exceptions.RemoteError` on failure.
    """

    async def list_incidents(self) -> list[IncidentRecord]: ...

    async def list_alerts(self) -> list[EmergencyAlert]: ...

    async def create_incident(self, fields: Mapping[str, Any]) -> str: ...

    async def patch_incident(self, incident_id: str, fields: Mapping[str, Any]) -> None: ...

    async def delete_incident(self, incident_id: str) -> None: ...

    async def create_alert(self, fields: Mapping[str, Any]) -> str: ...


class FirestoreRemoteStore:
    """:class:`RemoteStore` backed by the Firestore REST v1 document API.

    Usage::

        async with FirestoreRemoteStore(config, token_provider=sessions.get_id_token) as store:
            incidents = await store.list_incidents()
    """

    def __init__(
        self,
        config: SyncConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        token_provider: TokenProvider | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._token_provider = token_provider
        self._transport: HttpTransport | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FirestoreRemoteStore:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(
            self._config,
            self._http_session,
            token_provider=self._token_provider,
        )
        _logger.debug("Remote store opened for project=%s", self._config.project_id)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise IncidentSyncError("Store not initialized. Use 'async with FirestoreRemoteStore(...) as store:'")
        return self._transport

    # ------------------------------------------------------------------
    # Incident records
    # ------------------------------------------------------------------

    async def list_incidents(self) -> list[IncidentRecord]:
        return await _incidents_api.list_incidents(self._config, self._require_transport())

    async def create_incident(self, fields: Mapping[str, Any]) -> str:
        return await _incidents_api.create_incident(self._config, self._require_transport(), fields)

    async def patch_incident(self, incident_id: str, fields: Mapping[str, Any]) -> None:
        await _incidents_api.patch_incident(self._config, self._require_transport(), incident_id, fields)

    async def delete_incident(self, incident_id: str) -> None:
        await _incidents_api.delete_incident(self._config, self._require_transport(), incident_id)

    # ------------------------------------------------------------------
    # Emergency alerts
    # ------------------------------------------------------------------

    async def list_alerts(self) -> list[EmergencyAlert]:
        return await _alerts_api.list_alerts(self._config, self._require_transport())

    async def create_alert(self, fields: Mapping[str, Any]) -> str:
        return await _alerts_api.create_alert(self._config, self._require_transport(), fields)
