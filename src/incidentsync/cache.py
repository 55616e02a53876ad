"""In-memory cache of incident records and emergency alerts.

The cache holds the canonical local copy, newest first, and keeps it in
step with a :class:`~incidentsync.remote.RemoteStore`:

* reads are served from memory only;
* updates, deletes and follow toggles are applied locally first and then
  written remotely (see :mod:`incidentsync.optimistic`);
* creates are written remotely first, since the id is assigned there;
* :meth:`NotificationCache.refresh` replaces both sequences with
  authoritative state and is the reconciliation step after a failed
  follow toggle.

Known limitation: :meth:`NotificationCache.toggle_follow` writes the whole
recomputed follower list. Two toggles by different identities racing on the
same record can lose one of the updates remotely; only failures are
reconciled.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from incidentsync.authz import require_admin, require_identity
from incidentsync.exceptions import RemoteError
from incidentsync.models._base import format_timestamp, utcnow
from incidentsync.models.alert import EmergencyAlert
from incidentsync.models.identity import Identity
from incidentsync.models.incident import CreateIncidentData, IncidentPatch, IncidentRecord, IncidentStatus
from incidentsync.optimistic import (
    PendingWrites,
    find_record,
    remove_from,
    replace_in,
    replace_record,
    toggled_followers,
    wire_patch,
)
from incidentsync.remote import RemoteStore
from incidentsync.session import SessionProvider

_logger = logging.getLogger(__name__)

ChangeListener = Callable[[], None]


class NotificationCache:
    """Local incident/alert state kept consistent with the remote store.

    Usage::

        async with NotificationCache(store, sessions) as cache:
            record = await cache.create_incident(data)
            await cache.toggle_follow(record.id)

    Entering the context subscribes to *sessions* and performs the initial
    :meth:`refresh`; leaving it unsubscribes and drops local state.
    """

    def __init__(
        self,
        store: RemoteStore,
        sessions: SessionProvider,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._sessions = sessions
        self._clock = clock
        self._incidents: list[IncidentRecord] = []
        self._alerts: list[EmergencyAlert] = []
        self._refreshing = 0
        self._identity: Identity | None = sessions.current_identity
        self._unsubscribe: Callable[[], None] | None = None
        self._listeners: list[ChangeListener] = []
        self._pending = PendingWrites()
        # Bumped by close(); results of calls issued before it are dropped.
        self._generation = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> NotificationCache:
        await self.open()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.close()

    async def open(self) -> None:
        """Subscribe to session changes and load both collections."""
        if self._unsubscribe is None:
            self._identity = self._sessions.current_identity
            self._unsubscribe = self._sessions.subscribe(self._on_identity_changed)
        await self.refresh()

    def close(self) -> None:
        """Unsubscribe and drop local state.

        Calls still awaiting the store when the cache closes leave it
        untouched when they complete.
        """
        self._generation += 1
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._incidents = []
        self._alerts = []
        self._identity = None

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def loading(self) -> bool:
        return self._refreshing > 0

    @property
    def incidents(self) -> tuple[IncidentRecord, ...]:
        return tuple(self._incidents)

    @property
    def alerts(self) -> tuple[EmergencyAlert, ...]:
        return tuple(self._alerts)

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def followed(self) -> list[IncidentRecord]:
        """Records followed by the active identity."""
        return self.get_followed_by(self._identity)

    def get_by_id(self, incident_id: str) -> IncidentRecord | None:
        return find_record(self._incidents, incident_id)

    def get_followed_by(self, identity: Identity | None) -> list[IncidentRecord]:
        if identity is None:
            return []
        return [record for record in self._incidents if record.is_followed_by(identity.id)]

    def is_pending(self, incident_id: str) -> bool:
        """Whether a remote write for *incident_id* is still in flight."""
        return self._pending.is_pending(incident_id)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Call *listener* after every local state change."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                _logger.exception("Cache listener failed")

    def _on_identity_changed(self, identity: Identity | None) -> None:
        self._identity = identity
        self._notify()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def refresh(self) -> None:
        """Replace both sequences with the remote store's current contents.

        On :class:`RemoteError` the previous state is kept as a whole.
        """
        generation = self._generation
        self._refreshing += 1
        self._notify()
        try:
            results = await asyncio.gather(
                self._store.list_incidents(),
                self._store.list_alerts(),
                return_exceptions=True,
            )
            errors = [result for result in results if isinstance(result, BaseException)]
            for error in errors:
                if not isinstance(error, RemoteError):
                    raise error
            if errors:
                _logger.warning("Failed to fetch notifications or alerts", exc_info=errors[0])
                return
            if generation != self._generation:
                _logger.debug("Cache closed during refresh, discarding results")
                return
            incidents, alerts = results
            self._incidents = list(incidents)  # type: ignore[arg-type]
            self._alerts = list(alerts)  # type: ignore[arg-type]
            _logger.debug("Refreshed %d incidents, %d alerts", len(self._incidents), len(self._alerts))
        finally:
            self._refreshing -= 1
            self._notify()

    # ------------------------------------------------------------------
    # Creates (remote first, then prepend)
    # ------------------------------------------------------------------

    async def create_incident(self, data: CreateIncidentData | Mapping[str, Any]) -> IncidentRecord:
        """Report a new incident as the active identity.

        Raises
        ------
        NotAuthenticatedError
            No identity is signed in. Nothing is written.
        RemoteError
            The store rejected the write. Local state is unchanged.
        """
        identity = require_identity(self._identity)
        if not isinstance(data, CreateIncidentData):
            data = CreateIncidentData.model_validate(data)

        timestamp = format_timestamp(self._clock())
        fields: dict[str, Any] = {
            **data.model_dump(by_alias=True, mode="json", exclude_none=True),
            "status": IncidentStatus.OPEN.value,
            "createdBy": identity.id,
            "createdByName": identity.full_name,
            "createdAt": timestamp,
            "updatedAt": timestamp,
            "followedBy": [identity.id],
        }

        generation = self._generation
        try:
            incident_id = await self._store.create_incident(fields)
        except RemoteError:
            _logger.warning("Failed to create notification", exc_info=True)
            raise

        record = IncidentRecord.model_validate({**fields, "id": incident_id})
        if generation == self._generation:
            self._incidents = [record, *self._incidents]
            self._notify()
        return record

    async def create_emergency_alert(self, title: str, message: str) -> EmergencyAlert:
        """Broadcast an emergency alert. Admins only.

        Raises
        ------
        NotAuthorizedError
            No identity, or the identity is not an admin. Nothing is written.
        RemoteError
            The store rejected the write. Local state is unchanged.
        """
        identity = require_admin(self._identity)
        fields: dict[str, Any] = {
            "title": title,
            "message": message,
            "createdAt": format_timestamp(self._clock()),
            "createdBy": identity.id,
        }

        generation = self._generation
        try:
            alert_id = await self._store.create_alert(fields)
        except RemoteError:
            _logger.warning("Failed to create emergency alert", exc_info=True)
            raise

        alert = EmergencyAlert.model_validate({**fields, "id": alert_id})
        if generation == self._generation:
            self._alerts = [alert, *self._alerts]
            self._notify()
        return alert

    # ------------------------------------------------------------------
    # Optimistic mutations
    # ------------------------------------------------------------------

    def _apply(self, updated: IncidentRecord) -> None:
        self._incidents = replace_in(self._incidents, updated)
        self._notify()

    async def _update(self, incident_id: str, changes: Mapping[str, Any], *, operation: str) -> IncidentRecord | None:
        current = self.get_by_id(incident_id)
        if current is None:
            _logger.debug("%s: incident %s not cached, ignoring", operation, incident_id)
            return None

        # Compute and apply before the first await so concurrent callers
        # always build on the latest local snapshot.
        updated = replace_record(current, {**changes, "updated_at": self._clock()})
        self._apply(updated)

        with self._pending.track(incident_id):
            try:
                await self._store.patch_incident(incident_id, wire_patch(updated, [*changes, "updated_at"]))
            except RemoteError:
                _logger.warning("Failed to %s for incident %s", operation, incident_id, exc_info=True)
                raise
        return updated

    async def update_status(self, incident_id: str, status: IncidentStatus | str) -> IncidentRecord | None:
        """Set an incident's status; the local change is kept if the write fails."""
        return await self._update(incident_id, {"status": IncidentStatus(status)}, operation="update status")

    async def update_fields(
        self,
        incident_id: str,
        patch: IncidentPatch | Mapping[str, Any],
    ) -> IncidentRecord | None:
        """Apply user-editable field changes; the local change is kept if the write fails."""
        if not isinstance(patch, IncidentPatch):
            patch = IncidentPatch.model_validate(patch)
        return await self._update(incident_id, patch.changes(), operation="update notification")

    async def delete(self, incident_id: str) -> None:
        """Remove an incident locally, then remotely.

        The record is not reinserted if the remote delete fails; the error
        is re-raised and a later :meth:`refresh` restores it.
        """
        if self.get_by_id(incident_id) is None:
            _logger.debug("delete: incident %s not cached, ignoring", incident_id)
            return

        self._incidents = remove_from(self._incidents, incident_id)
        self._notify()

        with self._pending.track(incident_id):
            try:
                await self._store.delete_incident(incident_id)
            except RemoteError:
                _logger.warning("Failed to delete notification %s", incident_id, exc_info=True)
                raise

    async def toggle_follow(self, incident_id: str) -> tuple[str, ...] | None:
        """Follow or unfollow an incident as the active identity.

        Returns the new follower tuple, or ``None`` when there is no active
        identity or the record is not cached. A failed write is not raised:
        the cache reconciles with :meth:`refresh` instead and the follower
        tuple of the reconciled record is returned (``None`` if it is gone).
        """
        identity = self._identity
        if identity is None:
            return None
        current = self.get_by_id(incident_id)
        if current is None:
            return None

        followers = toggled_followers(current.followed_by, identity.id)
        self._apply(replace_record(current, {"followed_by": followers}))

        generation = self._generation
        with self._pending.track(incident_id):
            try:
                await self._store.patch_incident(incident_id, {"followedBy": list(followers)})
            except RemoteError:
                if generation != self._generation:
                    _logger.warning("Failed to toggle follow on %s after close", incident_id, exc_info=True)
                    return None
                _logger.warning("Failed to toggle follow on %s, refreshing", incident_id, exc_info=True)
                await self.refresh()
                reconciled = self.get_by_id(incident_id)
                return reconciled.followed_by if reconciled is not None else None
        return followers
