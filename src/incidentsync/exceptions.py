"""Custom exception hierarchy for incidentsync."""

from __future__ import annotations


class IncidentSyncError(Exception):
    """Base exception for all incidentsync errors."""


class ConfigError(IncidentSyncError):
    """Invalid or missing configuration."""


class NotAuthenticatedError(IncidentSyncError):
    """Operation requires an active identity but none is signed in."""


class NotAuthorizedError(IncidentSyncError):
    """Active identity lacks the role required for the operation.

    Also raised when no identity is active at all for role-gated
    operations such as emergency alert creation.
    """


class RemoteError(IncidentSyncError):
    """Remote store call failed (network, non-2xx, undecodable body)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        operation: str = "",
        document_id: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.operation = operation
        self.document_id = document_id
        super().__init__(message)


class RemoteNotFoundError(RemoteError):
    """Remote store reported the target document does not exist (HTTP 404)."""


class RemotePermissionError(RemoteError):
    """Remote store rejected the caller's credentials (HTTP 401/403).

    The session token is missing, expired, or the store's security rules
    deny the write for this identity.
    """
