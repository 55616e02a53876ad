"""Authorization gate for privileged writes.

Pure, synchronous checks. Callers run them before issuing any remote call
so an unauthorized request never reaches the store.
"""

from __future__ import annotations

from incidentsync.exceptions import NotAuthenticatedError, NotAuthorizedError
from incidentsync.models.identity import Identity


def can_create_alert(identity: Identity | None) -> bool:
    return identity is not None and identity.is_admin


def require_identity(identity: Identity | None) -> Identity:
    if identity is None:
        raise NotAuthenticatedError("User not authenticated")
    return identity


def require_admin(identity: Identity | None) -> Identity:
    if identity is None or not can_create_alert(identity):
        raise NotAuthorizedError("Only admins can create emergency alerts")
    return identity
