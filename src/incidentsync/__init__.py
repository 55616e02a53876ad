"""incidentsync - Async client-side data layer for a collaborative incident tracker."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("incidentsync")
except PackageNotFoundError:
    __version__ = "0+local"
from incidentsync.authz import can_create_alert, require_admin, require_identity
from incidentsync.cache import NotificationCache
from incidentsync.config import SyncConfig
from incidentsync.exceptions import (
    ConfigError,
    IncidentSyncError,
    NotAuthenticatedError,
    NotAuthorizedError,
    RemoteError,
    RemoteNotFoundError,
    RemotePermissionError,
)
from incidentsync.models import (
    CreateIncidentData,
    EmergencyAlert,
    Identity,
    IncidentPatch,
    IncidentRecord,
    IncidentStatus,
    Location,
    Role,
)
from incidentsync.remote import FirestoreRemoteStore, RemoteStore
from incidentsync.session import SessionProvider, SessionState

__all__ = [
    "__version__",
    "ConfigError",
    "CreateIncidentData",
    "EmergencyAlert",
    "FirestoreRemoteStore",
    "Identity",
    "IncidentPatch",
    "IncidentRecord",
    "IncidentStatus",
    "IncidentSyncError",
    "Location",
    "NotAuthenticatedError",
    "NotAuthorizedError",
    "NotificationCache",
    "RemoteError",
    "RemoteNotFoundError",
    "RemotePermissionError",
    "RemoteStore",
    "Role",
    "SessionProvider",
    "SessionState",
    "SyncConfig",
    "can_create_alert",
    "require_admin",
    "require_identity",
]
