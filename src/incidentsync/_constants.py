"""Internal constants shared across the library."""

BASE_URL = "https://firestore.googleapis.com/v1"
USER_AGENT = "incidentsync/aiohttp"
DEFAULT_DATABASE = "(default)"
DEFAULT_PAGE_SIZE = 300

INCIDENTS_COLLECTION = "notifications"
ALERTS_COLLECTION = "emergencyAlerts"

# Wire key used to order both collections newest-first.
ORDER_FIELD = "createdAt"

PERMISSION_STATUS_CODES: frozenset[int] = frozenset({401, 403})
