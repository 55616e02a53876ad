"""Helpers for safe debug logging.

Request traces carry bearer tokens, the project API key and the reporting
identity's contact details. Everything routed to a DEBUG log by the
transport goes through :func:`redact_for_log` or :func:`redact_url` first.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_REDACTED = "<redacted>"

# Compared case-insensitively against mapping keys and query parameter names.
_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "authorization",
        "idtoken",
        "refreshtoken",
        "accesstoken",
        "token",
        "key",
        "apikey",
        "password",
        "email",
    }
)


def _is_sensitive(key: object) -> bool:
    return str(key).lower() in _SENSITIVE_KEYS


def redact_url(url: str) -> str:
    """Return *url* with sensitive query parameters (``key=``) masked."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [(k, _REDACTED if _is_sensitive(k) else v) for k, v in parse_qsl(parts.query, keep_blank_values=True)]
    return urlunsplit(parts._replace(query=urlencode(query, safe="<>")))


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Mapping values under sensitive keys are replaced wholesale, which also
    covers typed document values such as ``{"email": {"stringValue": ...}}``.
    """
    if _depth > 20:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {
            str(k): _REDACTED if _is_sensitive(k) else redact_for_log(v, max_string=max_string, _depth=_depth + 1)
            for k, v in value.items()
        }

    if isinstance(value, Sequence):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
