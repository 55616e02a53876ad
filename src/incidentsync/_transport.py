"""HTTP transport for the document REST API with auth and error mapping."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Protocol
from urllib.parse import urlencode

import aiohttp

from incidentsync._constants import PERMISSION_STATUS_CODES, USER_AGENT
from incidentsync._redact import redact_for_log, redact_url
from incidentsync.config import SyncConfig
from incidentsync.exceptions import RemoteError, RemoteNotFoundError, RemotePermissionError

_logger = logging.getLogger(__name__)

QueryParams = Sequence[tuple[str, str]]
TokenProvider = Callable[[], Awaitable[str | None]]


class Transport(Protocol):
    """Structural transport interface used by the endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams = (),
        payload: Mapping[str, Any] | None = None,
        operation: str = "",
        document_id: str | None = None,
    ) -> dict[str, Any]: ...


def _error_for_status(
    status: int,
    message: str,
    *,
    operation: str,
    document_id: str | None,
) -> RemoteError:
    if status == 404:
        cls: type[RemoteError] = RemoteNotFoundError
    elif status in PERMISSION_STATUS_CODES:
        cls = RemotePermissionError
    else:
        cls = RemoteError
    return cls(message, status_code=status, operation=operation, document_id=document_id)


def _error_message(text: str) -> str:
    """Extract ``error.message`` from a Google-style error body if present."""
    try:
        body = json.loads(text)
    except json.JSONDecodeError:
        return text[:200]
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message", ""))[:200]
    return text[:200]


class HttpTransport:
    """JSON-over-HTTP transport bound to one project's document root."""

    def __init__(
        self,
        config: SyncConfig,
        http_session: aiohttp.ClientSession,
        *,
        token_provider: TokenProvider | None = None,
    ) -> None:
        self._config = config
        self._http = http_session
        self._token_provider = token_provider

    async def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json; charset=UTF-8",
            "user-agent": USER_AGENT,
        }
        if self._token_provider is not None:
            token = await self._token_provider()
            if token:
                headers["authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams = (),
        payload: Mapping[str, Any] | None = None,
        operation: str = "",
        document_id: str | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the decoded JSON object body.

        Raises :class:`RemoteError` (or a subclass) for network failures,
        non-2xx statuses and bodies that are not a JSON object. An empty
        2xx body (e.g. a delete) decodes to ``{}``.
        """
        query = list(params)
        if self._config.api_key:
            query.append(("key", self._config.api_key))

        url = f"{self._config.base_url}{path}"
        headers = await self._headers()
        body = json.dumps(payload, separators=(",", ":")) if payload is not None else None

        _logger.debug("%s %s", method, redact_url(f"{url}?{urlencode(query)}" if query else url))
        if self._config.api_trace_enabled and payload is not None:
            _logger.debug("request body op=%s: %s", operation, redact_for_log(payload))

        try:
            async with self._http.request(method, url, params=query, data=body, headers=headers) as resp:
                text = await resp.text()
                status = resp.status
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise RemoteError(
                f"{operation or method} request failed: {exc}",
                operation=operation,
                document_id=document_id,
            ) from exc

        if not 200 <= status < 300:
            raise _error_for_status(
                status,
                f"HTTP {status} from {operation or path}: {_error_message(text)}",
                operation=operation,
                document_id=document_id,
            )

        if not text.strip():
            return {}

        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RemoteError(
                f"Invalid JSON from {operation or path}: {text[:200]}",
                status_code=status,
                operation=operation,
                document_id=document_id,
            ) from exc

        if not isinstance(result, dict):
            raise RemoteError(
                f"Expected a JSON object from {operation or path}",
                status_code=status,
                operation=operation,
                document_id=document_id,
            )

        if self._config.api_trace_enabled:
            _logger.debug("response body op=%s: %s", operation, redact_for_log(result))
        return result
