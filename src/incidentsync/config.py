"""Client configuration for incidentsync."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from incidentsync._constants import (
    ALERTS_COLLECTION,
    BASE_URL,
    DEFAULT_DATABASE,
    DEFAULT_PAGE_SIZE,
    INCIDENTS_COLLECTION,
)
from incidentsync.exceptions import ConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class SyncConfig:
    """Remote store configuration.

    Parameters
    ----------
    project_id : str
        Project hosting the document database.
    api_key : str or None
        Web API key appended as ``key=`` to every request when set.
    base_url : str
        Document REST API base URL. Defaults to the Firestore v1 endpoint.
    database : str
        Database id inside the project.
    incidents_collection : str
        Collection holding incident records.
    alerts_collection : str
        Collection holding emergency alerts.
    page_size : int
        Documents requested per page when listing a collection.
    api_trace_enabled : bool
        Log (redacted) request and response bodies at DEBUG level.
    """

    project_id: str
    api_key: str | None = None
    base_url: str = BASE_URL
    database: str = DEFAULT_DATABASE
    incidents_collection: str = INCIDENTS_COLLECTION
    alerts_collection: str = ALERTS_COLLECTION
    page_size: int = DEFAULT_PAGE_SIZE
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if not self.project_id or not self.project_id.strip():
            raise ConfigError("project_id must be non-empty")
        if self.page_size <= 0:
            raise ConfigError(f"page_size must be positive, got {self.page_size}")

    @property
    def documents_root(self) -> str:
        """Path of the database's document root, relative to ``base_url``."""
        return f"/projects/{self.project_id}/databases/{self.database}/documents"

    @classmethod
    def from_env(cls, **overrides: Any) -> SyncConfig:
        """Create configuration from environment variables.

        Reads ``INCIDENTSYNC_PROJECT_ID`` and optional ``INCIDENTSYNC_*``
        variables. Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        SyncConfig
            Populated configuration.

        Raises
        ------
        ConfigError
            If no project id is available or a numeric variable is malformed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "INCIDENTSYNC_PROJECT_ID": "project_id",
            "INCIDENTSYNC_API_KEY": "api_key",
            "INCIDENTSYNC_BASE_URL": "base_url",
            "INCIDENTSYNC_DATABASE": "database",
            "INCIDENTSYNC_INCIDENTS_COLLECTION": "incidents_collection",
            "INCIDENTSYNC_ALERTS_COLLECTION": "alerts_collection",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # page_size is numeric, handle separately
        page_env = env.get("INCIDENTSYNC_PAGE_SIZE")
        if page_env is not None and "page_size" not in overrides:
            try:
                config_kwargs["page_size"] = int(page_env)
            except ValueError as exc:
                raise ConfigError(f"INCIDENTSYNC_PAGE_SIZE must be an integer, got {page_env!r}") from exc

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("INCIDENTSYNC_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        if "project_id" not in config_kwargs:
            raise ConfigError("INCIDENTSYNC_PROJECT_ID is not set")

        return cls(**config_kwargs)
