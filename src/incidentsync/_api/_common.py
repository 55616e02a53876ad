"""Shared helpers for the collection endpoint modules.

This module centralizes the repeated document operations:
- building collection and document paths
- paging through a collection listing
- create / patch / delete with the typed-value codec

It is internal to incidentsync and may change at any time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import ValidationError

from incidentsync._api._codec import decode_document, document_id, encode_fields
from incidentsync._constants import ORDER_FIELD
from incidentsync._transport import Transport
from incidentsync.config import SyncConfig
from incidentsync.exceptions import RemoteError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def collection_path(config: SyncConfig, collection: str) -> str:
    return f"{config.documents_root}/{quote(collection, safe='')}"


def document_path(config: SyncConfig, collection: str, doc_id: str) -> str:
    return f"{collection_path(config, collection)}/{quote(doc_id, safe='')}"


async def list_documents(
    config: SyncConfig,
    transport: Transport,
    collection: str,
    parse: Callable[[dict[str, Any]], T],
    *,
    operation: str,
) -> list[T]:
    """Fetch every document of *collection*, newest first.

    Documents that cannot be decoded or fail *parse* validation are skipped
    with a warning so one malformed record does not hide the others.
    """
    items: list[T] = []
    page_token: str | None = None
    while True:
        params = [("orderBy", f"{ORDER_FIELD} desc"), ("pageSize", str(config.page_size))]
        if page_token:
            params.append(("pageToken", page_token))
        response = await transport.request(
            "GET",
            collection_path(config, collection),
            params=params,
            operation=operation,
        )

        documents = response.get("documents", [])
        if not isinstance(documents, list):
            raise RemoteError(f"{operation}: 'documents' is not a list", operation=operation)
        for document in documents:
            try:
                items.append(parse(decode_document(document)))
            except (ValueError, TypeError, ValidationError) as exc:
                _logger.warning(
                    "Skipping malformed document in %s (%s): %s",
                    collection,
                    document.get("name", "?") if isinstance(document, Mapping) else "?",
                    exc,
                )

        next_token = response.get("nextPageToken")
        if not next_token:
            return items
        page_token = str(next_token)


async def create_document(
    config: SyncConfig,
    transport: Transport,
    collection: str,
    fields: Mapping[str, Any],
    *,
    operation: str,
) -> str:
    """Create a document with a store-assigned id and return that id."""
    response = await transport.request(
        "POST",
        collection_path(config, collection),
        payload={"fields": encode_fields(fields)},
        operation=operation,
    )
    name = response.get("name")
    if not isinstance(name, str):
        raise RemoteError(f"{operation}: response carries no document name", operation=operation)
    try:
        return document_id(name)
    except ValueError as exc:
        raise RemoteError(f"{operation}: {exc}", operation=operation) from exc


async def patch_document(
    config: SyncConfig,
    transport: Transport,
    collection: str,
    doc_id: str,
    fields: Mapping[str, Any],
    *,
    operation: str,
) -> None:
    """Overwrite the given top-level fields of an existing document.

    Only keys present in *fields* are written (``updateMask``); list and map
    values replace the stored value as a whole.
    """
    params = [("updateMask.fieldPaths", str(key)) for key in fields]
    params.append(("currentDocument.exists", "true"))
    await transport.request(
        "PATCH",
        document_path(config, collection, doc_id),
        params=params,
        payload={"fields": encode_fields(fields)},
        operation=operation,
        document_id=doc_id,
    )


async def delete_document(
    config: SyncConfig,
    transport: Transport,
    collection: str,
    doc_id: str,
    *,
    operation: str,
) -> None:
    await transport.request(
        "DELETE",
        document_path(config, collection, doc_id),
        operation=operation,
        document_id=doc_id,
    )
