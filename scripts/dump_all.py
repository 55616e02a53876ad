#!/usr/bin/env python3
"""Dump every incident and emergency alert incidentsync can fetch.

Lists both collections through the remote store, printing the parsed
model fields so schema drift in the stored documents is easy to spot.

Usage
-----
Set environment variables and run::

    export INCIDENTSYNC_PROJECT_ID="city-ops"
    export INCIDENTSYNC_API_KEY="..."
    python scripts/dump_all.py

Options::

    --id-token TOKEN     Send TOKEN as bearer credentials
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
    --skip-incidents     Skip the incidents collection
    --skip-alerts        Skip the emergency alerts collection
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydantic import BaseModel  # noqa: E402

from incidentsync import FirestoreRemoteStore, RemoteError, SyncConfig  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _format_field(key: str, value: Any, indent: int = 2) -> str:
    prefix = " " * indent
    if isinstance(value, (list, tuple)):
        if not value:
            return f"{prefix}{key}: []"
        return "\n".join([f"{prefix}{key}:", *(f"{prefix}    - {item}" for item in value)])
    if isinstance(value, BaseModel):
        lines = [f"{prefix}{key}:"]
        for name in type(value).model_fields:
            lines.append(_format_field(name, getattr(value, name), indent + 4))
        return "\n".join(lines)
    return f"{prefix}{key}: {value}"


def _print_model(name: str, obj: BaseModel, out: list[str]) -> dict[str, Any]:
    """Pretty-print a document model and return its wire form."""
    out.append(f"\n  ── {name} ──")
    for key in type(obj).model_fields:
        out.append(_format_field(key, getattr(obj, key)))
    return obj.model_dump(by_alias=True, mode="json")


# ── main ─────────────────────────────────────────────────────


async def dump_collection(
    name: str,
    fetch: Any,
    *,
    out: list[str],
) -> dict[str, Any]:
    """List one collection and collect its documents or the failure."""
    out.append(_section(name.upper()))
    try:
        records = await fetch()
    except RemoteError as exc:
        out.append(f"  !! {name} failed: {exc}")
        return {"error": str(exc), "status_code": exc.status_code}

    out.append(f"  count     : {len(records)}")
    return {"documents": [_print_model(f"{name} id={r.id}", r, out) for r in records]}


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump all incidents and alerts for debugging / development.",
    )
    parser.add_argument("--id-token", help="Bearer token to send with every request")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--skip-incidents", action="store_true", help="Skip the incidents collection")
    parser.add_argument("--skip-alerts", action="store_true", help="Skip the emergency alerts collection")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = SyncConfig.from_env()
    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "project_id": config.project_id,
        "database": config.database,
    }

    out: list[str] = []
    out.append(_section("incidentsync dump_all"))
    out.append(f"  time      : {result['timestamp']}")
    out.append(f"  database  : {config.documents_root}")

    async def _token() -> str | None:
        return args.id_token

    async with FirestoreRemoteStore(config, token_provider=_token) as store:
        if not args.skip_incidents:
            result["incidents"] = await dump_collection("incidents", store.list_incidents, out=out)
        if not args.skip_alerts:
            result["alerts"] = await dump_collection("alerts", store.list_alerts, out=out)

    # ── Output ──
    if args.json_mode:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
        return

    text = "\n".join(out)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(text)


if __name__ == "__main__":
    asyncio.run(main())
