"""
CLI utility helpers — service construction and output formatting.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import asdict, is_dataclass
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from urispine.core.errors import UriServiceError
from urispine.core.service import UriService
from urispine.core.settings import UriServiceSettings

console = Console()
err_console = Console(stderr=True)


# ── Service helper ───────────────────────────────────────────────────────


def make_service(
    database: str | None = None,
    solr_url: str | None = None,
    local_uri_base: str | None = None,
) -> UriService:
    """Build a service from ``URI_SERVICE_*`` settings, with CLI overrides."""
    overrides = {
        "database_url": database,
        "solr_url": solr_url,
        "local_uri_base": local_uri_base,
    }
    settings = UriServiceSettings(**{k: v for k, v in overrides.items() if v})
    return UriService.from_settings(settings)


@contextmanager
def open_service(
    database: str | None = None,
    solr_url: str | None = None,
    local_uri_base: str | None = None,
) -> Iterator[UriService]:
    """Yield a service and disconnect it afterwards.

    Service errors are printed and turned into exit code 1.
    """
    try:
        service = make_service(database, solr_url, local_uri_base)
    except UriServiceError as exc:
        fail(exc)
    try:
        yield service
    except UriServiceError as exc:
        fail(exc)
    finally:
        service.disconnect()


def fail(exc: UriServiceError) -> None:
    err_console.print(f"[bold red]Error[/bold red] ({exc.__class__.__name__}): {exc.message}")
    raise typer.Exit(code=1)


# ── Output helpers ───────────────────────────────────────────────────────


def _to_dict(obj: Any) -> dict[str, Any]:
    if is_dataclass(obj):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def output_records(
    records: Sequence[Any],
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render records as a table, or as JSON with ``--json``."""
    rows = [_to_dict(r) for r in records]

    if as_json:
        console.print_json(json.dumps(rows, default=str))
        return

    if not rows:
        console.print(f"[dim]No {title.lower() or 'results'} found.[/dim]")
        return

    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)

    table = Table(title=title or None)
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*(_cell(row.get(col)) for col in columns))
    console.print(table)


def output_record(record: Any, *, as_json: bool = False, title: str = "") -> None:
    if as_json:
        console.print_json(json.dumps(_to_dict(record), default=str))
        return
    table = Table(title=title or None, show_header=False)
    table.add_column("field", style="bold")
    table.add_column("value")
    for key, value in _to_dict(record).items():
        table.add_row(key, _cell(value))
    console.print(table)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)
