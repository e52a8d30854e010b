"""
CLI: ``uri-spine db`` — store schema and connectivity commands.
"""

from __future__ import annotations

import httpx
import typer
from sqlalchemy.exc import OperationalError

from urispine.cli.utils import console, err_console, open_service

app = typer.Typer(no_args_is_help=True)


@app.command()
def setup(
    database: str | None = typer.Option(None, "--database", "-d", help="Database URL"),
    solr_url: str | None = typer.Option(None, "--solr", help="Solr core URL"),
) -> None:
    """Create the required tables (existing tables are skipped)."""
    with open_service(database, solr_url) as service:
        created = service.create_required_tables()
    if created:
        console.print(f"[green]Created tables:[/green] {', '.join(created)}")
    else:
        console.print("[dim]All required tables already exist.[/dim]")


@app.command()
def check(
    database: str | None = typer.Option(None, "--database", "-d", help="Database URL"),
    solr_url: str | None = typer.Option(None, "--solr", help="Solr core URL"),
) -> None:
    """Check store and index connectivity and table presence."""
    with open_service(database, solr_url) as service:
        try:
            service.test_connection()
        except (OperationalError, httpx.HTTPError) as exc:
            err_console.print(f"[bold red]Connection failed:[/bold red] {exc}")
            raise typer.Exit(code=1) from exc
        tables_ok = service.required_tables_exist()

    console.print("[green]Connected[/green] to database and search index.")
    if not tables_ok:
        err_console.print("[yellow]Required tables not found.[/yellow] Run: uri-spine db setup")
        raise typer.Exit(code=1)
    console.print("[green]Required tables present.[/green]")
