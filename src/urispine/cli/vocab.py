"""
CLI: ``uri-spine vocab`` — vocabulary management.
"""

from __future__ import annotations

import typer

from urispine.cli.utils import console, err_console, open_service, output_record, output_records

app = typer.Typer(no_args_is_help=True)


@app.command("create")
def create_vocabulary(
    string_key: str = typer.Argument(..., help="Vocabulary key (lowercase, digits, underscore)"),
    display_label: str = typer.Argument(..., help="Human readable label"),
    database: str | None = typer.Option(None, "--database", "-d"),
    solr_url: str | None = typer.Option(None, "--solr"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Create a vocabulary."""
    with open_service(database, solr_url) as service:
        vocabulary = service.create_vocabulary(string_key, display_label)
    output_record(vocabulary, as_json=json_out, title="Vocabulary")


@app.command("list")
def list_vocabularies(
    database: str | None = typer.Option(None, "--database", "-d"),
    solr_url: str | None = typer.Option(None, "--solr"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List all vocabularies."""
    with open_service(database, solr_url) as service:
        vocabularies = service.list_vocabularies()
    output_records(vocabularies, as_json=json_out, title="Vocabularies")


@app.command("update")
def update_vocabulary(
    string_key: str = typer.Argument(...),
    display_label: str = typer.Argument(...),
    database: str | None = typer.Option(None, "--database", "-d"),
    solr_url: str | None = typer.Option(None, "--solr"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Change a vocabulary's display label."""
    with open_service(database, solr_url) as service:
        vocabulary = service.update_vocabulary(string_key, display_label)
    output_record(vocabulary, as_json=json_out, title="Vocabulary")


@app.command("delete")
def delete_vocabulary(
    string_key: str = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    database: str | None = typer.Option(None, "--database", "-d"),
    solr_url: str | None = typer.Option(None, "--solr"),
) -> None:
    """Delete a vocabulary. Its terms are left in place."""
    if not yes:
        typer.confirm(f"Delete vocabulary {string_key!r}?", abort=True)
    with open_service(database, solr_url) as service:
        if service.find_vocabulary(string_key) is None:
            err_console.print(f"[yellow]No vocabulary with key {string_key!r}.[/yellow]")
        service.delete_vocabulary(string_key)
    console.print(f"[green]Deleted[/green] {string_key}")
