"""
Root Typer application for the uri-spine CLI.
"""

from __future__ import annotations

import sys

import typer
from typer import Typer

from urispine.core.logging import configure_logging
from urispine.core.settings import get_settings

app = Typer(
    name="uri-spine",
    help="uri-spine — controlled vocabulary term lookup and creation.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from urispine import __version__

        typer.echo(f"uri-spine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Override URI_SERVICE_LOG_LEVEL"),
) -> None:
    """uri-spine CLI — manage the database, vocabularies and terms."""
    settings = get_settings()
    configure_logging(
        level=log_level or settings.log_level,
        json_format=settings.log_format == "json",
        stream=sys.stderr,
        cache_loggers=False,
    )


from urispine.cli.db import app as db_app  # noqa: E402
from urispine.cli.term import app as term_app  # noqa: E402
from urispine.cli.vocab import app as vocab_app  # noqa: E402

app.add_typer(db_app, name="db", help="Database operations.")
app.add_typer(vocab_app, name="vocab", help="Vocabulary management.")
app.add_typer(term_app, name="term", help="Term management.")


if __name__ == "__main__":
    app()
