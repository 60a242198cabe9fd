"""CLI commands for bible-reader."""

import uuid

import typer

from bible_reader.cli.reader import app as reader_app
from bible_reader.cli.v11n import app as v11n_app
from bible_reader.core.logging import bind_correlation_id, reset_correlation_id

main_app = typer.Typer(
    name="bible-reader",
    help="Bible reader CLI",
    no_args_is_help=True,
)
main_app.add_typer(reader_app, name="db")
main_app.add_typer(v11n_app, name="v11n")


@main_app.callback()
def _invocation(ctx: typer.Context) -> None:
    """Bind one correlation id to every log record of this invocation."""
    token = bind_correlation_id(uuid.uuid4().hex)
    ctx.call_on_close(lambda: reset_correlation_id(token))


def main() -> None:
    """Entry point for the CLI."""
    main_app()


__all__ = ["main", "main_app"]
