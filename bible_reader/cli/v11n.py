"""CLI commands for versification rule import."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from bible_reader.adapters.remote_engine import HttpBibleEngine
from bible_reader.adapters.v11n_store import SqliteV11nRuleStore
from bible_reader.core.exceptions import V11nImportError
from bible_reader.core.ports import V11nRuleSinkPort
from bible_reader.services.v11n_import import import_v11n_rules

app = typer.Typer(name="v11n", help="Versification rule tools")
console = Console()


@app.command("import")
def import_rules(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Rules TSV file"),
    database: Optional[Path] = typer.Option(
        None, "--database", "-d", help="SQLite database receiving the rules"
    ),
    remote: bool = typer.Option(
        False, "--remote", help="Submit to the remote engine instead of a SQLite database"
    ),
) -> None:
    """Parse a v11n rules file and load every rule in one batch."""
    sink: V11nRuleSinkPort = HttpBibleEngine() if remote else SqliteV11nRuleStore(database)
    try:
        count = asyncio.run(import_v11n_rules(path, sink))
    except V11nImportError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    console.print(f"[green]Imported {count} v11n rules.[/green]")
