"""CLI commands for syncing and querying the Bible database."""

from __future__ import annotations

import asyncio
import re
from typing import List

import typer
from rich.console import Console
from rich.table import Table

from bible_reader.bootstrap import build_default_database
from bible_reader.core.books import get_osis_id_from_book_string
from bible_reader.core.models import (
    BibleCrossReference,
    BibleReferenceRange,
    ContentNode,
    PhraseList,
    Section,
)
from bible_reader.services.database import Database

app = typer.Typer(name="db", help="Sync and query the Bible database")
console = Console()

REFERENCE_RE = re.compile(r"^(?P<book>.+?)\s*(?P<chapter>\d+):(?P<verse>\d+)$")


def _get_database() -> Database:
    """Get the database façade with default adapters."""
    return build_default_database()


async def _checked(database: Database) -> Database:
    await database.database_is_available()
    return database


def parse_cross_reference(text: str) -> BibleCrossReference:
    """Parse ``"Book Chapter:Verse"`` (e.g. ``"Gen 1:1"``) into a cross reference."""
    match = REFERENCE_RE.match(text.strip())
    if not match:
        raise typer.BadParameter(f"'{text}' is not of the form 'Book Chapter:Verse'")
    osis_id = get_osis_id_from_book_string(match.group("book"))
    if not osis_id:
        raise typer.BadParameter(f"unknown book '{match.group('book')}'")
    return BibleCrossReference(
        key=text,
        range=BibleReferenceRange(
            book_osis_id=osis_id,
            version_chapter_num=int(match.group("chapter")),
            version_verse_num=int(match.group("verse")),
        ),
    )


def _print_nodes(nodes: List[ContentNode], depth: int = 0) -> None:
    indent = "  " * depth
    for node in nodes:
        if isinstance(node, Section):
            if node.title:
                console.print(f"{indent}[bold]{node.title}[/bold]")
            _print_nodes(node.contents, depth + 1)
        elif isinstance(node, PhraseList):
            console.print(indent + " ".join(phrase.content for phrase in node.phrases))


@app.command("sync")
def sync() -> None:
    """Download the bundled database and open it locally."""
    database = _get_database()
    asyncio.run(database.set_local_database())
    if database.force_remote:
        console.print("[yellow]Local database unavailable; using the remote engine.[/yellow]")
        raise typer.Exit(1)
    console.print("[green]Local database synchronized.[/green]")


@app.command("status")
def status() -> None:
    """Report whether the local database matches the bundled asset."""
    database = _get_database()
    available = asyncio.run(database.database_is_available())
    if available:
        console.print("[green]Local database is up to date.[/green]")
    else:
        console.print("[yellow]Local database is missing or stale; remote mode.[/yellow]")


@app.command("books")
def list_books() -> None:
    """List the books of the default version."""
    database = asyncio.run(_checked(_get_database()))
    books = asyncio.run(database.get_books())
    if not books:
        console.print("[dim]No books found.[/dim]")
        return

    table = Table(title="Books")
    table.add_column("OSIS", style="cyan")
    table.add_column("Title")
    table.add_column("Chapters", justify="right")
    for book in books:
        table.add_row(book.osis_id, book.title, str(book.num_chapters))
    console.print(table)


@app.command("versions")
def list_versions() -> None:
    """List the versions the engine can serve."""
    database = asyncio.run(_checked(_get_database()))
    versions = asyncio.run(database.get_versions())
    if not versions:
        console.print("[dim]No versions found.[/dim]")
        return

    table = Table(title="Versions")
    table.add_column("UID", style="cyan")
    table.add_column("Title")
    table.add_column("Language")
    for version in versions:
        table.add_row(version.uid, version.title or "-", version.language or "-")
    console.print(table)


@app.command("chapter")
def show_chapter(
    version_uid: str = typer.Argument(..., help="Version identifier, e.g. ESV"),
    book: str = typer.Argument(..., help="Book name or OSIS id"),
    chapter: int = typer.Argument(..., help="Chapter number"),
) -> None:
    """Print one chapter."""
    osis_id = get_osis_id_from_book_string(book)
    if not osis_id:
        console.print(f"[red]Error:[/red] unknown book '{book}'")
        raise typer.Exit(1)

    database = asyncio.run(_checked(_get_database()))
    result = asyncio.run(database.get_chapter(version_uid, osis_id, chapter))
    if result is None:
        console.print("[red]Chapter could not be loaded.[/red]")
        raise typer.Exit(1)

    _print_nodes(result.contents)
    if result.next_chapter:
        console.print(
            f"\n[dim]Next: {result.next_chapter.book_osis_id} "
            f"{result.next_chapter.version_chapter_num}[/dim]"
        )


@app.command("verses")
def show_verses(
    references: List[str] = typer.Argument(..., help="References like 'Gen 1:1'"),
) -> None:
    """Print the text of each referenced verse."""
    refs = [parse_cross_reference(reference) for reference in references]
    database = asyncio.run(_checked(_get_database()))
    contents = asyncio.run(database.get_verse_contents(refs))
    for reference, text in zip(references, contents):
        console.print(f"[bold]{reference}[/bold] {text or '[dim](local database only)[/dim]'}")


@app.command("dictionary")
def show_dictionary(
    strongs: List[str] = typer.Argument(..., help="Strong's codes, e.g. H430 G3056"),
) -> None:
    """Print lexicon definitions for Strong's codes."""
    database = asyncio.run(_checked(_get_database()))
    entries = asyncio.run(database.get_dictionary_entries(strongs))
    if not entries:
        console.print("[dim]No definitions found.[/dim]")
        return
    for entry in entries:
        lemma = f" ({entry.lemma})" if entry.lemma else ""
        console.print(f"[bold cyan]{entry.strong}[/bold cyan]{lemma}: {entry.content or ''}")
