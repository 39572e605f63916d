# ABOUTME: The `libris ls` command for listing the logged-in user's books.
# ABOUTME: Displays a Rich table of every book the user owns.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from libris.cli.options import db_option, session_option
from libris.cli.runtime import open_catalog, resolve_session_file
from libris.cli.session_file import read_token

console = Console()


@click.command("ls")
@db_option
@session_option
def ls(db_path: Path | None, session_file: Path | None) -> None:
    """List the books in your library."""
    token = read_token(resolve_session_file(session_file))
    with open_catalog(db_path) as library:
        books = library.access.list_my_books(token)

    if not books:
        console.print("[yellow]No books in your library.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Genre")
    table.add_column("Rating", justify="right")

    for book in books:
        table.add_row(
            str(book.id),
            escape(book.title or "") or "[dim]untitled[/dim]",
            escape(book.author or "") or "[dim]unknown[/dim]",
            escape(book.genre or ""),
            f"{book.rating:g}" if book.rating is not None else "",
        )

    console.print(table)
    console.print(f"\n[dim]{len(books)} book(s)[/dim]")
