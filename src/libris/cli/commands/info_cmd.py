# ABOUTME: The `libris info` command for displaying one book in full.
# ABOUTME: Shows every field of a book the logged-in user owns.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from libris.cli.options import db_option, session_option, upload_option
from libris.cli.runtime import open_catalog, resolve_session_file, resolve_upload_dir
from libris.cli.session_file import read_token
from libris.core.covers import cover_path

console = Console()


@click.command("info")
@click.argument("book_id", type=int)
@db_option
@session_option
@upload_option
def info(
    book_id: int,
    db_path: Path | None,
    session_file: Path | None,
    upload_dir: Path | None,
) -> None:
    """Show all details of a book by ID."""
    token = read_token(resolve_session_file(session_file))
    with open_catalog(db_path) as library:
        book = library.access.view_book(token, book_id)

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=10)
    table.add_column("Value")

    table.add_row("ID", str(book.id))
    table.add_row("Title", escape(book.title or ""))
    table.add_row("Author", escape(book.author or "") or "unknown")
    if book.genre:
        table.add_row("Genre", escape(book.genre))
    if book.rating is not None:
        table.add_row("Rating", f"{book.rating:g}")
    if book.content:
        table.add_row("Content", escape(book.content))
    if book.cover_image:
        table.add_row("Cover", escape(str(cover_path(resolve_upload_dir(upload_dir), book.cover_image))))
    table.add_row("Added", book.created_at)
    table.add_row("Modified", book.updated_at)

    console.print(table)
