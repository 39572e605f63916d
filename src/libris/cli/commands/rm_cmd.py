# ABOUTME: The `libris rm` command for deleting an owned book.
# ABOUTME: Removes the record and the user's ownership of it in one step.

from pathlib import Path

import click
from rich.console import Console

from libris.cli.options import db_option, session_option
from libris.cli.runtime import open_catalog, resolve_session_file
from libris.cli.session_file import read_token

console = Console()


@click.command("rm")
@click.argument("book_id", type=int)
@db_option
@session_option
def rm(book_id: int, db_path: Path | None, session_file: Path | None) -> None:
    """Delete a book you own."""
    token = read_token(resolve_session_file(session_file))
    with open_catalog(db_path) as library:
        library.access.delete_book(token, book_id)

    console.print(f"Deleted book {book_id}.")
