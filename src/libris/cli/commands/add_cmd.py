# ABOUTME: The `libris add` command for cataloging a new book.
# ABOUTME: Stages an optional cover image, then creates the book owned by the logged-in user.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from libris.cli.options import cover_option, db_option, session_option, upload_option
from libris.cli.runtime import open_catalog, resolve_session_file, resolve_upload_dir
from libris.cli.session_file import read_token
from libris.core.covers import cover_path, stage_cover
from libris.db.mapping import BookFields
from libris.errors import LibraryError

console = Console()


@click.command("add")
@click.option("--title", required=True, help="Book title.")
@click.option("--author", default=None, help="Author name.")
@click.option("--genre", default=None, help="Genre.")
@click.option("--rating", type=float, default=None, help="Your rating.")
@click.option("--content", default=None, help="Notes or review text.")
@cover_option
@db_option
@session_option
@upload_option
def add(
    title: str,
    author: str | None,
    genre: str | None,
    rating: float | None,
    content: str | None,
    cover: Path | None,
    db_path: Path | None,
    session_file: Path | None,
    upload_dir: Path | None,
) -> None:
    """Add a book to your library."""
    token = read_token(resolve_session_file(session_file))
    covers = resolve_upload_dir(upload_dir)

    with open_catalog(db_path) as library:
        cover_ref = stage_cover(cover, covers) if cover else None
        try:
            book_id = library.access.create_book(
                token,
                BookFields(
                    title=title,
                    author=author,
                    content=content,
                    genre=genre,
                    rating=rating,
                    cover_image=cover_ref,
                ),
            )
        except LibraryError:
            if cover_ref:
                cover_path(covers, cover_ref).unlink(missing_ok=True)
            raise

    console.print(f"Added [bold]{escape(title)}[/bold] as book {book_id}.")
