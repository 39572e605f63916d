# ABOUTME: The `libris edit` command for changing fields of an owned book.
# ABOUTME: Only options actually given are written; an empty string is a real value.

from pathlib import Path
from typing import Any

import click
from rich.console import Console

from libris.cli.options import cover_option, db_option, session_option, upload_option
from libris.cli.runtime import open_catalog, resolve_session_file, resolve_upload_dir
from libris.cli.session_file import read_token
from libris.core.covers import cover_path, stage_cover
from libris.db.mapping import BookUpdate
from libris.errors import LibraryError

console = Console()

# --clear names mapped to book columns
_CLEARABLE = {
    "title": "title",
    "author": "author",
    "genre": "genre",
    "rating": "rating",
    "content": "content",
    "cover": "cover_image",
}


@click.command("edit")
@click.argument("book_id", type=int)
@click.option("--title", default=None, help="New title.")
@click.option("--author", default=None, help="New author name.")
@click.option("--genre", default=None, help="New genre.")
@click.option("--rating", type=float, default=None, help="New rating.")
@click.option("--content", default=None, help="New notes or review text.")
@click.option(
    "--clear",
    "clear",
    multiple=True,
    type=click.Choice(sorted(_CLEARABLE)),
    help="Remove a stored value (repeatable).",
)
@cover_option
@db_option
@session_option
@upload_option
def edit(
    book_id: int,
    title: str | None,
    author: str | None,
    genre: str | None,
    rating: float | None,
    content: str | None,
    cover: Path | None,
    clear: tuple[str, ...],
    db_path: Path | None,
    session_file: Path | None,
    upload_dir: Path | None,
) -> None:
    """Edit a book you own."""
    token = read_token(resolve_session_file(session_file))
    covers = resolve_upload_dir(upload_dir)

    supplied: dict[str, Any] = {
        name: value
        for name, value in (
            ("title", title),
            ("author", author),
            ("genre", genre),
            ("rating", rating),
            ("content", content),
        )
        if value is not None
    }

    for name in clear:
        column = _CLEARABLE[name]
        if column in supplied or (column == "cover_image" and cover is not None):
            raise click.UsageError(f"Cannot both set and clear {name}.")
        supplied[column] = None

    with open_catalog(db_path) as library:
        if cover is not None:
            supplied["cover_image"] = stage_cover(cover, covers)
        update = BookUpdate(**supplied)
        try:
            library.access.edit_book(token, book_id, update)
        except LibraryError:
            if cover is not None:
                cover_path(covers, supplied["cover_image"]).unlink(missing_ok=True)
            raise

    if update.is_empty:
        console.print(f"[yellow]No changes for book {book_id}.[/yellow]")
        return
    console.print(f"Updated book {book_id}: {', '.join(update.changes())}.")
